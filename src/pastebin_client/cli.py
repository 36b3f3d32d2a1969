"""pastebin-client CLI - Command-line interface."""

import argparse
import json
import logging
import sys

import structlog

from pastebin_client.api.pastebin import PASTE_URL_PREFIX, create_client, get_raw_paste
from pastebin_client.config.loader import load_config
from pastebin_client.config.schema import AppConfig, VisibilityName
from pastebin_client.exceptions import ConfigurationError, PastebinClientError
from pastebin_client.models.paste import CreatePasteRequest, Expiration, Paste, Visibility


def setup_logging(level: str = "INFO") -> None:
    """Configure logging.

    structlog output goes to stderr so paste content on stdout stays clean.
    """
    level_int = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=level_int,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_int),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def load_config_or_exit(config_path: str | None = None) -> AppConfig:
    """Load configuration or exit with error message."""
    try:
        return load_config(config_path)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)


def paste_to_dict(paste: Paste) -> dict:
    """Convert a paste to a dict for display."""
    return {
        "key": paste.key,
        "title": paste.title,
        "user": paste.user,
        "size": paste.size,
        "date": paste.date.isoformat(),
        "expire_date": paste.expire_date.isoformat() if paste.expire_date else None,
        "visibility": paste.visibility.name.lower(),
        "syntax": paste.syntax,
        "hits": paste.hits,
        "url": paste.url,
        "raw_url": paste.raw_url,
    }


def print_pastes(pastes: list[Paste], as_json: bool) -> None:
    """Print a paste listing as JSON or a table."""
    if as_json:
        print(json.dumps([paste_to_dict(p) for p in pastes], indent=2))
        return

    if not pastes:
        print("(no pastes)")
        return

    for paste in pastes:
        title = paste.title or "(untitled)"
        syntax = paste.syntax or "-"
        print(
            f"{paste.key:<10} {paste.date:%Y-%m-%d %H:%M}  "
            f"{paste.visibility.name.lower():<8} {syntax:<12} {paste.hits:>6}  {title}"
        )


# =============================================================================
# Commands
# =============================================================================

def cmd_info(args: argparse.Namespace, config: AppConfig) -> int:
    """Show current configuration and test the login."""
    print("pastebin-client Configuration")
    print("=" * 40)
    print(f"Username: {config.pastebin.username or '(guest)'}")
    print(f"Timeout: {config.pastebin.timeout_seconds}s")
    print(f"Default Syntax: {config.defaults.syntax}")
    print(f"Default Visibility: {config.defaults.visibility.value}")
    print(f"Default Expiration: {config.defaults.expiration.value}")
    print(f"Log Level: {config.log_level.value}")
    print()

    if not config.pastebin.username:
        print("No username configured, only guest pastes can be created.")
        return 0

    print("Testing Pastebin login...")
    try:
        with create_client(config.pastebin):
            print("✓ Login successful")
    except PastebinClientError as e:
        print(f"✗ Login failed: {e}")
        return 1

    return 0


def cmd_create(args: argparse.Namespace, config: AppConfig) -> int:
    """Create a paste from a file or stdin."""
    if args.file == "-":
        code = sys.stdin.read()
    else:
        try:
            with open(args.file, encoding="utf-8") as f:
                code = f.read()
        except OSError as e:
            print(f"Error: cannot read {args.file}: {e}", file=sys.stderr)
            return 1

    visibility_name = VisibilityName(args.visibility or config.defaults.visibility.value)
    request = CreatePasteRequest(
        title=args.title or "",
        code=code,
        syntax=args.syntax or config.defaults.syntax,
        visibility=Visibility[visibility_name.name],
        expiration=Expiration(args.expire) if args.expire else config.defaults.expiration,
    )

    try:
        with create_client(config.pastebin) as client:
            key = client.create_paste(request)
    except PastebinClientError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(key)
    print(f"{PASTE_URL_PREFIX}{key}")
    return 0


def cmd_delete(args: argparse.Namespace, config: AppConfig) -> int:
    """Delete one of the user's pastes."""
    try:
        with create_client(config.pastebin) as client:
            client.delete_paste(args.key)
    except PastebinClientError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Deleted {args.key}")
    return 0


def cmd_list(args: argparse.Namespace, config: AppConfig) -> int:
    """List the user's pastes."""
    try:
        with create_client(config.pastebin) as client:
            pastes = client.list_user_pastes()
    except PastebinClientError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print_pastes(pastes, args.json)
    return 0


def cmd_show(args: argparse.Namespace, config: AppConfig) -> int:
    """Print one of the user's pastes."""
    try:
        with create_client(config.pastebin) as client:
            content = client.get_raw_user_paste(args.key)
    except PastebinClientError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    sys.stdout.write(content)
    return 0


def cmd_raw(args: argparse.Namespace, config: AppConfig) -> int:
    """Print a public paste without logging in."""
    try:
        content = get_raw_paste(
            args.key,
            timeout=config.pastebin.timeout_seconds,
            verify=config.pastebin.verify_ssl,
        )
    except PastebinClientError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    sys.stdout.write(content)
    return 0


def cmd_recent(args: argparse.Namespace, config: AppConfig) -> int:
    """List recent public pastes from the scraping API."""
    try:
        with create_client(config.pastebin) as client:
            pastes = client.get_recent_pastes()
    except PastebinClientError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print_pastes(pastes, args.json)
    return 0


# =============================================================================
# Main Entry Point
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="pastebin-client",
        description="pastebin-client - Command-line access to the Pastebin API",
    )
    parser.add_argument(
        "-c", "--config",
        help="Path to config.yaml",
        default=None,
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # info command
    subparsers.add_parser("info", help="Show configuration and test login")

    # create command
    create_parser = subparsers.add_parser("create", help="Create a paste")
    create_parser.add_argument("file", help="File to paste, or - for stdin")
    create_parser.add_argument("--title", help="Paste title")
    create_parser.add_argument("--syntax", help="Syntax highlighting format")
    create_parser.add_argument(
        "--visibility",
        choices=[v.value for v in VisibilityName],
        help="Paste visibility",
    )
    create_parser.add_argument(
        "--expire",
        choices=[e.value for e in Expiration],
        help="Expiration (N = never)",
    )

    # delete command
    delete_parser = subparsers.add_parser("delete", help="Delete one of your pastes")
    delete_parser.add_argument("key", help="Paste key")

    # list command
    list_parser = subparsers.add_parser("list", help="List your pastes")
    list_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # show command
    show_parser = subparsers.add_parser("show", help="Print one of your pastes")
    show_parser.add_argument("key", help="Paste key")

    # raw command
    raw_parser = subparsers.add_parser("raw", help="Print a public paste without logging in")
    raw_parser.add_argument("key", help="Paste key")

    # recent command
    recent_parser = subparsers.add_parser("recent", help="List recent public pastes")
    recent_parser.add_argument("--json", action="store_true", help="Output as JSON")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    # Setup logging
    log_level = "DEBUG" if args.verbose else "INFO"
    setup_logging(log_level)

    # Load config
    config = load_config_or_exit(args.config)

    # Override log level from config if not verbose
    if not args.verbose:
        setup_logging(config.log_level.value)

    # Dispatch command
    commands = {
        "info": cmd_info,
        "create": cmd_create,
        "delete": cmd_delete,
        "list": cmd_list,
        "show": cmd_show,
        "raw": cmd_raw,
        "recent": cmd_recent,
    }

    cmd_func = commands.get(args.command)
    if cmd_func:
        return cmd_func(args, config)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""Configuration loading from YAML files and environment variables."""

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from pastebin_client.config.schema import AppConfig
from pastebin_client.exceptions import ConfigurationError

# Default config search paths
DEFAULT_CONFIG_PATHS = [
    Path("config.yaml"),
    Path.home() / ".config" / "pastebin-client" / "config.yaml",
]

CONFIG_PATH_ENV_VAR = "PASTEBIN_CLIENT_CONFIG"

# Environment variable pattern: ${VAR_NAME} or ${VAR_NAME:default}
ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::([^}]*))?\}")


def _substitute_env_vars(value: Any) -> Any:
    """Recursively substitute environment variables in config values.

    Supports patterns:
    - ${VAR_NAME} - Required, raises error if not set
    - ${VAR_NAME:default} - Optional with default value
    """
    if isinstance(value, str):
        def replacer(match: re.Match[str]) -> str:
            var_name = match.group(1)
            default = match.group(2)
            env_value = os.environ.get(var_name)

            if env_value is not None:
                return env_value
            if default is not None:
                return default
            raise ConfigurationError(
                f"Environment variable '{var_name}' is required but not set"
            )

        return ENV_VAR_PATTERN.sub(replacer, value)

    if isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}

    if isinstance(value, list):
        return [_substitute_env_vars(item) for item in value]

    return value


def _find_config_file(explicit_path: Path | str | None) -> Path:
    """Find configuration file from explicit path or search default locations."""
    if explicit_path:
        path = Path(explicit_path)
        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {path}")
        return path

    for path in DEFAULT_CONFIG_PATHS:
        if path.exists():
            return path

    searched = ", ".join(str(p) for p in DEFAULT_CONFIG_PATHS)
    raise ConfigurationError(
        f"No configuration file found. Searched: {searched}. "
        f"Create one or set {CONFIG_PATH_ENV_VAR} environment variable."
    )


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load and parse YAML file."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
            if data is None:
                return {}
            if not isinstance(data, dict):
                raise ConfigurationError(f"Invalid YAML structure in {path}: expected dict")
            return data
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse YAML file {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to read file {path}: {e}") from e


def load_config(config_path: Path | str | None = None) -> AppConfig:
    """Load application configuration from YAML file.

    Args:
        config_path: Explicit path to config file. If None, searches default locations.
                    Can also be set via PASTEBIN_CLIENT_CONFIG environment variable.

    Returns:
        Validated AppConfig instance.

    Raises:
        ConfigurationError: If config file not found or validation fails.
    """
    env_config_path = os.environ.get(CONFIG_PATH_ENV_VAR)
    if env_config_path and not config_path:
        config_path = env_config_path

    path = _find_config_file(config_path)
    raw_config = _load_yaml_file(path)
    substituted = _substitute_env_vars(raw_config)

    try:
        return AppConfig.model_validate(substituted)
    except ValidationError as e:
        errors = []
        for err in e.errors():
            loc = ".".join(str(x) for x in err["loc"])
            errors.append(f"  - {loc}: {err['msg']}")
        error_list = "\n".join(errors)
        raise ConfigurationError(
            f"Configuration validation failed for {path}:\n{error_list}"
        ) from e

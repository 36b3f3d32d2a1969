"""Data models for pastebin-client."""

from pastebin_client.models.paste import (
    CreatePasteRequest,
    Expiration,
    Paste,
    Visibility,
    parse_paste_list,
    parse_scrape_listing,
)

__all__ = [
    "CreatePasteRequest",
    "Expiration",
    "Paste",
    "Visibility",
    "parse_paste_list",
    "parse_scrape_listing",
]

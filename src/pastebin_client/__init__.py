"""Client library for the Pastebin API."""

from pastebin_client.api.pastebin import PastebinClient, create_client, get_raw_paste
from pastebin_client.models.paste import CreatePasteRequest, Expiration, Paste, Visibility

__version__ = "0.1.0"

__all__ = [
    "CreatePasteRequest",
    "Expiration",
    "Paste",
    "PastebinClient",
    "Visibility",
    "create_client",
    "get_raw_paste",
]

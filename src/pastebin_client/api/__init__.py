"""Pastebin API client."""

from pastebin_client.api.pastebin import PastebinClient, create_client, get_raw_paste

__all__ = ["PastebinClient", "create_client", "get_raw_paste"]

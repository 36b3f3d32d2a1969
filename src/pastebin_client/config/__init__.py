"""Configuration management for pastebin-client."""

from pastebin_client.config.loader import load_config
from pastebin_client.config.schema import AppConfig, PastebinConfig

__all__ = ["AppConfig", "PastebinConfig", "load_config"]

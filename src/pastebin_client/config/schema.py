"""Pydantic models for configuration validation."""

from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

from pastebin_client.models.paste import Expiration


class LogLevel(str, Enum):
    """Logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class VisibilityName(str, Enum):
    """Visibility as written in config files and on the command line."""
    PUBLIC = "public"
    UNLISTED = "unlisted"
    PRIVATE = "private"


class PastebinConfig(BaseModel):
    """Pastebin account and connection configuration."""

    username: str = Field(default="", description="Account name; empty for guest pastes only")
    password: str = Field(default="", description="Account password")
    dev_key: str = Field(description="Developer API key")
    timeout_seconds: int = Field(default=30, ge=5, le=300)
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")

    @field_validator("dev_key")
    @classmethod
    def require_dev_key(cls, v: str) -> str:
        """Reject a blank developer key."""
        v = v.strip()
        if not v:
            raise ValueError("dev_key must not be empty")
        return v

    @model_validator(mode="after")
    def require_password_with_username(self) -> "PastebinConfig":
        if self.username and not self.password:
            raise ValueError("password is required when username is set")
        return self


class PasteDefaultsConfig(BaseModel):
    """Defaults applied to pastes created from the CLI."""

    syntax: str = Field(default="text")
    visibility: VisibilityName = Field(default=VisibilityName.UNLISTED)
    expiration: Expiration = Field(default=Expiration.NEVER)


class AppConfig(BaseModel):
    """Root application configuration."""

    pastebin: PastebinConfig
    defaults: PasteDefaultsConfig = Field(default_factory=PasteDefaultsConfig)
    log_level: LogLevel = Field(default=LogLevel.INFO)

    model_config = {"extra": "forbid"}

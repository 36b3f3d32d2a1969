"""Paste data models and wire-format decoders."""

import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from enum import Enum, IntEnum
from typing import Any

import structlog
from pydantic import BaseModel, Field, ValidationError, field_validator

from pastebin_client.exceptions import PasteDecodeError

logger = structlog.get_logger()

# Not part of the documented API, but serves public and unlisted pastes
RAW_URL_PREFIX = "https://pastebin.com/raw"


class Visibility(IntEnum):
    """Paste access level, as sent in api_paste_private."""
    PUBLIC = 0
    UNLISTED = 1
    PRIVATE = 2


class Expiration(str, Enum):
    """Accepted api_paste_expire_date tokens."""
    NEVER = "N"
    TEN_MINUTES = "10M"
    ONE_HOUR = "1H"
    ONE_DAY = "1D"
    ONE_WEEK = "1W"
    TWO_WEEKS = "2W"
    ONE_MONTH = "1M"
    SIX_MONTHS = "6M"
    ONE_YEAR = "1Y"


class CreatePasteRequest(BaseModel):
    """Fields for a new paste."""

    title: str = Field(default="", description="Paste name")
    code: str = Field(description="Paste body")
    syntax: str = Field(default="", description="Syntax highlighting format, e.g. 'python'")
    visibility: Visibility = Field(default=Visibility.PUBLIC)
    expiration: Expiration | None = Field(default=None, description="Unset means never")

    @property
    def effective_expiration(self) -> Expiration:
        """Expiration to send, falling back to never."""
        return self.expiration or Expiration.NEVER


class Paste(BaseModel):
    """A paste, regardless of which API listing it came from."""

    key: str
    title: str = ""
    user: str = ""
    size: int = 0
    date: datetime
    expire_date: datetime | None = Field(default=None, description="None if the paste never expires")
    visibility: Visibility = Visibility.PUBLIC
    syntax: str = ""
    hits: int = 0
    url: str = ""
    raw_url: str = ""


def _to_datetime(timestamp: int) -> datetime:
    try:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise PasteDecodeError(f"Timestamp out of range: {timestamp}") from e


def _empty_int(v: Any) -> Any:
    if v is None or v == "":
        return 0
    return v


def _empty_str(v: Any) -> Any:
    return "" if v is None else v


# =============================================================================
# XML list form (api_option=list)
# =============================================================================

class XmlPasteRecord(BaseModel):
    """One <paste> element of a user paste listing."""

    paste_key: str
    paste_date: int
    paste_title: str = ""
    paste_size: int = 0
    paste_expire_date: int = 0
    paste_private: int = 0
    paste_format_long: str = ""
    paste_format_short: str = ""
    paste_url: str = ""
    paste_hits: int = 0

    @field_validator("paste_size", "paste_expire_date", "paste_private", "paste_hits", mode="before")
    @classmethod
    def empty_to_zero(cls, v: Any) -> Any:
        return _empty_int(v)

    @field_validator(
        "paste_title", "paste_format_long", "paste_format_short", "paste_url", mode="before"
    )
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return _empty_str(v)


def paste_from_xml_record(record: XmlPasteRecord, username: str) -> Paste:
    """Convert a listing record to a Paste owned by ``username``."""
    try:
        visibility = Visibility(record.paste_private)
    except ValueError as e:
        raise PasteDecodeError(
            f"Unknown paste visibility {record.paste_private} for paste {record.paste_key}",
        ) from e

    return Paste(
        key=record.paste_key,
        title=record.paste_title,
        user=username,
        size=record.paste_size,
        date=_to_datetime(record.paste_date),
        expire_date=_to_datetime(record.paste_expire_date) if record.paste_expire_date > 0 else None,
        visibility=visibility,
        syntax=record.paste_format_short,
        hits=record.paste_hits,
        url=record.paste_url,
        raw_url=f"{RAW_URL_PREFIX}/{record.paste_key}",
    )


def parse_paste_list(fragment: str, username: str) -> list[Paste]:
    """Parse the root-less XML fragment returned by api_option=list.

    Args:
        fragment: Response body, a sequence of <paste> elements.
        username: Owner to record on every paste.

    Returns:
        Pastes in response order.

    Raises:
        PasteDecodeError: If the fragment is not well-formed or a record is invalid.
    """
    try:
        root = ET.fromstring(f"<pastes>{fragment}</pastes>")
    except ET.ParseError as e:
        raise PasteDecodeError(f"Invalid paste list XML: {e}", raw_response=fragment) from e

    pastes = []
    for element in root.findall("paste"):
        data = {child.tag: child.text for child in element}
        try:
            record = XmlPasteRecord.model_validate(data)
        except ValidationError as e:
            raise PasteDecodeError(
                f"Invalid paste record: {e.error_count()} validation errors",
                raw_response=fragment,
                details={"record": data},
            ) from e
        try:
            pastes.append(paste_from_xml_record(record, username))
        except PasteDecodeError as e:
            raise PasteDecodeError(e.message, raw_response=fragment, details={"record": data}) from e

    logger.debug("Parsed paste list", count=len(pastes), user=username)
    return pastes


# =============================================================================
# JSON scrape form (scraping API)
# =============================================================================

class ScrapePasteRecord(BaseModel):
    """One object of a scraping API listing."""

    scrape_url: str = ""
    full_url: str = ""
    date: int
    key: str
    size: int = 0
    expire: int = 0
    title: str = ""
    syntax: str = ""
    user: str = ""
    hits: int = 0

    @field_validator("size", "expire", "hits", mode="before")
    @classmethod
    def empty_to_zero(cls, v: Any) -> Any:
        return _empty_int(v)

    @field_validator("scrape_url", "full_url", "title", "syntax", "user", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return _empty_str(v)


class ScrapeListing(BaseModel):
    """Scraping API body wrapped under a single key."""

    pastes: list[ScrapePasteRecord] = Field(default_factory=list)


def paste_from_scrape_record(record: ScrapePasteRecord) -> Paste:
    """Convert a scraping API record to a Paste.

    The scraping API only surfaces public pastes.
    """
    return Paste(
        key=record.key,
        title=record.title,
        user=record.user,
        size=record.size,
        date=_to_datetime(record.date),
        expire_date=_to_datetime(record.expire) if record.expire > 0 else None,
        visibility=Visibility.PUBLIC,
        syntax=record.syntax,
        hits=record.hits,
        url=record.full_url,
        raw_url=record.scrape_url,
    )


def parse_scrape_listing(body: str) -> list[Paste]:
    """Parse the JSON array returned by the scraping API.

    Raises:
        PasteDecodeError: If the body is not a valid listing.
    """
    try:
        listing = ScrapeListing.model_validate_json(f'{{"pastes":{body}}}')
    except ValidationError as e:
        raise PasteDecodeError(
            f"Invalid scraping API response: {e.error_count()} validation errors",
            raw_response=body,
        ) from e

    try:
        pastes = [paste_from_scrape_record(record) for record in listing.pastes]
    except PasteDecodeError as e:
        raise PasteDecodeError(e.message, raw_response=body) from e
    logger.debug("Parsed scrape listing", count=len(pastes))
    return pastes

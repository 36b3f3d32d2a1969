"""Pytest configuration and fixtures."""

from collections.abc import Iterator
from urllib.parse import parse_qsl

import httpx
import pytest

from pastebin_client.api.pastebin import PastebinClient
from pastebin_client.config.schema import AppConfig, PastebinConfig


PASTE_LIST_XML = """<paste>
<paste_key>0b42rwhf</paste_key>
<paste_date>1297953260</paste_date>
<paste_title>javascript test</paste_title>
<paste_size>15</paste_size>
<paste_expire_date>1297956860</paste_expire_date>
<paste_private>0</paste_private>
<paste_format_long>JavaScript</paste_format_long>
<paste_format_short>javascript</paste_format_short>
<paste_url>https://pastebin.com/0b42rwhf</paste_url>
<paste_hits>15</paste_hits>
</paste>
<paste>
<paste_key>0C343n0d</paste_key>
<paste_date>1297694343</paste_date>
<paste_title>Welcome To Pastebin V3</paste_title>
<paste_size>490</paste_size>
<paste_expire_date>0</paste_expire_date>
<paste_private>2</paste_private>
<paste_format_long>None</paste_format_long>
<paste_format_short>text</paste_format_short>
<paste_url>https://pastebin.com/0C343n0d</paste_url>
<paste_hits>65</paste_hits>
</paste>
"""

SCRAPE_JSON = """[
    {
        "scrape_url": "https://scrape.pastebin.com/api_scrape_item.php?i=0CeaNm8Y",
        "full_url": "https://pastebin.com/0CeaNm8Y",
        "date": "1442911802",
        "key": "0CeaNm8Y",
        "size": "890",
        "expire": "1442998159",
        "title": "Once we all know when we goto function",
        "syntax": "java",
        "user": "admin",
        "hits": "15"
    },
    {
        "scrape_url": "https://scrape.pastebin.com/api_scrape_item.php?i=8gTnNrmZ",
        "full_url": "https://pastebin.com/8gTnNrmZ",
        "date": "1442911796",
        "key": "8gTnNrmZ",
        "size": "42",
        "expire": "0",
        "title": "",
        "syntax": "text",
        "user": "",
        "hits": "0"
    }
]"""


class FakePastebin:
    """Scripted Pastebin server backing an httpx.MockTransport.

    Responses are served in the order they were queued; every request is
    recorded for inspection.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._responses: list[tuple[int, str] | Exception] = []

    def queue(self, body: str, status_code: int = 200) -> "FakePastebin":
        self._responses.append((status_code, body))
        return self

    def queue_error(self, error: Exception) -> "FakePastebin":
        self._responses.append(error)
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"Unexpected request to {request.url}")
        next_response = self._responses.pop(0)
        if isinstance(next_response, Exception):
            raise next_response
        status_code, body = next_response
        return httpx.Response(status_code, text=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def form(self, index: int = -1) -> dict[str, str]:
        """Decoded form fields of a recorded request."""
        content = self.requests[index].content.decode()
        return dict(parse_qsl(content, keep_blank_values=True))

    def urls(self) -> list[str]:
        return [str(r.url) for r in self.requests]


@pytest.fixture
def pastebin_config() -> PastebinConfig:
    """Create test pastebin config with an account."""
    return PastebinConfig(
        username="alice",
        password="hunter2",
        dev_key="test-dev-key",
        timeout_seconds=10,
    )


@pytest.fixture
def guest_config() -> PastebinConfig:
    """Create test pastebin config without an account."""
    return PastebinConfig(dev_key="test-dev-key", timeout_seconds=10)


@pytest.fixture
def app_config(pastebin_config: PastebinConfig) -> AppConfig:
    """Create test application config."""
    return AppConfig(pastebin=pastebin_config)


@pytest.fixture
def fake_pastebin() -> FakePastebin:
    """Create an empty scripted Pastebin server."""
    return FakePastebin()


@pytest.fixture
def client(pastebin_config: PastebinConfig, fake_pastebin: FakePastebin) -> Iterator[PastebinClient]:
    """Create a client with a session key, talking to the fake server."""
    client = PastebinClient(pastebin_config, transport=fake_pastebin.transport)
    client.session_key = "session-1"
    yield client
    client.close()


@pytest.fixture
def anonymous_client(pastebin_config: PastebinConfig, fake_pastebin: FakePastebin) -> Iterator[PastebinClient]:
    """Create a client that has not logged in."""
    client = PastebinClient(pastebin_config, transport=fake_pastebin.transport)
    yield client
    client.close()


@pytest.fixture
def paste_list_xml() -> str:
    """Sample api_option=list response with two pastes."""
    return PASTE_LIST_XML


@pytest.fixture
def scrape_json() -> str:
    """Sample scraping API response with two pastes."""
    return SCRAPE_JSON

"""Pastebin API client (synchronous)."""

from typing import Any

import httpx
import structlog

from pastebin_client.config.schema import PastebinConfig
from pastebin_client.exceptions import (
    InvalidSessionKeyError,
    NotAuthenticatedError,
    PastebinAPIError,
    PastebinClientError,
    PastebinHTTPError,
    PastebinTransportError,
    ReAuthenticationError,
)
from pastebin_client.models.paste import (
    RAW_URL_PREFIX,
    CreatePasteRequest,
    Paste,
    Visibility,
    parse_paste_list,
    parse_scrape_listing,
)

logger = structlog.get_logger()

LOGIN_API_URL = "https://pastebin.com/api/api_login.php"
POST_API_URL = "https://pastebin.com/api/api_post.php"
RAW_API_URL = "https://pastebin.com/api/api_raw.php"
SCRAPING_API_URL = "https://scrape.pastebin.com/api_scraping.php"

# Prefix of the URL returned on paste creation
PASTE_URL_PREFIX = "https://pastebin.com/"

ERROR_PREFIX = "Bad API request"
INVALID_SESSION_KEY_RESPONSE = "Bad API request, invalid api_user_key"

RESULTS_LIMIT = 100

DEFAULT_TIMEOUT_SECONDS = 30


def _check_body(body: str) -> str:
    """Raise if the body is one of Pastebin's error answers."""
    if body == INVALID_SESSION_KEY_RESPONSE:
        raise InvalidSessionKeyError(body)
    if body.startswith(ERROR_PREFIX):
        raise PastebinAPIError(body)
    return body


class PastebinClient:
    """Synchronous client for the Pastebin API.

    Holds the account credentials and the session key obtained by login().
    The session key is not protected against concurrent mutation; do not
    share a client between threads without external locking.
    """

    def __init__(
        self,
        config: PastebinConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client. No request is made."""
        self.config = config
        self.username = config.username
        self.session_key = ""
        self._transport = transport
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                timeout=httpx.Timeout(self.config.timeout_seconds),
                verify=self.config.verify_ssl,
                transport=self._transport,
            )
        return self._client

    @property
    def is_authenticated(self) -> bool:
        """Whether a session key is held."""
        return bool(self.session_key)

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            self._client.close()
            self._client = None

    def __enter__(self) -> "PastebinClient":
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()

    def _require_session(self, operation: str) -> None:
        if not self.session_key:
            raise NotAuthenticatedError(operation)

    # =========================================================================
    # Request pipeline
    # =========================================================================

    def _post(self, url: str, fields: dict[str, str]) -> str:
        """Send one form-encoded POST and return the body of a 200 response."""
        try:
            response = self.client.post(url, data=fields)
        except httpx.TransportError as e:
            raise PastebinTransportError(f"Request to {url} failed: {e}", url=url) from e

        if response.status_code != 200:
            raise PastebinHTTPError(
                response.status_code,
                response.reason_phrase,
                response_body=response.text,
                url=url,
            )
        return response.text

    def _request(self, url: str, fields: dict[str, str], reauthenticate: bool = True) -> str:
        """Perform a Pastebin API request.

        If ``reauthenticate`` is set and Pastebin reports the session key as
        invalid, logs in again and repeats the request once with the fresh key.

        Returns:
            Response body.

        Raises:
            PastebinTransportError: If the HTTP exchange failed.
            PastebinHTTPError: On a non-200 status.
            ReAuthenticationError: If the re-login failed.
            PastebinAPIError: If Pastebin answered with an error body.
        """
        log = logger.bind(endpoint=url, option=fields.get("api_option", "login"))
        log.debug("Sending Pastebin request")

        body = self._post(url, fields)

        if reauthenticate and body == INVALID_SESSION_KEY_RESPONSE:
            log.warning("Re-authenticating due to invalid api_user_key")
            try:
                self.login()
            except PastebinClientError as e:
                raise ReAuthenticationError(e) from e

            if "api_user_key" in fields:
                fields = {**fields, "api_user_key": self.session_key}
            body = self._post(url, fields)

        return _check_body(body)

    # =========================================================================
    # Session
    # =========================================================================

    def login(self) -> None:
        """Obtain a new session key for the configured account."""
        body = self._request(
            LOGIN_API_URL,
            {
                "api_user_name": self.config.username,
                "api_user_password": self.config.password,
                "api_dev_key": self.config.dev_key,
            },
            reauthenticate=False,
        )
        self.session_key = body
        logger.info("Logged in to Pastebin", user=self.username)

    # =========================================================================
    # Paste Operations
    # =========================================================================

    def create_paste(self, request: CreatePasteRequest) -> str:
        """Create a new paste and return its key.

        Without a session a guest paste is created. The paste URL is the key
        appended to https://pastebin.com/.

        Raises:
            NotAuthenticatedError: If a private paste is requested without a session.
        """
        if request.visibility == Visibility.PRIVATE and not self.session_key:
            raise NotAuthenticatedError("create_paste")

        body = self._request(
            POST_API_URL,
            {
                "api_option": "paste",
                "api_user_key": self.session_key,
                "api_dev_key": self.config.dev_key,
                "api_paste_name": request.title,
                "api_paste_code": request.code,
                "api_paste_format": request.syntax,
                "api_paste_expire_date": request.effective_expiration.value,
                "api_paste_private": str(int(request.visibility)),
            },
        )
        key = body.removeprefix(PASTE_URL_PREFIX)
        logger.info("Created paste", key=key, visibility=request.visibility.name.lower())
        return key

    def delete_paste(self, paste_key: str) -> None:
        """Delete a paste owned by the authenticated user."""
        self._require_session("delete_paste")
        self._request(
            RAW_API_URL,
            {
                "api_option": "delete",
                "api_user_key": self.session_key,
                "api_dev_key": self.config.dev_key,
                "api_paste_key": paste_key,
            },
        )
        logger.info("Deleted paste", key=paste_key)

    def list_user_pastes(self) -> list[Paste]:
        """List the authenticated user's pastes (at most 100)."""
        self._require_session("list_user_pastes")
        body = self._request(
            POST_API_URL,
            {
                "api_option": "list",
                "api_user_key": self.session_key,
                "api_dev_key": self.config.dev_key,
                "api_results_limit": str(RESULTS_LIMIT),
            },
        )
        return parse_paste_list(body, self.username)

    def get_raw_user_paste(self, paste_key: str) -> str:
        """Get the content of a paste owned by the authenticated user.

        Unlike get_raw_paste(), this only works for the user's own pastes,
        but those can be private.
        """
        self._require_session("get_raw_user_paste")
        return self._request(
            RAW_API_URL,
            {
                "api_option": "show_paste",
                "api_user_key": self.session_key,
                "api_dev_key": self.config.dev_key,
                "api_paste_key": paste_key,
            },
        )

    def get_recent_pastes(self) -> list[Paste]:
        """Get the most recent public pastes from the scraping API."""
        self._require_session("get_recent_pastes")
        body = self._request(
            SCRAPING_API_URL,
            {
                "api_option": "show_paste",
                "api_user_key": self.session_key,
                "api_dev_key": self.config.dev_key,
            },
        )
        return parse_scrape_listing(body)


def create_client(
    config: PastebinConfig,
    transport: httpx.BaseTransport | None = None,
) -> PastebinClient:
    """Create a client, logging in first when a username is configured.

    A client without a username can only create guest pastes.
    """
    client = PastebinClient(config, transport=transport)
    if config.username:
        try:
            client.login()
        except PastebinClientError:
            client.close()
            raise
    return client


def get_raw_paste(
    paste_key: str,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    verify: bool = True,
    transport: httpx.BaseTransport | None = None,
) -> str:
    """Get the content of a public or unlisted paste from the raw endpoint.

    Needs no account. Excessive use may get the calling IP blocked; prefer
    PastebinClient.get_raw_user_paste() for the user's own pastes.

    Raises:
        PastebinTransportError: If the HTTP exchange failed.
        PastebinHTTPError: On a non-200 status.
        PastebinAPIError: If Pastebin answered with an error body.
    """
    url = f"{RAW_URL_PREFIX}/{paste_key}"
    logger.debug("Fetching raw paste", url=url)

    with httpx.Client(timeout=timeout, verify=verify, transport=transport) as client:
        try:
            response = client.get(url)
        except httpx.TransportError as e:
            raise PastebinTransportError(f"Request to {url} failed: {e}", url=url) from e

    if response.status_code != 200:
        raise PastebinHTTPError(
            response.status_code,
            response.reason_phrase,
            response_body=response.text,
            url=url,
        )
    if response.text.startswith(ERROR_PREFIX):
        raise PastebinAPIError(response.text)
    return response.text

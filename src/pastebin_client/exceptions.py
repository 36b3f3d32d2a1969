"""Custom exceptions for pastebin-client."""

from typing import Any


class PastebinClientError(Exception):
    """Base exception for all pastebin-client errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(PastebinClientError):
    """Configuration loading or validation failed."""

    pass


class NotAuthenticatedError(PastebinClientError):
    """Operation requires a session key but the client has none."""

    def __init__(self, operation: str | None = None) -> None:
        self.operation = operation
        super().__init__(
            "must be authenticated to perform this action",
            details={"operation": operation},
        )


class PastebinTransportError(PastebinClientError):
    """The HTTP exchange could not be completed (network, DNS, TLS, timeout)."""

    def __init__(self, message: str, url: str | None = None) -> None:
        self.url = url
        super().__init__(message, details={"url": url})


class PastebinHTTPError(PastebinClientError):
    """Pastebin answered with a status code other than 200."""

    def __init__(
        self,
        status_code: int,
        reason: str = "",
        response_body: str | None = None,
        url: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.reason = reason
        self.response_body = response_body
        self.url = url
        super().__init__(
            f"{status_code} {reason}".strip(),
            details={
                "status_code": status_code,
                "response_body": response_body,
                "url": url,
            },
        )


class PastebinAPIError(PastebinClientError):
    """Pastebin rejected the request with a "Bad API request" body.

    The message is the response body, verbatim.
    """

    def __init__(self, response_body: str) -> None:
        self.response_body = response_body
        super().__init__(response_body, details={"response_body": response_body})


class InvalidSessionKeyError(PastebinAPIError):
    """Session key was rejected and no further re-authentication is allowed."""

    pass


class ReAuthenticationError(PastebinClientError):
    """Automatic re-login after an invalid session key response failed."""

    def __init__(self, cause: Exception) -> None:
        self.cause = cause
        super().__init__(
            f"failed to re-authenticate on invalid api_user_key response: {cause}",
            details={"cause": str(cause)},
        )


class PasteDecodeError(PastebinClientError):
    """A paste listing could not be parsed."""

    def __init__(
        self,
        message: str,
        raw_response: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.raw_response = raw_response
        super().__init__(
            message,
            details={**(details or {}), "raw_response": raw_response},
        )

"""Exception hierarchy for the tgcourier Telegram SDK.

Every failure the SDK reports derives from :class:`APIException`, so callers
can catch one type or distinguish the individual kinds below.
"""

from typing import Any, Dict, Optional


class APIException(Exception):
    """Base exception for every error raised by the SDK.

    Attributes:
        method: Bot API method (e.g. ``"sendMessage"``) the error relates to,
            when there is one.
    """

    def __init__(self, message: str, method: Optional[str] = None) -> None:
        """Initialise with a human-readable message and optional method name."""
        self.method = method
        super().__init__(message)


class TransportError(APIException):
    """Connect, read, TLS or deadline failure below the HTTP layer."""


class HTTPStatusError(APIException):
    """The Bot API answered with a non-2xx status code.

    Attributes:
        status_code: HTTP status code returned by the API.
        reason: HTTP status text (e.g. ``"Unauthorized"``).
        response_body: Parsed JSON body as a dict, when available.
    """

    def __init__(
        self,
        status_code: int,
        reason: str = "",
        response_body: Optional[Dict[str, Any]] = None,
        method: Optional[str] = None,
    ) -> None:
        self.status_code = status_code
        self.reason = reason
        self.response_body = response_body or {}
        description = self.response_body.get("description") or reason or "Unknown error"
        super().__init__(f"HTTP {status_code}: {description}", method=method)


class DecodeError(APIException):
    """The response body is not JSON or does not match the expected shape."""


class APINotOkError(APIException):
    """The envelope came back with ``ok: false``.

    Attributes:
        description: Error description supplied by Telegram, if any.
        error_code: Numeric error code supplied by Telegram, if any.
    """

    def __init__(
        self,
        description: Optional[str] = None,
        error_code: Optional[int] = None,
        method: Optional[str] = None,
    ) -> None:
        self.description = description
        self.error_code = error_code
        super().__init__(f"{method or 'API call'} not ok: {description or 'Unknown error'}", method=method)


class NoDocumentError(APIException):
    """An update without a document was passed where one is required."""


class LocalFileError(APIException):
    """A local file could not be opened or read for upload."""


class DownloadFailedError(APIException):
    """A file download answered with a non-2xx status code."""

    def __init__(self, status_code: int, url: str) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(f"Failed to download file: HTTP {status_code}")

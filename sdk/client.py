"""TelegramClient -- service layer wrapping the Bot API endpoints tgcourier uses.

All methods return Pydantic models validated from the ``{ok, result}``
envelope.  HTTP calls use the ``requests`` library through one shared
:class:`requests.Session`, so connection reuse is left to ``requests``.

Every call runs under one wall-clock deadline (``timeout`` seconds, 30 by
default) covering connect, headers and the whole body.  Bodies are streamed
in chunks and the deadline is checked after each one, so a server trickling
bytes cannot stretch a call past it.

Errors are reported in the order they are detected:

1. :class:`~sdk.exceptions.TransportError` -- the request never completed
   (including a blown deadline).
2. :class:`~sdk.exceptions.HTTPStatusError` -- the status code is not 2xx.
3. :class:`~sdk.exceptions.DecodeError` -- the body is not a valid envelope.
4. :class:`~sdk.exceptions.APINotOkError` -- the envelope says ``ok: false``.

Nothing is retried here; retry policy belongs to the caller.
"""

from __future__ import annotations

import contextlib
import json
import os
import time
from typing import Any, Dict, Iterator, List, Optional, Type, TypeVar

import requests
from pydantic import ValidationError

from core.logger import CourierLogger
from sdk.exceptions import (
    APINotOkError,
    DecodeError,
    DownloadFailedError,
    HTTPStatusError,
    LocalFileError,
    TransportError,
)
from sdk.models import Envelope, File, Message, Update

logger = CourierLogger.get_logger()

T = TypeVar("T")

DEFAULT_TIMEOUT: float = 30.0
DEFAULT_API_ROOT: str = "https://api.telegram.org"

# Small chunks keep the deadline check close to the bytes actually arriving.
_BODY_CHUNK_SIZE: int = 256
_DOWNLOAD_CHUNK_SIZE: int = 8 * 1024


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


class _Deadline:
    """Wall-clock budget shared by every phase of a single call."""

    def __init__(self, seconds: float) -> None:
        self.seconds = seconds
        self._expires_at = time.monotonic() + seconds

    def remaining(self) -> float:
        return self._expires_at - time.monotonic()

    def check(self, method: Optional[str]) -> float:
        """Return the seconds left, or raise :class:`TransportError` when none are."""
        remaining = self.remaining()
        if remaining <= 0:
            logger.error("Deadline exceeded", extra={"api_endpoint": method, "timeout": self.seconds})
            raise TransportError(f"{method or 'File download'} exceeded the {self.seconds:g} s deadline", method=method)
        return remaining


class TelegramClient:
    """Client-side service layer for the Telegram Bot API.

    Each public API method corresponds to a Bot API endpoint.  The client is
    safe to share between threads; it holds no mutable state besides the
    underlying session.
    """

    def __init__(
        self,
        token: str,
        timeout: float = DEFAULT_TIMEOUT,
        api_root: str = DEFAULT_API_ROOT,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Create a new client bound to the bot identified by *token*.

        Args:
            token: Bot token as issued by @BotFather.  Not inspected.
            timeout: Total deadline in seconds for each call, body included.
            api_root: Bot API server root, without the ``/bot<token>`` suffix.
            session: Optional pre-built session; the client closes only
                sessions it created itself.
        """
        self._token = token
        self._timeout = timeout
        self._api_root = api_root.rstrip("/")
        self._base_url = f"{self._api_root}/bot{token}"
        self._file_base_url = f"{self._api_root}/file/bot{token}"
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()

    def close(self) -> None:
        """Release pooled connections held by a session this client created."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "TelegramClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    #  Internal helpers
    # ------------------------------------------------------------------

    def _method_url(self, method: str) -> str:
        return f"{self._base_url}/{method}"

    def _post(self, method: str, result_type: Type[T], **kwargs: Any) -> T:
        """POST to *method* under one deadline, read the body, decode the envelope."""
        deadline = _Deadline(self._timeout)
        try:
            response = self._session.post(
                self._method_url(method), timeout=deadline.check(method), stream=True, **kwargs,
            )
        except requests.RequestException as exc:
            logger.error("Request failed", extra={"api_endpoint": method, "error": str(exc)})
            raise TransportError(f"{method} request failed: {exc}", method=method) from exc
        with contextlib.closing(response):
            raw = b"".join(self._iter_body(response, deadline, method, _BODY_CHUNK_SIZE))
        return self._decode(method, response, raw, result_type)

    def _post_form(self, method: str, data: Dict[str, str], result_type: Type[T]) -> T:
        """POST *data* URL-encoded to *method* and decode the envelope."""
        return self._post(method, result_type, data=data)

    def _post_multipart(
        self,
        method: str,
        data: Dict[str, str],
        files: Dict[str, Any],
        result_type: Type[T],
    ) -> T:
        """POST *data* and *files* as multipart/form-data and decode the envelope."""
        return self._post(method, result_type, data=data, files=files)

    def _iter_body(
        self,
        response: requests.Response,
        deadline: _Deadline,
        method: Optional[str],
        chunk_size: int,
    ) -> Iterator[bytes]:
        """Yield the body of *response* chunk by chunk while *deadline* holds."""
        try:
            for chunk in response.iter_content(chunk_size=chunk_size):
                deadline.check(method)
                yield chunk
        except requests.RequestException as exc:
            logger.error("Reading response body failed", extra={"api_endpoint": method, "error": str(exc)})
            raise TransportError(f"{method or 'File download'} interrupted: {exc}", method=method) from exc

    def _decode(self, method: str, response: requests.Response, raw: bytes, result_type: Type[T]) -> T:
        """Validate the response and return the envelope's ``result``.

        Raises:
            HTTPStatusError: If the status code is not 2xx.
            DecodeError: If the body is not JSON or not an envelope of *result_type*.
            APINotOkError: If the envelope reports ``ok: false``.
        """
        if not _is_success(response.status_code):
            try:
                body = json.loads(raw)
            except ValueError:
                body = {}
            if not isinstance(body, dict):
                body = {}
            logger.warning(
                "Non-2xx response",
                extra={"api_endpoint": method, "status_code": response.status_code, "api_response": body},
            )
            raise HTTPStatusError(response.status_code, response.reason or "", body, method=method)

        try:
            body = json.loads(raw)
        except ValueError as exc:
            logger.error("JSON decode error", extra={"api_endpoint": method, "error": str(exc)})
            raise DecodeError(f"{method} returned invalid JSON: {exc}", method=method) from exc

        try:
            envelope = Envelope[result_type].model_validate(body)  # type: ignore[valid-type]
        except ValidationError as exc:
            logger.error("Unexpected response shape", extra={"api_endpoint": method, "error": str(exc)})
            raise DecodeError(f"{method} returned an unexpected shape", method=method) from exc

        if not envelope.ok:
            logger.warning(
                "Telegram returned ok=false",
                extra={"api_endpoint": method, "error_code": envelope.error_code, "description": envelope.description},
            )
            raise APINotOkError(envelope.description, envelope.error_code, method=method)

        if envelope.result is None:
            raise DecodeError(f"{method} envelope has no result", method=method)
        return envelope.result

    # ------------------------------------------------------------------
    #  API methods
    # ------------------------------------------------------------------

    def send_message(self, chat_id: int, text: str) -> Message:
        """Use this method to send text messages. On success, the sent Message is returned.

        *text* is forwarded verbatim, even when empty.
        """
        logger.debug("Sending message", extra={"chat_id": chat_id, "api_endpoint": "sendMessage", "text_preview": text[:80]})
        message = self._post_form("sendMessage", {"chat_id": str(chat_id), "text": text}, Message)
        logger.info("Message sent", extra={"chat_id": chat_id, "api_endpoint": "sendMessage"})
        return message

    def get_updates(self, offset: int = 0) -> List[Update]:
        """Fetch pending updates with ``update_id >= offset``, in wire order.

        No ``timeout`` field is sent, so the server's short poll applies.
        Advancing *offset* after consuming the batch is the caller's job.
        """
        updates = self._post_form("getUpdates", {"offset": str(offset)}, List[Update])
        if updates:
            logger.debug("Received updates", extra={"api_endpoint": "getUpdates", "offset": offset, "count": len(updates)})
        return updates

    def get_file(self, file_id: str) -> File:
        """Resolve a ``file_id`` to a :class:`~sdk.models.File` carrying its ``file_path``."""
        return self._post_form("getFile", {"file_id": file_id}, File)

    def file_url(self, file_path: str) -> str:
        """Build the download URL for a ``file_path`` returned by ``getFile``."""
        return f"{self._file_base_url}/{file_path}"

    def get_file_url(self, file_id: str) -> str:
        """Resolve a ``file_id`` straight to its download URL."""
        return self.file_url(self.get_file(file_id).file_path)

    def send_document(self, chat_id: int, local_path: str, caption: str = "") -> Message:
        """Upload the file at *local_path* to *chat_id* as a document.

        The multipart body carries the ``document`` file part (named after the
        basename of *local_path*), ``chat_id``, and ``caption`` when non-empty.

        Raises:
            LocalFileError: If the file cannot be opened or read.
        """
        data: Dict[str, str] = {"chat_id": str(chat_id)}
        if caption:
            data["caption"] = caption
        logger.debug("Sending document", extra={"chat_id": chat_id, "api_endpoint": "sendDocument", "local_path": local_path})
        try:
            with open(local_path, "rb") as handle:
                files = {"document": (os.path.basename(local_path), handle)}
                message = self._post_multipart("sendDocument", data, files, Message)
        except OSError as exc:
            logger.error("Cannot read local file", extra={"api_endpoint": "sendDocument", "local_path": local_path, "error": str(exc)})
            raise LocalFileError(f"Cannot read {local_path}: {exc}", method="sendDocument") from exc
        logger.info("Document sent", extra={"chat_id": chat_id, "api_endpoint": "sendDocument"})
        return message

    # ------------------------------------------------------------------
    #  File download helpers
    # ------------------------------------------------------------------

    def _open_download(self, url: str, deadline: _Deadline) -> requests.Response:
        try:
            response = self._session.get(url, stream=True, timeout=deadline.check(None))
        except requests.RequestException as exc:
            logger.error("File download request error", extra={"error": str(exc)})
            raise TransportError(f"File download failed: {exc}") from exc
        if not _is_success(response.status_code):
            response.close()
            logger.warning("File download failed", extra={"status_code": response.status_code})
            raise DownloadFailedError(response.status_code, url)
        return response

    def download_file(self, url: str) -> requests.Response:
        """Open a streamed GET on *url*; the caller must close the response.

        Only the connect and header phase is bounded here; use
        :meth:`iter_file` to keep the body under the same deadline.

        Raises:
            TransportError: On transport-level failures.
            DownloadFailedError: If the HTTP response status is not 2xx.
        """
        return self._open_download(url, _Deadline(self._timeout))

    def iter_file(self, url: str, chunk_size: int = _DOWNLOAD_CHUNK_SIZE) -> Iterator[bytes]:
        """Yield the body of *url* in chunks, closing the response when done.

        The whole download, from connect to the last chunk, must finish
        within the client's timeout or :class:`TransportError` is raised.
        """
        deadline = _Deadline(self._timeout)
        response = self._open_download(url, deadline)
        with contextlib.closing(response):
            yield from self._iter_body(response, deadline, None, chunk_size)

"""Telegram Bot API SDK — Pydantic models, HTTP client, and exceptions.

The :class:`TelegramClient` class wraps the Bot API endpoints tgcourier needs
with synchronous, thread-safe methods.

Usage::

    from sdk import TelegramClient, APIException
    from sdk.models import Update, Message, Document
"""

from sdk.client import DEFAULT_API_ROOT, DEFAULT_TIMEOUT, TelegramClient
from sdk.exceptions import (
    APIException,
    APINotOkError,
    DecodeError,
    DownloadFailedError,
    HTTPStatusError,
    LocalFileError,
    NoDocumentError,
    TransportError,
)

__all__ = [
    "DEFAULT_API_ROOT",
    "DEFAULT_TIMEOUT",
    "TelegramClient",
    "APIException",
    "APINotOkError",
    "DecodeError",
    "DownloadFailedError",
    "HTTPStatusError",
    "LocalFileError",
    "NoDocumentError",
    "TransportError",
]

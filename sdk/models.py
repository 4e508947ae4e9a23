"""Pydantic data models for the subset of the Telegram Bot API used by tgcourier.

Every class mirrors a Bot API object.  Decoding ignores unknown fields and
fills missing ones with zero values, so partial payloads (and the minimal
fixtures used in tests) validate cleanly.
"""

from __future__ import annotations

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

ResultT = TypeVar("ResultT")


class User(BaseModel):
    """This object represents a Telegram user or bot."""

    id: int = 0
    is_bot: bool = False
    first_name: str = ""
    last_name: str = ""
    username: str = ""
    language_code: str = ""

    model_config = {"populate_by_name": True}


class Chat(BaseModel):
    """This object represents a chat."""

    id: int = 0
    type: str = ""
    title: str = ""
    username: str = ""
    first_name: str = ""
    last_name: str = ""

    model_config = {"populate_by_name": True}


class Document(BaseModel):
    """A general file sent to the bot (as opposed to photos, voice messages and audio files)."""

    file_id: str = ""
    file_name: str = ""
    file_size: int = 0

    model_config = {"populate_by_name": True}


class Message(BaseModel):
    """This object represents a message."""

    message_id: int = 0
    from_field: User = Field(default_factory=User, alias="from")
    chat: Chat = Field(default_factory=Chat)
    date: int = 0
    text: str = ""
    document: Optional[Document] = None

    model_config = {"populate_by_name": True}


class Update(BaseModel):
    """An incoming update. Only message updates are modelled."""

    update_id: int = 0
    message: Message = Field(default_factory=Message)

    model_config = {"populate_by_name": True}


class File(BaseModel):
    """A file ready to be downloaded.

    The file can be downloaded via ``https://api.telegram.org/file/bot<token>/<file_path>``.
    """

    file_id: str = ""
    file_unique_id: str = ""
    file_size: int = 0
    file_path: str = ""

    model_config = {"populate_by_name": True}


class Envelope(BaseModel, Generic[ResultT]):
    """Uniform ``{ok, result}`` wrapper around every Bot API response."""

    ok: bool
    result: Optional[ResultT] = None
    description: Optional[str] = None
    error_code: Optional[int] = None

    model_config = {"populate_by_name": True}

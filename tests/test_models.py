"""Tests for the Pydantic wire models."""

import sys
import os
from typing import List

import pytest

# Ensure the project root is importable.
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from sdk.models import Chat, Document, Envelope, File, Message, Update, User
from pydantic import ValidationError


# ── Update / Message ─────────────────────────────────────────────────────────


class TestUpdateModel:
    """Validate decoding of incoming updates."""

    def test_full_payload(self) -> None:
        upd = Update.model_validate({
            "update_id": 10,
            "message": {
                "message_id": 5,
                "from": {"id": 100, "is_bot": False, "first_name": "Ann", "language_code": "en"},
                "chat": {"id": -1001, "type": "supergroup", "title": "Ops"},
                "date": 1700000000,
                "text": "/ping",
            },
        })
        assert upd.update_id == 10
        assert upd.message.text == "/ping"
        assert upd.message.chat.id == -1001
        assert upd.message.chat.title == "Ops"
        assert upd.message.from_field.first_name == "Ann"
        assert upd.message.document is None

    def test_missing_fields_default_to_zero_values(self) -> None:
        upd = Update.model_validate({"update_id": 3})
        assert upd.message.text == ""
        assert upd.message.chat.id == 0
        assert upd.message.from_field.id == 0
        assert upd.message.date == 0

    def test_unknown_fields_ignored(self) -> None:
        upd = Update.model_validate({
            "update_id": 1,
            "edited_message": {"text": "ignored"},
            "message": {"text": "hi", "entities": [{"type": "bot_command"}], "chat": {"id": 1, "is_forum": True}},
        })
        assert upd.message.text == "hi"
        assert not hasattr(upd, "edited_message")

    def test_document_message(self) -> None:
        msg = Message.model_validate({
            "chat": {"id": 7},
            "document": {"file_id": "F", "file_unique_id": "U", "file_name": "x.txt", "file_size": 12},
        })
        assert msg.document == Document(file_id="F", file_name="x.txt", file_size=12)
        assert msg.text == ""

    def test_from_by_field_name(self) -> None:
        msg = Message(chat=Chat(id=1), from_field=User(id=2))
        assert msg.from_field.id == 2
        assert msg.model_dump(by_alias=True)["from"]["id"] == 2

    def test_wrong_type_raises(self) -> None:
        with pytest.raises(ValidationError):
            Update.model_validate({"update_id": "not-an-int"})


# ── Envelope ─────────────────────────────────────────────────────────────────


class TestEnvelope:
    """Validate the generic {ok, result} wrapper."""

    def test_ok_list_of_updates(self) -> None:
        env = Envelope[List[Update]].model_validate({"ok": True, "result": [{"update_id": 1}, {"update_id": 2}]})
        assert env.ok is True
        assert [u.update_id for u in env.result] == [1, 2]

    def test_ok_file(self) -> None:
        env = Envelope[File].model_validate({"ok": True, "result": {"file_id": "F", "file_path": "a/b.txt"}})
        assert env.result.file_path == "a/b.txt"

    def test_not_ok(self) -> None:
        env = Envelope[File].model_validate({"ok": False, "error_code": 400, "description": "Bad Request"})
        assert env.ok is False
        assert env.result is None
        assert env.error_code == 400
        assert env.description == "Bad Request"

    def test_ok_is_required(self) -> None:
        with pytest.raises(ValidationError):
            Envelope[File].model_validate({"result": {}})

    def test_non_object_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Envelope[File].model_validate(["ok"])

"""Bot object, update dispatch, and the long-running polling loop.

:class:`Bot` is the library surface: it owns the HTTP client and the command
registry and guards both dispatch and registration with one re-entrant lock.
The nested ``sendMessage`` of :meth:`Bot.handle_update` runs inside that
lock too, so replies are serialized per bot.

:class:`UpdatePoller` is the host-side loop that advances the offset cursor.
"""

from __future__ import annotations

import threading
from typing import Callable, List, Optional

import requests

from core.lines import count_lines
from core.logger import CourierLogger
from sdk.client import DEFAULT_API_ROOT, DEFAULT_TIMEOUT, TelegramClient
from sdk.exceptions import APIException, NoDocumentError
from sdk.models import Message, Update
from bot.registry import CommandHandler, CommandRegistry

logger = CourierLogger.get_logger()

# (update, line_count) -> None
DocumentCallback = Callable[[Update, int], None]


class Bot:
    """A Telegram bot identity with its command table.

    Usage::

        bot = Bot(token)
        bot.add_command("/ping", lambda chat_id: "pong")

        for update in bot.get_updates(offset):
            bot.handle_update(update)
    """

    def __init__(
        self,
        token: str,
        timeout: float = DEFAULT_TIMEOUT,
        api_root: str = DEFAULT_API_ROOT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.token = token
        self.client = TelegramClient(token, timeout=timeout, api_root=api_root, session=session)
        self._lock = threading.RLock()
        self.commands = CommandRegistry(lock=self._lock)

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "Bot":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ── command table ────────────────────────────────────────────────────

    def add_command(self, command: str, handler: CommandHandler, description: str = "") -> None:
        """Register *handler* for the exact text *command*; last registration wins."""
        with self._lock:
            self.commands.add(command, handler, description)
        logger.debug("Command registered", extra={"command": command})

    def command(self, command: str, *, description: str = "") -> Callable[[CommandHandler], CommandHandler]:
        """Decorator form of :meth:`add_command`."""
        def decorator(func: CommandHandler) -> CommandHandler:
            self.add_command(command, func, description)
            return func
        return decorator

    # ── API pass-throughs ────────────────────────────────────────────────

    def send_message(self, chat_id: int, text: str) -> Message:
        return self.client.send_message(chat_id, text)

    def get_updates(self, offset: int = 0) -> List[Update]:
        return self.client.get_updates(offset)

    def get_file_url(self, file_id: str) -> str:
        return self.client.get_file_url(file_id)

    def send_file(self, chat_id: int, local_path: str, caption: str = "") -> Message:
        return self.client.send_document(chat_id, local_path, caption)

    def count_lines_at(self, url: str) -> int:
        """Stream *url* and count its newline-terminated records."""
        return count_lines(self.client.iter_file(url))

    # ── dispatch ─────────────────────────────────────────────────────────

    def handle_update(self, update: Update) -> None:
        """Run the command matching the update's text and send its reply.

        A text with no registered command is ignored.  A failure of the
        reply's ``sendMessage`` is logged and not raised; exceptions from
        the handler itself propagate.
        """
        message = update.message
        with self._lock:
            entry = self.commands.get(message.text)
            if entry is None:
                logger.debug("No command matched", extra={"update_id": update.update_id})
                return

            chat_id = message.chat.id
            logger.info("Dispatching command", extra={"update_id": update.update_id, "chat_id": chat_id, "command": entry.command})
            reply = entry.handler(chat_id)
            try:
                self.client.send_message(chat_id, reply)
            except APIException as exc:
                logger.warning(
                    "Reply not delivered",
                    extra={"update_id": update.update_id, "chat_id": chat_id, "command": entry.command, "error": str(exc)},
                )

    def handle_document(self, update: Update) -> int:
        """Count the lines of the document attached to *update*.

        Raises:
            NoDocumentError: If the message carries no document ``file_id``.
        """
        document = update.message.document
        with self._lock:
            if document is None or not document.file_id:
                raise NoDocumentError("No document file ID found")

            file_url = self.client.get_file_url(document.file_id)
            line_count = self.count_lines_at(file_url)
        logger.info(
            "Document line count",
            extra={"update_id": update.update_id, "file_name": document.file_name, "line_count": line_count},
        )
        return line_count


class UpdatePoller:
    """Drive ``getUpdates`` and feed every update to a :class:`Bot`.

    The offset cursor starts at 0 and only moves forward: after each update
    it becomes ``max(cursor, update_id + 1)``, and updates below the cursor
    are skipped.  Updates whose dispatch fails are logged and stepped over.
    """

    _DEFAULT_RETRY_DELAY: float = 5.0

    def __init__(
        self,
        bot: Bot,
        on_document: Optional[DocumentCallback] = None,
        retry_delay: float = _DEFAULT_RETRY_DELAY,
    ) -> None:
        self.bot = bot
        self.on_document = on_document
        self.retry_delay = retry_delay
        self.offset = 0

    def dispatch(self, update: Update) -> None:
        """Route *update* to the document path or the command path."""
        document = update.message.document
        if document is not None and document.file_id:
            line_count = self.bot.handle_document(update)
            if self.on_document is not None:
                self.on_document(update, line_count)
            return
        self.bot.handle_update(update)

    def poll_once(self) -> int:
        """Fetch and dispatch one batch; return the new offset.

        Raises:
            APIException: If ``getUpdates`` itself fails.
        """
        for update in self.bot.get_updates(self.offset):
            if update.update_id < self.offset:
                logger.debug("Skipping already processed update", extra={"update_id": update.update_id, "offset": self.offset})
                continue
            try:
                self.dispatch(update)
            except Exception:
                logger.exception("Update dispatch failed", extra={"update_id": update.update_id})
            self.offset = max(self.offset, update.update_id + 1)
        return self.offset

    def run(self, stop_event: Optional[threading.Event] = None) -> None:
        """Poll until *stop_event* is set (forever when it is ``None``)."""
        stop_event = stop_event or threading.Event()
        logger.info("Polling for updates", extra={"offset": self.offset})
        while not stop_event.is_set():
            try:
                self.poll_once()
            except APIException as exc:
                logger.warning(
                    "getUpdates failed, retrying",
                    extra={"api_endpoint": "getUpdates", "error": str(exc), "retry_delay": self.retry_delay},
                )
                stop_event.wait(self.retry_delay)
        logger.info("Polling stopped", extra={"offset": self.offset})

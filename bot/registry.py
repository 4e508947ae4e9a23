"""Command registry — single source of truth for the command → handler mapping.

Design:
- ``CommandHandler`` is the handler signature: it receives the chat id the
  command came from and returns the reply text.
- ``CommandEntry`` stores the handler together with a human-readable
  description used by ``/help``.
- ``CommandRegistry`` maps exact command text to entries.  Every read and
  write happens under one re-entrant lock, which a :class:`~bot.dispatcher.Bot`
  shares so that registration is serialized with whole dispatches.

Commands are matched exactly: no case folding, no ``@botname`` stripping, no
argument splitting.
"""

from __future__ import annotations

import dataclasses
import threading
from typing import Callable, Optional

# chat_id -> reply text
CommandHandler = Callable[[int], str]


@dataclasses.dataclass(frozen=True, slots=True)
class CommandEntry:
    """Metadata for a single registered command."""
    command: str              # e.g. "/ping"
    handler: CommandHandler   # returns the reply text
    description: str = ""     # shown in /help


class CommandRegistry:
    """Thread-safe mapping from command text to :class:`CommandEntry`.

    Usage::

        registry = CommandRegistry()

        @registry.register("/ping", description="Check the bot is alive")
        def handle_ping(chat_id: int) -> str:
            return "pong"

        entry = registry.get("/ping")
        reply = entry.handler(chat_id)
    """

    def __init__(self, lock: Optional[threading.RLock] = None) -> None:
        self._lock = lock if lock is not None else threading.RLock()
        self._entries: dict[str, CommandEntry] = {}

    @property
    def lock(self) -> threading.RLock:
        """The exclusion guarding this registry."""
        return self._lock

    # ── mutation ─────────────────────────────────────────────────────────

    def add(self, command: str, handler: CommandHandler, description: str = "") -> None:
        """Bind *handler* to *command*, replacing any previous binding."""
        entry = CommandEntry(command=command, handler=handler, description=description)
        with self._lock:
            self._entries[command] = entry

    def register(self, command: str, *, description: str = "") -> Callable[[CommandHandler], CommandHandler]:
        """Decorator form of :meth:`add`.

        Example::

            @registry.register("/start", description="Say hello")
            def handle_start(chat_id): ...
        """
        def decorator(func: CommandHandler) -> CommandHandler:
            self.add(command, func, description)
            return func
        return decorator

    # ── lookup helpers ───────────────────────────────────────────────────

    def get(self, command: str) -> CommandEntry | None:
        """Return the entry for *command*, or ``None``."""
        with self._lock:
            return self._entries.get(command)

    def entries(self) -> dict[str, CommandEntry]:
        """Return a snapshot of all registered commands."""
        with self._lock:
            return dict(self._entries)

    def __contains__(self, command: object) -> bool:
        with self._lock:
            return command in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

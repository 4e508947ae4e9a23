"""Telegram bot layer — command registry, dispatch, polling, built-in handlers.

This package may import from ``core/`` and ``sdk/`` only.
"""

from bot.dispatcher import Bot, UpdatePoller
from bot.handlers import (
    handle_ping,
    handle_start,
    register_default_commands,
    reply_with_line_count,
)
from bot.registry import CommandEntry, CommandHandler, CommandRegistry

__all__ = [
    # Dispatcher
    "Bot",
    "UpdatePoller",
    # Registry
    "CommandEntry",
    "CommandHandler",
    "CommandRegistry",
    # Built-in handlers
    "handle_start",
    "handle_ping",
    "register_default_commands",
    "reply_with_line_count",
]

"""Built-in command handlers for the tgcourier host program.

Each handler takes the chat id and returns the reply text.  They are bound
to a :class:`~bot.dispatcher.Bot` by :func:`register_default_commands`.
"""

from core.logger import CourierLogger
from bot.dispatcher import Bot
from bot.registry import CommandRegistry
from sdk.models import Update

logger = CourierLogger.get_logger()


def handle_start(chat_id: int) -> str:
    """Handle /start — greet the user and point at /help."""
    logger.info("User invoked /start", extra={"chat_id": chat_id, "command": "/start"})
    return "👋 Hi! Send me a text file and I will count its lines. Try /help."


def handle_ping(chat_id: int) -> str:
    """Handle /ping — liveness check."""
    return "pong"


def build_help_text(registry: CommandRegistry) -> str:
    """Render one line per registered command, sorted by command text."""
    lines = ["📖 Available commands:"]
    for command, entry in sorted(registry.entries().items()):
        lines.append(f"{command} — {entry.description}" if entry.description else command)
    return "\n".join(lines)


def register_default_commands(bot: Bot) -> None:
    """Bind /start, /help and /ping on *bot*."""
    bot.add_command("/start", handle_start, description="Say hello")
    bot.add_command("/help", lambda chat_id: build_help_text(bot.commands), description="Show available commands")
    bot.add_command("/ping", handle_ping, description="Check the bot is alive")


def reply_with_line_count(bot: Bot, update: Update, line_count: int) -> None:
    """Tell the sender how many lines their document has."""
    chat_id = update.message.chat.id
    name = update.message.document.file_name if update.message.document else ""
    text = f"📄 {name}: {line_count} lines" if name else f"📄 {line_count} lines"
    bot.send_message(chat_id, text)

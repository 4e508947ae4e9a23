"""Entry point for the tgcourier host program.

Builds a :class:`~bot.dispatcher.Bot` from :mod:`config`, registers the
built-in commands, answers uploaded documents with their line count, and
polls until interrupted.
"""

import threading

from config import API_ROOT, BOT_TOKEN, LOG_LEVEL, POLL_RETRY_DELAY, REQUEST_TIMEOUT
from core.logger import CourierLogger
from bot.dispatcher import Bot, UpdatePoller
from bot.handlers import register_default_commands, reply_with_line_count

logger = CourierLogger.get_logger()


def build_bot(token: str) -> Bot:
    """Create a bot with the configured timeout, API root, and default commands."""
    bot = Bot(token, timeout=REQUEST_TIMEOUT, api_root=API_ROOT)
    register_default_commands(bot)
    return bot


def main() -> None:
    """Run the polling loop until Ctrl+C.

    Raises:
        EnvironmentError: If ``BOT_TOKEN`` is not set.
    """
    if not BOT_TOKEN:
        raise EnvironmentError("BOT_TOKEN environment variable is not set or is empty.")

    CourierLogger.set_level(LOG_LEVEL)
    stop_event = threading.Event()

    with build_bot(BOT_TOKEN) as bot:
        poller = UpdatePoller(
            bot,
            on_document=lambda update, count: reply_with_line_count(bot, update, count),
            retry_delay=POLL_RETRY_DELAY,
        )
        logger.info("tgcourier is running. Polling for updates...")
        try:
            poller.run(stop_event)
        except KeyboardInterrupt:
            stop_event.set()
            logger.info("Interrupted, shutting down", extra={"offset": poller.offset})


if __name__ == "__main__":
    main()

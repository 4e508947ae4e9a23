"""Structured logging for tgcourier.

Every module asks :class:`CourierLogger` for the same ``tgcourier`` logger.
Records go to stderr as one JSON object per line and, when a log directory
is configured, to a size-rotated ``tgcourier.log`` in that directory.
"""

import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import List, Optional


class _JsonFormatter(logging.Formatter):
    """Render a record as one line of JSON.

    The base keys are timestamp, level, logger, message, module and
    func_name.  Whatever the caller passes through ``extra`` (``chat_id``,
    ``update_id``, ``api_endpoint`` and so on) lands next to them, and a
    formatted traceback is added under ``exc_info`` for ``logger.exception``.

    ``logger.info("Message sent", extra={"chat_id": 42})`` becomes::

        {"timestamp": "…", "level": "INFO", …, "message": "Message sent", "chat_id": 42}
    """

    # Attributes every LogRecord carries; anything else came in via ``extra``.
    _BUILTIN_ATTRS: frozenset[str] = frozenset(vars(logging.LogRecord(
        name="", level=0, pathname="", lineno=0, msg="", args=(), exc_info=None,
    )))

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "func_name": record.funcName,
        }

        for key, value in record.__dict__.items():
            if key not in self._BUILTIN_ATTRS and key not in log_entry:
                log_entry[key] = value

        if record.exc_info:
            log_entry["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class CourierLogger:
    """Process-wide owner of the ``tgcourier`` logger and its handlers.

    ``CourierLogger.get_logger()`` is all most modules need.  Handlers are
    attached on the first call, so the log directory is whatever
    ``TGCOURIER_LOG_DIR`` holds at that moment (``logs`` when unset, no file
    at all when empty).  :mod:`config` loads ``.env`` before its first call,
    which lets the variable live there.
    """

    _instance: Optional["CourierLogger"] = None
    _logger: Optional[logging.Logger] = None

    _LOG_DIR_ENV: str = "TGCOURIER_LOG_DIR"
    _DEFAULT_LOG_DIR: str = "logs"
    _LOG_FILE: str = "tgcourier.log"
    _MAX_BYTES: int = 5 * 1024 * 1024  # 5 MB
    _BACKUP_COUNT: int = 5

    def __new__(cls, level: int = logging.INFO) -> "CourierLogger":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._init_logger(level)
        return cls._instance

    # ------------------------------------------------------------------
    # Initialisation helpers
    # ------------------------------------------------------------------

    @classmethod
    def _build_handlers(cls, level: int) -> List[logging.Handler]:
        """Return the console handler plus the rotating file handler, if any."""
        formatter = _JsonFormatter()

        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(level)
        stream_handler.setFormatter(formatter)
        handlers: List[logging.Handler] = [stream_handler]

        log_dir = os.environ.get(cls._LOG_DIR_ENV, cls._DEFAULT_LOG_DIR)
        if not log_dir:
            return handlers

        os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, cls._LOG_FILE),
            maxBytes=cls._MAX_BYTES,
            backupCount=cls._BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)
        return handlers

    def _init_logger(self, level: int) -> None:
        self._logger = logging.getLogger("tgcourier")
        self._logger.setLevel(level)

        # Already configured by an earlier import of this module.
        if self._logger.handlers:
            return

        for handler in self._build_handlers(level):
            self._logger.addHandler(handler)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @staticmethod
    def get_logger(level: int = logging.INFO) -> logging.Logger:
        """Return the ``tgcourier`` logger, configuring it on first use.

        *level* only matters on that first call; afterwards go through
        :meth:`set_level`.
        """
        instance = CourierLogger(level)
        assert instance._logger is not None
        return instance._logger

    @staticmethod
    def set_level(level: int | str) -> None:
        """Apply *level* to the logger and to each of its handlers."""
        logger = CourierLogger.get_logger()
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)

    def cleanup(self) -> None:
        """Flush, close and detach every handler."""
        if self._logger is None:
            return
        for handler in list(self._logger.handlers):
            handler.flush()
            handler.close()
            self._logger.removeHandler(handler)

    def __del__(self) -> None:
        self.cleanup()

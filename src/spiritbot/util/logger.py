"""
Logging for SpiritBot.

Every module logger is a child of the ``spiritbot`` logger, which owns the
two handlers of the process:

- a console handler that prints through prompt_toolkit, so log lines land
  above the operator prompt instead of inside it, coloured per level when
  stderr is a terminal;
- a rotating file handler writing ``logs/<session start>.log`` at DEBUG.

Third-party loggers are capped at ERROR and uncaught exceptions are logged
through ``sys.excepthook``.
"""

import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path

from prompt_toolkit import print_formatted_text
from prompt_toolkit.formatted_text import ANSI

ROOT_LOGGER_NAME = "spiritbot"

LOGS_DIR: Path = (Path(__file__).parents[3] / "logs").resolve()

RECORD_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(funcName)s:%(lineno)d] %(message)s"
TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

# ANSI SGR codes per level
LEVEL_SGR = {
    logging.DEBUG: "36",
    logging.INFO: "32",
    logging.WARNING: "33",
    logging.ERROR: "31",
    logging.CRITICAL: "1;31",
}

QUIET_LIBRARIES = ("discord", "websockets", "aiohttp", "aiosqlite", "asyncio")

_session_log: Path | None = None


class LevelColorFormatter(logging.Formatter):
    """Formatter that wraps each line in the ANSI colour of its level."""

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        sgr = LEVEL_SGR.get(record.levelno)
        if sgr is None:
            return text
        return f"\033[{sgr}m{text}\033[0m"


class PromptSafeHandler(logging.Handler):
    """Writes records with prompt_toolkit so an active prompt is redrawn below them."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            print_formatted_text(ANSI(self.format(record)))
        except Exception:
            self.handleError(record)


def stderr_is_terminal() -> bool:
    try:
        return sys.stderr.isatty()
    except (AttributeError, ValueError):
        return False


def session_log_path() -> Path:
    """The file this process logs to, named after the moment it was first requested."""
    global _session_log
    if _session_log is None:
        LOGS_DIR.mkdir(parents=True, exist_ok=True)
        _session_log = LOGS_DIR / f"{datetime.now().strftime(TIMESTAMP_FORMAT)}.log"
    return _session_log


def _configure_root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    # Other tools may attach their own handlers here; only ours mark the logger as set up
    if any(isinstance(handler, PromptSafeHandler) for handler in root.handlers):
        return root

    root.setLevel(logging.DEBUG)
    root.propagate = False

    console_formatter_cls = LevelColorFormatter if stderr_is_terminal() else logging.Formatter
    console = PromptSafeHandler(level=logging.INFO)
    console.setFormatter(console_formatter_cls(RECORD_FORMAT))
    root.addHandler(console)

    logfile = RotatingFileHandler(
        session_log_path(),
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding="utf-8",
    )
    logfile.setLevel(logging.DEBUG)
    logfile.setFormatter(logging.Formatter(RECORD_FORMAT))
    root.addHandler(logfile)

    for library in QUIET_LIBRARIES:
        logging.getLogger(library).setLevel(logging.ERROR)

    return root


def get_logger(name: str) -> logging.Logger:
    """Return the ``spiritbot.<name>`` logger, setting up the shared handlers on first use."""
    _configure_root()
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def handle_exception(exc_type, exc_value, exc_traceback) -> None:
    """``sys.excepthook`` replacement; Ctrl+C keeps its default behaviour."""
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return
    get_logger("uncaught").critical("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))


sys.excepthook = handle_exception

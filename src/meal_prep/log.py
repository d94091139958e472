"""Rich logging for the engine and CLI, plus user-facing notices."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console

LOGGER_NAME = "meal_prep"

stderr_console = Console(stderr=True)


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def setup_logging(level: str = "info", log_file: Path | None = None) -> logging.Logger:
    """Attach a RichHandler (and optionally a debug file log) to the meal_prep logger."""
    from rich.logging import RichHandler

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if log_file is not None else _level(level))
    logger.handlers.clear()

    console_handler = RichHandler(
        console=stderr_console,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(_level(level))
    logger.addHandler(console_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


def notify(message: str, style: str = "green") -> None:
    """Show a short status line to the user on stderr."""
    stderr_console.print(message, style=style, highlight=False)

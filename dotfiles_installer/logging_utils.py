from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

DEFAULT_LOG_PATH = "~/.local/state/dotfiles-installer/install.log"

LEVEL_COLORS = {
    "DEBUG": "\x1b[36m",
    "INFO": "\x1b[32m",
    "WARNING": "\x1b[33m",
    "ERROR": "\x1b[31m",
    "CRITICAL": "\x1b[41m",
}
RESET = "\x1b[0m"


class ColoredFormatter(logging.Formatter):
    """Console formatter: `[LEVEL] message`, level colored when writing to a tty."""

    def __init__(self, fmt: str, use_color: bool = True):
        super().__init__(fmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        color = LEVEL_COLORS.get(levelname, "") if self.use_color else ""
        record.levelname = f"{color}{levelname}{RESET}" if color else levelname
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Configure logging.

    Every step decision and every external command lands in the log file, so a
    failed run can be diagnosed from the transcript alone.

    Notes:
    - The requested path is tried first; if its directory cannot be created or
      written, we fall back to a file in the system temp directory.
    - The console only shows the message with a leveled prefix; timestamps and
      logger names go to the file.

    Returns the actual file path being used.
    """

    logger = logging.getLogger()
    logger.setLevel(min(level, logging.DEBUG))

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_dotfiles_configured", False):
        return getattr(logger, "_dotfiles_log_path", log_path)

    requested = os.path.expanduser(log_path)
    chosen_path = requested
    handlers: list[logging.Handler] = []

    file_fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    file_handler: Optional[logging.Handler] = None
    try:
        Path(os.path.dirname(requested) or ".").mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(requested)
    except OSError:
        chosen_path = str(Path(os.environ.get("TMPDIR", "/tmp")) / "dotfiles-installer.log")
        file_handler = logging.FileHandler(chosen_path)
    file_handler.setFormatter(file_fmt)
    file_handler.setLevel(logging.DEBUG)
    handlers.append(file_handler)

    if also_console:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(ColoredFormatter("[%(levelname)s] %(message)s", use_color=sys.stdout.isatty()))
        console.setLevel(level)
        handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_dotfiles_configured", True)
    setattr(logger, "_dotfiles_log_path", chosen_path)

    logging.getLogger(__name__).debug(
        "Logging initialized (requested=%s, actual=%s)", requested, chosen_path
    )
    return chosen_path

# src/tasklist/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the interactive console readable:
    - allow tasklist logs
    - everything else (aiosqlite, asyncio, captured py.warnings) only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name == "tasklist" or name.startswith("tasklist."):
            return True

        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/tasklist",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Configure logging with:
    - Console handler: readable + filtered for interactive use
    - File handler: full logs for debugging

    Call this ONCE, very early (before first logger.info).
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "tasklist.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.captureWarnings(True)

    # aiosqlite logs every request at DEBUG.
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)

# src/mindful_remind/logging_setup.py

"""
Logging for both entrypoints (the console client and the record store server).

The console shares the terminal with the REPL prompt, so its handler only shows
what a person at the prompt acts on. The log file under `data_dir` keeps everything,
including every sync fallback and merge.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Loggers whose routine chatter stays out of the console below WARNING.
_QUIET_PREFIXES = ("mindful_remind.sync.",)


class _ConsoleNoiseFilter(logging.Filter):
    """
    Console policy:
    - mindful_remind records pass, except sync internals below WARNING
      (commands already print "Saved locally only" for a failed sync)
    - uvicorn INFO+ passes so the server shows its startup and access lines
    - any other library, and captured `py.warnings`, only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name.startswith("mindful_remind."):
            if name.startswith(_QUIET_PREFIXES):
                return record.levelno >= logging.WARNING
            return True

        if name.startswith("uvicorn"):
            return record.levelno >= logging.INFO

        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/mindful_remind",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    log_name: str = "mindful_remind.log",
) -> Path:
    """
    Install a filtered stderr handler and a full-detail file handler on the root logger.

    The client writes `mindful_remind.log`, the server passes `record_store.log`,
    so both can share one `data_dir`. Existing root handlers are replaced, making a
    second call reconfigure rather than duplicate output. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / log_name

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)

    # One line per gateway request is too much even for the file.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return log_file

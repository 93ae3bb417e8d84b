# src/mindful_remind/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (mirror + gateway + sync engine),
then runs the console REPL in the main thread.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state, shutdown_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/mindful_remind")
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s (record store %s)...", settings.app_name, settings.api_base_url)

    state = create_initial_state(settings=settings)
    try:
        if settings.console_enabled:
            run_console_loop(state)
        else:
            logger.info("Console disabled; nothing to do.")
    finally:
        shutdown_state(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()

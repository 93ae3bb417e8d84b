# src/mindful_remind/backend/server.py

"""Record store entrypoint: `mindful-remind-server` (uvicorn)."""

from __future__ import annotations

import logging

import uvicorn

from ..config import get_settings
from ..logging_setup import setup_logging
from .app import create_app
from .store import RecordStore

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level, log_name="record_store.log")

    store = RecordStore(settings.backend_db_path)
    app = create_app(store)

    logger.info("Record store listening on http://%s:%s", settings.backend_host, settings.backend_port)
    # log_config=None keeps uvicorn on our handlers instead of installing its own.
    uvicorn.run(app, host=settings.backend_host, port=settings.backend_port, log_config=None)


if __name__ == "__main__":
    main()

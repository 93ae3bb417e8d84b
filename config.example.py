# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
See src/mindful_remind/config.py.

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "REMIND_APP_NAME": "App display name (default: mindful-remind).",
    "REMIND_LOG_LEVEL": "Console logging level (default: INFO).",
    # Client
    "REMIND_CONSOLE_ENABLED": "Run the console REPL (true/false, default: true).",
    "REMIND_API_BASE_URL": "Record store base URL (default: http://<backend_host>:<backend_port>).",
    "REMIND_REMOTE_TIMEOUT_SECONDS": "Per-request timeout; empty or 0 waits indefinitely (default).",
    # Paths (gitignored)
    "REMIND_DATA_DIR": "Local data directory (default: .local/mindful_remind).",
    "REMIND_MIRROR_DB_PATH": "Client mirror SQLite path (default: <data_dir>/mirror.sqlite3).",
    # Record store
    "REMIND_BACKEND_DB_PATH": "Record store SQLite path (default: <data_dir>/database.sqlite3).",
    "REMIND_BACKEND_HOST": "Record store bind host (default: 127.0.0.1).",
    "REMIND_BACKEND_PORT": "Record store port (default: 3000).",
}

"""Settings shared by every environment; values come from the environment (.env via python-dotenv)."""

import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "edumark"),
}

# Below this percentage a student shows up in low-attendance lists.
MINIMUM_ATTENDANCE = int(os.getenv("MINIMUM_ATTENDANCE", "75"))

# Bulk import pacing for the account gateway.
IMPORT_ROW_DELAY_SECONDS = float(os.getenv("IMPORT_ROW_DELAY_SECONDS", "2"))
IMPORT_MAX_RETRIES = int(os.getenv("IMPORT_MAX_RETRIES", "5"))
IMPORT_BASE_DELAY_SECONDS = float(os.getenv("IMPORT_BASE_DELAY_SECONDS", "3"))

import os

from config.base import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

IMPORT_ROW_DELAY_SECONDS = 0.0
IMPORT_BASE_DELAY_SECONDS = 0.0

import os

from .config import Config

SECRET_KEY = "test-secret"

DB_CONFIG = {
    **Config.db_config(),
    "database": os.getenv("DB_NAME", "arts_center_test"),
}

PRORATION_POLICY = Config.PRORATION_POLICY
PRORATION_CUTOFF_DAY = Config.PRORATION_CUTOFF_DAY
PAGE_FETCH_WORKERS = 2

DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

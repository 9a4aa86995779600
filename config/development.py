import os

from .config import Config

SECRET_KEY = Config.SECRET_KEY
DB_CONFIG = Config.db_config()

PRORATION_POLICY = Config.PRORATION_POLICY
PRORATION_CUTOFF_DAY = Config.PRORATION_CUTOFF_DAY
PAGE_FETCH_WORKERS = Config.PAGE_FETCH_WORKERS

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

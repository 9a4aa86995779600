import os

from .config import Config

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
DB_CONFIG = Config.db_config()

PRORATION_POLICY = Config.PRORATION_POLICY
PRORATION_CUTOFF_DAY = Config.PRORATION_CUTOFF_DAY
PAGE_FETCH_WORKERS = Config.PAGE_FETCH_WORKERS

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

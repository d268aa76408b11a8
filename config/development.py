import os

from .config import Config

SECRET_KEY = Config.SECRET_KEY
DB_CONFIG = Config.db_config()

DEBUG = bool(int(os.getenv("DEBUG", "1")))
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG").upper()

DEFAULT_CLOSURE_RATING = Config.DEFAULT_CLOSURE_RATING

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo students on startup
AUTO_SEED_DB = Config.AUTO_SEED_DB

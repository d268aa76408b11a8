from .config import Config

SECRET_KEY = "test-secret"
DB_CONFIG = Config.db_config()

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

DEFAULT_CLOSURE_RATING = 10

AUTO_INIT_DB = False
AUTO_SEED_DB = False

# ecobazaar/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "")
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY") or os.getenv("SUPABASE_KEY", "")
STORE_TIMEOUT_SECONDS = float(os.getenv("STORE_TIMEOUT_SECONDS", 10))

REDIS_URL = os.getenv("REDIS_URL", "redis://redis:6379/0")
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://redis:6379/1")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "redis://redis:6379/2")

# ledger entry lifetime, kept long enough to answer retries of a finished checkout
CHECKOUT_TTL_SECONDS = int(os.getenv("CHECKOUT_TTL_SECONDS", 24 * 60 * 60))
CHECKOUT_STALL_SECONDS = int(os.getenv("CHECKOUT_STALL_SECONDS", 120))
CHECKOUT_AUTO_RESUME = os.getenv("CHECKOUT_AUTO_RESUME", "0").lower() in ("1", "true", "yes")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
# how long one worker may hold a checkout key before another may take over
CHECKOUT_LOCK_SECONDS = int(os.getenv("CHECKOUT_LOCK_SECONDS", 60))

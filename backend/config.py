# config.py
from dotenv import load_dotenv
load_dotenv()

import os


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
SERVICE_NAME = os.getenv("SERVICE_NAME", "influencer-manager")

# Background notification worker
NOTIFICATION_POLL_SECONDS = float(os.getenv("NOTIFICATION_POLL_SECONDS", "1.0"))
NOTIFICATION_CHANNEL = os.getenv("NOTIFICATION_CHANNEL", "log").lower().strip()  # log | celery

# Simulated payment gateway
PAYMENT_SUCCESS_RATE = float(os.getenv("PAYMENT_SUCCESS_RATE", "0.95"))
DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "USD")

# Auth
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))
MAX_LOGIN_ATTEMPTS = int(os.getenv("MAX_LOGIN_ATTEMPTS", "5"))
LOGIN_LOCKOUT_SECONDS = int(os.getenv("LOGIN_LOCKOUT_SECONDS", "300"))
SESSION_TIMEOUT_MINUTES = int(os.getenv("SESSION_TIMEOUT_MINUTES", "30"))

# Matching engine
RECOMMENDATION_LIMIT = int(os.getenv("RECOMMENDATION_LIMIT", "10"))
RECOMMENDATION_MIN_SCORE = int(os.getenv("RECOMMENDATION_MIN_SCORE", "50"))

# Seed the in-memory stores with the sample marketplace on startup
LOAD_DEMO_DATA = _env_bool("LOAD_DEMO_DATA", False)

CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", CELERY_BROKER_URL)

import os

TIMEOUT_SECS = float(os.getenv("DV_TIMEOUT_SECS", "5"))
MAX_TRIES = int(os.getenv("DV_MAX_TRIES", "2"))
PERIOD_SECS = float(os.getenv("DV_PERIOD_SECS", str(TIMEOUT_SECS)))
LOG_LEVEL = os.getenv("DV_LOG_LEVEL", "INFO")
LISTEN_HOST = os.getenv("DV_LISTEN_HOST", "0.0.0.0")

REDIS_HOST = os.getenv("REDIS_HOST", "127.0.0.1")
REDIS_PORT = int(os.getenv("REDIS_PORT", "6379"))
REDIS_PASSWORD = os.getenv("REDIS_PASSWORD") or None
CHANNEL_PREFIX = os.getenv("DV_CHANNEL_PREFIX", "dvroute")

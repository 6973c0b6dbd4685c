# src/common/rate_limit.py

from slowapi import Limiter
from slowapi.util import get_remote_address

from src.common.config import settings

# memory:// resets on restart and is per process.
# For multiple workers point RATE_LIMIT_STORAGE_URI at Redis.
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
)

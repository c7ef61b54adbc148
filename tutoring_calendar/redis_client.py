# tutoring_calendar/redis_client.py

import redis

from .config import get_settings

redis_client = redis.from_url(get_settings().redis_url, decode_responses=True)


def get_redis() -> redis.Redis:
    """FastAPI dependency returning the shared Redis client."""
    return redis_client

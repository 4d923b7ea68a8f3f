# shopgenie/redis.py
"""
Redis Client Setup.
"""

import redis

from shopgenie.config import get_settings


def get_redis_client(url: str | None = None):
    """Returns a synchronous Redis client."""
    return redis.from_url(url or get_settings().REDIS_URL, decode_responses=True)

# backend/questroom/redis_client.py

import redis

from .config import settings

# Lazy: no connection is opened until the first command.
redis_client = redis.Redis.from_url(
    settings.redis_url,
    decode_responses=True,
    socket_connect_timeout=2,
    socket_timeout=2,
)

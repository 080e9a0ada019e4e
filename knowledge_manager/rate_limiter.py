# -*- coding: utf-8 -*-
"""
Fixed-window counter of failed attempts per client.

The counter lives in Redis. Incrementing and refreshing the expiry run
inside one Lua script: the window starts with the first failure and is
reset on every failure while the client is still within its allowance.
After that it is left alone, so a blocked client cannot extend its own
block by retrying.
"""

import logging

from flask import current_app

from knowledge_manager.extensions import get_redis_client

logger = logging.getLogger(__name__)

KEY_PREFIX = "failed_attempts"

RECORD_FAILURE_SCRIPT = """
local count = redis.call('INCR', KEYS[1])
if count == 1 or count <= tonumber(ARGV[1]) then
    redis.call('EXPIRE', KEYS[1], ARGV[2])
end
return count
"""


class RateLimiter:
    """
    Args:
        redis_client: Redis connection holding the counters.
        key (str): Counter key for the client.
        limit (int): Failures allowed inside one window.
        period (int): Window length in seconds.
    """

    def __init__(self, redis_client, key, limit, period):
        self.redis = redis_client
        self.key = key
        self.limit = limit
        self.period = period
        self._record = redis_client.register_script(RECORD_FAILURE_SCRIPT)

    @classmethod
    def for_request(cls, ctx, limit, period, scope=None):
        """Limiter keyed on the client address, optionally per route."""
        key = f"{KEY_PREFIX}:{ctx.client_ip}"
        if scope:
            key = f"{key}:{scope}"
        return cls(get_redis_client(), key, limit, period)

    @classmethod
    def from_config(cls, ctx, name, scope=None):
        """Limiter using the ``<NAME>_RATE_LIMIT``/``<NAME>_RATE_PERIOD`` settings."""
        config = current_app.config
        return cls.for_request(
            ctx,
            config[f"{name}_RATE_LIMIT"],
            config[f"{name}_RATE_PERIOD"],
            scope=scope,
        )

    def record_failure(self):
        """Count one failed attempt and return the new total."""
        count = int(self._record(keys=[self.key], args=[self.limit, self.period]))
        if count == self.limit + 1:
            logger.warning("Client %s reached %d failed attempts", self.key, count)
        return count

    def count(self):
        value = self.redis.get(self.key)
        return int(value) if value is not None else 0

    def limit_exceeded(self):
        return self.count() > self.limit

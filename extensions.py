"""
Process-wide singletons: the rate limiter and the PostgreSQL pool.

Both are created without an app and bound in create_app().
"""

from __future__ import annotations

import logging
import threading

from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from pg_compat import PgPool

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address, default_limits=["1000 per hour"])


class PoolManager:
    """Lazily opened PostgreSQL pool, one per database URL.

    The first caller opens the pool under a lock, so concurrent first
    requests still end up sharing a single pool. ``shutdown()`` is the
    teardown hook and is safe to call more than once.
    """

    _pools: dict[str, PgPool] = {}
    _lock = threading.Lock()

    @classmethod
    def get_pool(cls, database_url: str, minconn: int = 1, maxconn: int = 5) -> PgPool:
        pool = cls._pools.get(database_url)
        if pool is not None:
            return pool
        with cls._lock:
            pool = cls._pools.get(database_url)
            if pool is None:
                pool = PgPool(database_url, minconn=minconn, maxconn=maxconn)
                cls._pools[database_url] = pool
        return pool

    @classmethod
    def shutdown(cls) -> None:
        with cls._lock:
            pools, cls._pools = cls._pools, {}
        for pool in pools.values():
            try:
                pool.close()
            except Exception:
                logger.warning("Failed to close PostgreSQL pool", exc_info=True)

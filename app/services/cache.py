from __future__ import annotations

import logging
from typing import Iterable

import redis.asyncio as redis


log = logging.getLogger(__name__)

# spaces:search* -> listing search pages, space:* -> listing detail pages
DEFAULT_FLUSH_PATTERNS: tuple[str, ...] = ("spaces:search*", "space:*")


def build_redis(redis_url: str) -> redis.Redis:
    return redis.from_url(redis_url, decode_responses=True)


async def flush_namespaces(r: redis.Redis, patterns: Iterable[str] = DEFAULT_FLUSH_PATTERNS) -> int:
    """
    Delete every key matching any of the glob patterns in one DEL.

    No TTL handling and no locking; keys written while the scan runs may
    survive. Connection errors propagate to the caller.
    """
    keys: set[str] = set()
    for pattern in patterns:
        matched = [k async for k in r.scan_iter(match=pattern)]
        log.info("Pattern %s matched %d keys", pattern, len(matched))
        keys.update(matched)

    if not keys:
        log.info("No keys found")
        return 0

    log.info("Deleting %d keys...", len(keys))
    deleted = await r.delete(*sorted(keys))
    log.info("Deleted %d keys", deleted)
    return deleted

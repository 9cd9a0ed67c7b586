import asyncio
import logging
from typing import Iterable

from app.core.config import settings
from app.services.cache import build_redis, flush_namespaces


log = logging.getLogger(__name__)


async def run(*, redis_url: str | None = None, patterns: Iterable[str] | None = None) -> int:
    r = build_redis(redis_url or settings.redis_url)
    try:
        return await flush_namespaces(r, settings.cache_flush_patterns if patterns is None else patterns)
    finally:
        await r.aclose()


def main() -> int:
    logging.basicConfig(level=settings.log_level)
    log.info("--- Clearing spaces cache ---")
    deleted = asyncio.run(run())
    print(f"Deleted {deleted} keys.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

import asyncio
import logging

from app.core.config import settings
from app.core.db import session_scope
from app.services.catalog import ReclassifySummary, reclassify_listings, resolve_service_names


log = logging.getLogger(__name__)


async def run(*, database_url: str | None = None) -> ReclassifySummary:
    service_names = resolve_service_names(settings)
    log.info("Service categories: %s", ", ".join(sorted(service_names)))
    async with session_scope(database_url) as db:
        return await reclassify_listings(db, service_names)


def main() -> int:
    logging.basicConfig(level=settings.log_level)
    summary = asyncio.run(run())
    print(f"Updated {summary.services} SERVICE listings and {summary.spaces} SPACE listings")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

import argparse
import asyncio
import logging

from app.core.config import settings
from app.core.db import session_scope
from app.services.catalog import (
    DEFAULT_CATEGORY_SEEDS,
    ReclassifySummary,
    SeedSummary,
    reclassify_listings,
    resolve_service_names,
    seed_categories,
)


log = logging.getLogger(__name__)


async def run(*, reclassify: bool = False, database_url: str | None = None) -> tuple[SeedSummary, ReclassifySummary | None]:
    async with session_scope(database_url) as db:
        seeded = await seed_categories(db, DEFAULT_CATEGORY_SEEDS)
        log.info("Seeding finished: %d created, %d updated", seeded.created, seeded.updated)

        reclassified = None
        if reclassify:
            reclassified = await reclassify_listings(db, resolve_service_names(settings))
    return seeded, reclassified


def main() -> int:
    p = argparse.ArgumentParser(description="Create or update the marketplace categories.")
    p.add_argument("--reclassify", action="store_true", help="also recompute listing types afterwards")
    args = p.parse_args()

    logging.basicConfig(level=settings.log_level)
    asyncio.run(run(reclassify=args.reclassify))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

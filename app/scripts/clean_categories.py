import asyncio
import logging

from app.core.config import settings
from app.core.db import session_scope
from app.services.catalog import clean_category_names


async def run(*, database_url: str | None = None) -> int:
    async with session_scope(database_url) as db:
        return await clean_category_names(db)


def main() -> int:
    logging.basicConfig(level=settings.log_level)
    renamed = asyncio.run(run())
    print(f"Categories cleaned! ({renamed} renamed)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

import asyncio
import json
import logging

from app.core.config import settings
from app.core.db import session_scope
from app.services.catalog import list_categories


async def run(*, database_url: str | None = None) -> list[dict]:
    async with session_scope(database_url) as db:
        return [
            {"id": c.id, "name": c.name, "type": c.type.value}
            for c in await list_categories(db)
        ]


def main() -> int:
    logging.basicConfig(level=settings.log_level)
    print(json.dumps(asyncio.run(run()), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

import logging

import uvicorn

from app.core.config import settings


log = logging.getLogger(__name__)


def main() -> int:
    logging.basicConfig(level=settings.log_level)
    log.info("Server is running on port %d", settings.port)
    uvicorn.run("app.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

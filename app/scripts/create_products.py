from __future__ import annotations

import asyncio
import logging
import sys

from app.core.config import settings
from app.schemas.billing import PlanSpec
from app.services.billing import (
    DEFAULT_PLANS,
    ProvisionedPlan,
    build_billing_client,
    create_product_and_price,
    has_billing_key,
    render_env_lines,
)


log = logging.getLogger(__name__)


async def run(plans: tuple[PlanSpec, ...] = DEFAULT_PLANS, **client_kwargs) -> list[ProvisionedPlan | None]:
    results: list[ProvisionedPlan | None] = []
    async with build_billing_client(settings, **client_kwargs) as client:
        for plan in plans:
            results.append(await create_product_and_price(client, plan, currency=settings.billing_currency))
    return results


def main() -> int:
    logging.basicConfig(level=settings.log_level)

    if not has_billing_key(settings):
        print("Missing STRIPE_SECRET_KEY (env or .env)", file=sys.stderr)
        return 2

    log.info("Creating subscription products (check that the key is the PRODUCTION one)...")
    results = asyncio.run(run())

    print("\n--- COPY AND PASTE INTO YOUR .ENV (PRODUCTION) ---")
    for line in render_env_lines(results):
        print(line)
    print("--------------------------------------------------")

    failed = [p.name for p, r in zip(DEFAULT_PLANS, results) if r is None]
    if failed:
        print(f"Not created: {', '.join(failed)} (see log above)", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

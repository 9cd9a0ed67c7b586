from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError

from app.core.config import settings
from app.schemas.billing import CouponDuration, CouponSpec
from app.services.billing import DEFAULT_COUPON, build_billing_client, create_coupon, has_billing_key


async def run(spec: CouponSpec, **client_kwargs) -> str | None:
    async with build_billing_client(settings, **client_kwargs) as client:
        return await create_coupon(client, spec)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Create a discount coupon on the billing provider (idempotent by code).")
    p.add_argument("--code", default=DEFAULT_COUPON.code, help="coupon code, used as the provider id")
    p.add_argument("--name", default=DEFAULT_COUPON.name)
    p.add_argument("--percent-off", type=float, default=DEFAULT_COUPON.percent_off)
    p.add_argument("--duration", choices=[d.value for d in CouponDuration], default=DEFAULT_COUPON.duration.value)
    p.add_argument("--duration-in-months", type=int, help="required for --duration repeating")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=settings.log_level)

    if not has_billing_key(settings):
        print("Missing STRIPE_SECRET_KEY (env or .env)", file=sys.stderr)
        return 2

    try:
        spec = CouponSpec(
            code=args.code,
            name=args.name,
            percent_off=args.percent_off,
            duration=args.duration,
            duration_in_months=args.duration_in_months,
        )
    except ValidationError as e:
        print(f"Invalid coupon: {e}", file=sys.stderr)
        return 2

    coupon_id = asyncio.run(run(spec))
    if coupon_id is None:
        print(f"Coupon {spec.code} was not created (see log above)", file=sys.stderr)
    else:
        print(f"Coupon ready: {coupon_id}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from app.core.config import Settings
from app.schemas.billing import CouponSpec, PlanSpec, PriceInterval
from app.services.http_client import ProviderHttpClient


log = logging.getLogger(__name__)

RESOURCE_ALREADY_EXISTS = "resource_already_exists"


@dataclass(frozen=True)
class ProvisionedPlan:
    name: str
    product_id: str
    price_id: str
    unit_amount: int
    currency: str
    interval: str
    env_var: str | None = None
    reused: bool = False


DEFAULT_PLANS: tuple[PlanSpec, ...] = (
    PlanSpec(
        name="Plano Mensal",
        description="Acesso completo ao Marketplace (Faturamento Mensal)",
        amount_in_cents=5000,
        interval=PriceInterval.MONTH,
        env_var="STRIPE_PRICE_ID_NORMAL",
        lookup_key="plan_monthly",
        metadata={"plan_type": "normal"},
    ),
    PlanSpec(
        name="Plano Anual",
        description="Acesso completo ao Marketplace (Faturamento Anual)",
        amount_in_cents=50000,
        interval=PriceInterval.YEAR,
        env_var="STRIPE_PRICE_ID_ANNUAL",
        lookup_key="plan_annual",
        metadata={"plan_type": "annual"},
    ),
    PlanSpec(
        name="Plano Founder",
        description="Plano especial para fundadores",
        amount_in_cents=2500,
        interval=PriceInterval.MONTH,
        env_var="STRIPE_PRICE_ID_FOUNDER",
        lookup_key="plan_founder",
        metadata={"plan_type": "founder"},
    ),
)

DEFAULT_COUPON = CouponSpec(code="DESCONTO50", name="Desconto de 50% (Especial)", percent_off=50)


def has_billing_key(settings: Settings) -> bool:
    key = settings.stripe_secret_key
    return key is not None and bool(key.get_secret_value().strip())


def build_billing_client(settings: Settings, **kwargs) -> ProviderHttpClient:
    if not has_billing_key(settings):
        raise ValueError("STRIPE_SECRET_KEY is not set")
    return ProviderHttpClient(
        base_url=settings.stripe_api_base,
        secret_key=settings.stripe_secret_key.get_secret_value(),
        api_version=settings.stripe_api_version,
        timeout_seconds=settings.billing_timeout_seconds,
        **kwargs,
    )


async def create_coupon(client: ProviderHttpClient, spec: CouponSpec) -> str | None:
    """
    Create a coupon whose provider id is the coupon code.

    Returns the code on success or when the provider already has it;
    any other failure is logged and returns None.
    """
    log.info("Creating coupon: %s (%s)", spec.name, spec.code)
    res = await client.post(
        "/v1/coupons",
        {
            "id": spec.code,
            "name": spec.name,
            "percent_off": spec.percent_off,
            "duration": spec.duration,
            "duration_in_months": spec.duration_in_months,
        },
    )
    if res.ok:
        coupon_id = res.detail.get("id", spec.code)
        log.info("Coupon created: %s", coupon_id)
        return coupon_id

    if res.error_code == RESOURCE_ALREADY_EXISTS:
        log.info("Coupon %r already exists on the provider", spec.code)
        return spec.code

    log.error(
        "Failed to create coupon %s: status=%s code=%s message=%s",
        spec.code, res.status_code, res.error_code, res.error_message,
    )
    return None


async def _find_price_by_lookup_key(client: ProviderHttpClient, lookup_key: str) -> dict | None:
    res = await client.get("/v1/prices", {"lookup_keys": [lookup_key], "active": True, "limit": 1})
    if not res.ok:
        log.warning("Price lookup failed for %s: %s", lookup_key, res.error_message)
        return None
    data = res.detail.get("data") or []
    return data[0] if data else None


async def create_product_and_price(
    client: ProviderHttpClient,
    spec: PlanSpec,
    *,
    currency: str = "brl",
) -> ProvisionedPlan | None:
    """
    Create a product and a recurring price attached to it.

    Without a lookup key every call creates new provider objects. With one,
    an existing active price carrying that key is returned instead.
    Errors are logged and yield None; nothing is retried.
    """
    if spec.lookup_key:
        existing = await _find_price_by_lookup_key(client, spec.lookup_key)
        if existing:
            product = existing.get("product")
            product_id = product.get("id") if isinstance(product, dict) else product
            log.info("Reusing price %s for %s (lookup_key=%s)", existing["id"], spec.name, spec.lookup_key)
            return ProvisionedPlan(
                name=spec.name,
                product_id=product_id,
                price_id=existing["id"],
                unit_amount=existing.get("unit_amount", spec.amount_in_cents),
                currency=existing.get("currency", currency),
                interval=(existing.get("recurring") or {}).get("interval", spec.interval.value),
                env_var=spec.env_var,
                reused=True,
            )

    log.info("Creating product: %s", spec.name)
    product = await client.post(
        "/v1/products",
        {"name": spec.name, "description": spec.description or None, "metadata": spec.metadata or None},
    )
    if not product.ok:
        log.error("Failed to create product %s: %s (%s)", spec.name, product.error_message, product.error_code)
        return None
    product_id = product.detail["id"]
    log.info("Product created: %s", product_id)

    price = await client.post(
        "/v1/prices",
        {
            "product": product_id,
            "unit_amount": spec.amount_in_cents,
            "currency": currency,
            "recurring": {"interval": spec.interval, "interval_count": spec.interval_count},
            "lookup_key": spec.lookup_key,
            "nickname": spec.name,
        },
    )
    if not price.ok:
        log.error("Failed to create price for %s: %s (%s)", spec.name, price.error_message, price.error_code)
        return None
    price_id = price.detail["id"]
    log.info(
        "Price created: %s (%.2f %s / %s)",
        price_id, spec.amount_in_cents / 100, currency.upper(), spec.interval.value,
    )

    return ProvisionedPlan(
        name=spec.name,
        product_id=product_id,
        price_id=price_id,
        unit_amount=spec.amount_in_cents,
        currency=currency,
        interval=spec.interval.value,
        env_var=spec.env_var,
    )


def render_env_lines(plans: Iterable[ProvisionedPlan | None]) -> list[str]:
    lines = []
    for plan in plans:
        if plan is None or not plan.env_var:
            continue
        lines.append(f"{plan.env_var}={plan.price_id}  # {plan.name}")
    return lines

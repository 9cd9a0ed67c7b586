import enum

from pydantic import BaseModel, Field, model_validator


class CouponDuration(str, enum.Enum):
    ONCE = "once"
    REPEATING = "repeating"
    FOREVER = "forever"


class PriceInterval(str, enum.Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class CouponSpec(BaseModel):
    # Used verbatim as the provider's coupon id (what customers type at checkout)
    code: str = Field(min_length=1, max_length=200)
    name: str = Field(min_length=1)
    percent_off: float = Field(gt=0, le=100)
    duration: CouponDuration = CouponDuration.ONCE
    duration_in_months: int | None = Field(default=None, gt=0)

    @model_validator(mode="after")
    def _months_only_when_repeating(self) -> "CouponSpec":
        if self.duration is CouponDuration.REPEATING and self.duration_in_months is None:
            raise ValueError("duration_in_months is required when duration is 'repeating'")
        if self.duration is not CouponDuration.REPEATING and self.duration_in_months is not None:
            raise ValueError("duration_in_months is only allowed when duration is 'repeating'")
        return self


class PlanSpec(BaseModel):
    name: str = Field(min_length=1)
    description: str = ""
    amount_in_cents: int = Field(gt=0)
    interval: PriceInterval = PriceInterval.MONTH
    interval_count: int = Field(default=1, gt=0)

    # Env var the operator pastes the price id into, e.g. STRIPE_PRICE_ID_NORMAL
    env_var: str | None = None
    # When set, an existing active price with this lookup key is reused
    lookup_key: str | None = None
    metadata: dict[str, str] = Field(default_factory=dict)

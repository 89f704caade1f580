from __future__ import annotations

COMMISSION_TIERS = (1, 2, 3)
MAX_CODE_ATTEMPTS = 5


def validate_commission_rate(rate: int) -> int:
    if not 0 <= rate <= 100:
        raise ValueError("commission_rate must be between 0 and 100")
    return rate


def commission_cents(*, revenue_cents: int, commission_rate: int) -> int:
    """Commission owed on ``revenue_cents``, rounded down to the cent."""
    if revenue_cents < 0:
        raise ValueError("revenue_cents must be non-negative")
    return revenue_cents * validate_commission_rate(commission_rate) // 100


def commission_due(*, commission_cents: int, commission_paid_cents: int) -> int:
    """Commission earned on a referral that has not been paid out yet."""
    return max(0, commission_cents - commission_paid_cents)

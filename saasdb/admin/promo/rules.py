from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from saasdb.admin.promo.errors import (
    PromoDepletedError,
    PromoExpiredError,
    PromoInactiveError,
    PromoNotApplicableError,
    PromoNotYetValidError,
)


def ensure_redeemable(
    *,
    is_active: bool,
    valid_from: datetime,
    valid_until: datetime | None,
    max_uses: int | None,
    current_uses: int,
    applies_to: Sequence[str],
    product: str | None,
    now_utc: datetime,
) -> None:
    if not is_active:
        raise PromoInactiveError
    if now_utc < valid_from:
        raise PromoNotYetValidError
    if valid_until is not None and now_utc >= valid_until:
        raise PromoExpiredError
    if max_uses is not None and current_uses >= max_uses:
        raise PromoDepletedError
    # An empty list means the code applies to every product.
    if applies_to and product not in applies_to:
        raise PromoNotApplicableError


def discount_cents(*, discount_type: str, discount_value: int, amount_cents: int | None) -> int:
    if discount_type == "trial_extension" or amount_cents is None:
        return 0
    if amount_cents < 0:
        raise ValueError("amount_cents must be non-negative")
    if discount_type == "percentage":
        return amount_cents * discount_value // 100
    if discount_type == "fixed_amount":
        return min(discount_value, amount_cents)
    raise ValueError(f"unknown discount_type: {discount_type}")


def trial_extension_days(*, discount_type: str, discount_value: int) -> int:
    return discount_value if discount_type == "trial_extension" else 0


def uses_remaining(*, max_uses: int | None, current_uses: int) -> int | None:
    if max_uses is None:
        return None
    return max(0, max_uses - current_uses)

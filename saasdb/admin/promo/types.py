from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

DISCOUNT_TYPES = ("percentage", "fixed_amount", "trial_extension")


@dataclass(frozen=True, slots=True)
class PromoQuote:
    promo_code_id: UUID
    code: str
    discount_type: str
    discount_amount_cents: int
    trial_extension_days: int


@dataclass(slots=True)
class PromoRedeemResult:
    redemption_id: UUID
    promo_code_id: UUID
    discount_type: str
    discount_amount_cents: int
    trial_extension_days: int
    uses_remaining: int | None

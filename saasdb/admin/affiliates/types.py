from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, slots=True)
class CommissionPayout:
    affiliate_id: UUID
    referrals: int
    amount_cents: int

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID


@dataclass(frozen=True, slots=True)
class FirebaseUserRow:
    id: UUID
    firebase_uid: str
    email: str | None
    email_verified: bool
    phone_number: str | None
    display_name: str | None
    photo_url: str | None
    role: str
    status: str
    subscription_tier: str
    custom_claims: dict[str, object]


@dataclass(frozen=True, slots=True)
class EmotionTrendPoint:
    day: date
    avg_intensity: Decimal
    count: int


@dataclass(frozen=True, slots=True)
class AdherenceWeek:
    week_start: date
    planned_activities: int
    completed_activities: int
    adherence_rate: Decimal

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from saasdb.admin.promo.errors import (
    PromoDepletedError,
    PromoExpiredError,
    PromoInactiveError,
    PromoNotApplicableError,
    PromoNotYetValidError,
)
from saasdb.admin.promo.rules import (
    discount_cents,
    ensure_redeemable,
    trial_extension_days,
    uses_remaining,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _check(**overrides: object) -> None:
    params: dict[str, object] = {
        "is_active": True,
        "valid_from": NOW - timedelta(days=1),
        "valid_until": NOW + timedelta(days=1),
        "max_uses": 10,
        "current_uses": 0,
        "applies_to": (),
        "product": None,
        "now_utc": NOW,
    }
    params.update(overrides)
    ensure_redeemable(**params)  # type: ignore[arg-type]


def test_ensure_redeemable_accepts_valid_code() -> None:
    _check()


def test_ensure_redeemable_accepts_open_ended_unlimited_code() -> None:
    _check(valid_until=None, max_uses=None, current_uses=500)


@pytest.mark.parametrize(
    ("overrides", "error"),
    [
        ({"is_active": False}, PromoInactiveError),
        ({"valid_from": NOW + timedelta(seconds=1)}, PromoNotYetValidError),
        ({"valid_until": NOW}, PromoExpiredError),
        ({"max_uses": 3, "current_uses": 3}, PromoDepletedError),
        ({"applies_to": ("pro_monthly",), "product": "premium_yearly"}, PromoNotApplicableError),
        ({"applies_to": ("pro_monthly",), "product": None}, PromoNotApplicableError),
    ],
)
def test_ensure_redeemable_rejects(overrides: dict[str, object], error: type[Exception]) -> None:
    with pytest.raises(error):
        _check(**overrides)


def test_inactive_is_reported_before_expiry() -> None:
    with pytest.raises(PromoInactiveError):
        _check(is_active=False, valid_until=NOW - timedelta(days=1))


def test_applies_to_matches_listed_product() -> None:
    _check(applies_to=("pro_monthly", "pro_yearly"), product="pro_yearly")


def test_percentage_discount_rounds_down() -> None:
    assert discount_cents(discount_type="percentage", discount_value=15, amount_cents=999) == 149


def test_fixed_amount_discount_is_capped_by_amount() -> None:
    assert discount_cents(discount_type="fixed_amount", discount_value=500, amount_cents=300) == 300
    assert discount_cents(discount_type="fixed_amount", discount_value=500, amount_cents=1200) == 500


def test_trial_extension_has_no_cash_discount() -> None:
    assert discount_cents(discount_type="trial_extension", discount_value=14, amount_cents=1000) == 0
    assert trial_extension_days(discount_type="trial_extension", discount_value=14) == 14
    assert trial_extension_days(discount_type="percentage", discount_value=14) == 0


def test_discount_without_amount_is_zero() -> None:
    assert discount_cents(discount_type="percentage", discount_value=50, amount_cents=None) == 0


def test_discount_rejects_negative_amount_and_unknown_type() -> None:
    with pytest.raises(ValueError):
        discount_cents(discount_type="percentage", discount_value=10, amount_cents=-1)
    with pytest.raises(ValueError):
        discount_cents(discount_type="bogus", discount_value=10, amount_cents=100)


def test_uses_remaining() -> None:
    assert uses_remaining(max_uses=None, current_uses=7) is None
    assert uses_remaining(max_uses=5, current_uses=2) == 3
    assert uses_remaining(max_uses=5, current_uses=9) == 0

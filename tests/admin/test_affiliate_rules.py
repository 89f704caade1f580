from __future__ import annotations

import pytest

from saasdb.admin.affiliates.rules import (
    commission_cents,
    commission_due,
    validate_commission_rate,
)


def test_commission_rounds_down_to_cent() -> None:
    assert commission_cents(revenue_cents=999, commission_rate=30) == 299


def test_commission_at_bounds() -> None:
    assert commission_cents(revenue_cents=1000, commission_rate=0) == 0
    assert commission_cents(revenue_cents=1000, commission_rate=100) == 1000


def test_commission_rejects_negative_revenue() -> None:
    with pytest.raises(ValueError):
        commission_cents(revenue_cents=-1, commission_rate=30)


@pytest.mark.parametrize("rate", [-1, 101])
def test_validate_commission_rate_rejects_out_of_range(rate: int) -> None:
    with pytest.raises(ValueError):
        validate_commission_rate(rate)


def test_commission_due_counts_only_unpaid_part() -> None:
    assert commission_due(commission_cents=1200, commission_paid_cents=1000) == 200
    assert commission_due(commission_cents=1000, commission_paid_cents=1000) == 0
    assert commission_due(commission_cents=0, commission_paid_cents=0) == 0

from __future__ import annotations

import pytest
from sqlalchemy import update

from saasdb.admin.promo.errors import (
    PromoAlreadyRedeemedError,
    PromoDepletedError,
    PromoInactiveError,
)
from saasdb.admin.promo.service import PromoService
from saasdb.db.models.promo_code_redemptions import PromoCodeRedemption
from saasdb.db.repo.promo_repo import PromoRepo
from saasdb.db.session import SessionLocal
from tests.integration.identity_fixtures import _create_user


@pytest.mark.asyncio
async def test_redemptions_drive_current_uses_and_cap() -> None:
    users = [await _create_user(f"promo-{i}") for i in range(3)]
    async with SessionLocal.begin() as session:
        promo = await PromoService.create_code(
            session,
            code="spring-25",
            discount_type="percentage",
            discount_value=25,
            max_uses=2,
        )
        promo_id = promo.id

    async with SessionLocal.begin() as session:
        first = await PromoService.redeem(
            session, user_id=users[0], code="SPRING-25", product="pro", amount_cents=2000
        )
    async with SessionLocal.begin() as session:
        second = await PromoService.redeem(session, user_id=users[1], code="spring-25")

    assert first.discount_amount_cents == 500
    assert first.uses_remaining == 1
    assert second.uses_remaining == 0

    with pytest.raises(PromoDepletedError):
        async with SessionLocal.begin() as session:
            await PromoService.redeem(session, user_id=users[2], code="spring-25")

    async with SessionLocal.begin() as session:
        assert await PromoService.revoke_redemption(session, redemption_id=first.redemption_id)

    async with SessionLocal() as session:
        code = await PromoRepo.get_code_by_id(session, promo_id)
        assert code is not None
        assert code.current_uses == 1
        assert await PromoRepo.count_redemptions(session, promo_code_id=promo_id) == 1


@pytest.mark.asyncio
async def test_same_user_cannot_redeem_twice() -> None:
    user_id = await _create_user("promo-twice")
    async with SessionLocal.begin() as session:
        await PromoService.create_code(
            session, code="TRIAL14", discount_type="trial_extension", discount_value=14
        )

    async with SessionLocal.begin() as session:
        result = await PromoService.redeem(session, user_id=user_id, code="trial14")
    assert result.trial_extension_days == 14

    with pytest.raises(PromoAlreadyRedeemedError):
        async with SessionLocal.begin() as session:
            await PromoService.redeem(session, user_id=user_id, code="trial14")


@pytest.mark.asyncio
async def test_moving_redemption_recounts_both_codes() -> None:
    user_id = await _create_user("promo-move")
    async with SessionLocal.begin() as session:
        source = await PromoService.create_code(
            session, code="MOVE-FROM", discount_type="fixed_amount", discount_value=100
        )
        target = await PromoService.create_code(
            session, code="MOVE-TO", discount_type="fixed_amount", discount_value=100
        )
        source_id, target_id = source.id, target.id
    async with SessionLocal.begin() as session:
        redeemed = await PromoService.redeem(session, user_id=user_id, code="move-from")

    async with SessionLocal.begin() as session:
        await session.execute(
            update(PromoCodeRedemption)
            .where(PromoCodeRedemption.id == redeemed.redemption_id)
            .values(promo_code_id=target_id)
        )

    async with SessionLocal() as session:
        moved_from = await PromoRepo.get_code_by_id(session, source_id)
        moved_to = await PromoRepo.get_code_by_id(session, target_id)

    assert moved_from is not None and moved_to is not None
    assert moved_from.current_uses == 0
    assert moved_to.current_uses == 1


@pytest.mark.asyncio
async def test_deactivated_code_cannot_be_redeemed() -> None:
    user_id = await _create_user("promo-inactive")
    async with SessionLocal.begin() as session:
        promo = await PromoService.create_code(
            session, code="PAUSED", discount_type="percentage", discount_value=10
        )
        await PromoService.set_active(session, promo_code_id=promo.id, is_active=False)

    with pytest.raises(PromoInactiveError):
        async with SessionLocal.begin() as session:
            await PromoService.redeem(session, user_id=user_id, code="paused")

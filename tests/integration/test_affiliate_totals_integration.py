from __future__ import annotations

import pytest
from sqlalchemy import update

from saasdb.admin.affiliates.errors import AffiliateSelfReferralError
from saasdb.admin.affiliates.service import AffiliateService
from saasdb.db.models.affiliate_referrals import AffiliateReferral
from saasdb.db.repo.affiliates_repo import AffiliatesRepo
from saasdb.db.session import SessionLocal
from tests.integration.identity_fixtures import _create_user


@pytest.mark.asyncio
async def test_affiliate_totals_follow_referrals() -> None:
    owner_id = await _create_user("affiliate-owner")
    referred = [await _create_user(f"affiliate-ref-{i}") for i in range(2)]

    async with SessionLocal.begin() as session:
        affiliate = await AffiliateService.create_affiliate(
            session, user_id=owner_id, commission_rate=20
        )
        affiliate_id = affiliate.id
        code = affiliate.affiliate_code

    async with SessionLocal.begin() as session:
        for user_id in referred:
            await AffiliateService.record_referral(
                session, affiliate_code=code.lower(), referred_user_id=user_id
            )
        # Repeat referral is a no-op.
        await AffiliateService.record_referral(
            session, affiliate_code=code, referred_user_id=referred[0]
        )

    async with SessionLocal.begin() as session:
        await AffiliateService.record_conversion(
            session, referred_user_id=referred[0], revenue_cents=5000
        )
    async with SessionLocal.begin() as session:
        await AffiliateService.record_conversion(
            session, referred_user_id=referred[0], revenue_cents=1000
        )

    async with SessionLocal() as session:
        loaded = await AffiliatesRepo.get_by_id(session, affiliate_id)

    assert loaded is not None
    assert loaded.total_referrals == 2
    assert loaded.total_revenue_cents == 6000
    assert loaded.total_commission_cents == 1200


@pytest.mark.asyncio
async def test_affiliate_cannot_refer_itself() -> None:
    owner_id = await _create_user("affiliate-self")
    async with SessionLocal.begin() as session:
        affiliate = await AffiliateService.create_affiliate(session, user_id=owner_id)

    with pytest.raises(AffiliateSelfReferralError):
        async with SessionLocal.begin() as session:
            await AffiliateService.record_referral(
                session, affiliate_code=affiliate.affiliate_code, referred_user_id=owner_id
            )


@pytest.mark.asyncio
async def test_conversion_for_unreferred_user_is_ignored() -> None:
    user_id = await _create_user("affiliate-none")
    async with SessionLocal.begin() as session:
        assert (
            await AffiliateService.record_conversion(
                session, referred_user_id=user_id, revenue_cents=1000
            )
            is None
        )


@pytest.mark.asyncio
async def test_payout_after_second_conversion_pays_only_the_new_commission() -> None:
    owner_id = await _create_user("affiliate-payout-owner")
    referred_id = await _create_user("affiliate-payout-ref")
    async with SessionLocal.begin() as session:
        affiliate = await AffiliateService.create_affiliate(
            session, user_id=owner_id, commission_rate=20
        )
        affiliate_id = affiliate.id
        code = affiliate.affiliate_code
    async with SessionLocal.begin() as session:
        await AffiliateService.record_referral(
            session, affiliate_code=code, referred_user_id=referred_id
        )

    async with SessionLocal.begin() as session:
        await AffiliateService.record_conversion(
            session, referred_user_id=referred_id, revenue_cents=5000
        )
    async with SessionLocal.begin() as session:
        first = await AffiliateService.mark_commissions_paid(session, affiliate_id=affiliate_id)
    async with SessionLocal.begin() as session:
        again = await AffiliateService.mark_commissions_paid(session, affiliate_id=affiliate_id)

    async with SessionLocal.begin() as session:
        referral = await AffiliateService.record_conversion(
            session, referred_user_id=referred_id, revenue_cents=1000
        )
        assert referral is not None
        assert referral.commission_paid is False
    async with SessionLocal.begin() as session:
        second = await AffiliateService.mark_commissions_paid(session, affiliate_id=affiliate_id)
        unpaid = await AffiliatesRepo.list_unpaid_referrals(session, affiliate_id=affiliate_id)

    assert (first.referrals, first.amount_cents) == (1, 1000)
    assert (again.referrals, again.amount_cents) == (0, 0)
    assert (second.referrals, second.amount_cents) == (1, 200)
    assert unpaid == []


@pytest.mark.asyncio
async def test_create_affiliate_returns_existing_for_same_user() -> None:
    owner_id = await _create_user("affiliate-existing")
    async with SessionLocal.begin() as session:
        first = await AffiliateService.create_affiliate(session, user_id=owner_id)
    async with SessionLocal.begin() as session:
        second = await AffiliateService.create_affiliate(
            session, user_id=owner_id, commission_rate=50
        )

    assert second.id == first.id
    assert second.affiliate_code == first.affiliate_code


@pytest.mark.asyncio
async def test_moving_referral_refreshes_both_affiliates() -> None:
    first_owner = await _create_user("affiliate-move-a")
    second_owner = await _create_user("affiliate-move-b")
    referred_id = await _create_user("affiliate-move-ref")
    async with SessionLocal.begin() as session:
        source = await AffiliateService.create_affiliate(
            session, user_id=first_owner, commission_rate=10
        )
        target = await AffiliateService.create_affiliate(session, user_id=second_owner)
        source_id, target_id = source.id, target.id
        source_code = source.affiliate_code
    async with SessionLocal.begin() as session:
        referral = await AffiliateService.record_referral(
            session, affiliate_code=source_code, referred_user_id=referred_id
        )
        referral_id = referral.id
    async with SessionLocal.begin() as session:
        await AffiliateService.record_conversion(
            session, referred_user_id=referred_id, revenue_cents=3000
        )

    async with SessionLocal.begin() as session:
        await session.execute(
            update(AffiliateReferral)
            .where(AffiliateReferral.id == referral_id)
            .values(affiliate_id=target_id)
        )

    async with SessionLocal() as session:
        moved_from = await AffiliatesRepo.get_by_id(session, source_id)
        moved_to = await AffiliatesRepo.get_by_id(session, target_id)

    assert moved_from is not None and moved_to is not None
    assert (moved_from.total_referrals, moved_from.total_revenue_cents) == (0, 0)
    assert moved_from.total_commission_cents == 0
    assert (moved_to.total_referrals, moved_to.total_revenue_cents) == (1, 3000)
    assert moved_to.total_commission_cents == 300

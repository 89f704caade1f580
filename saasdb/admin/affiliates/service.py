from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from saasdb.admin.affiliates.errors import (
    AffiliateInactiveError,
    AffiliateNotFoundError,
    AffiliateSelfReferralError,
)
from saasdb.admin.affiliates.rules import (
    COMMISSION_TIERS,
    MAX_CODE_ATTEMPTS,
    commission_cents,
    commission_due,
    validate_commission_rate,
)
from saasdb.admin.affiliates.types import CommissionPayout
from saasdb.core.config import get_settings
from saasdb.core.short_codes import generate_short_code, normalize_code
from saasdb.db.models.affiliate_referrals import AffiliateReferral
from saasdb.db.models.affiliates import Affiliate
from saasdb.db.repo.affiliates_repo import AffiliatesRepo

logger = structlog.get_logger(__name__)


class AffiliateService:
    @staticmethod
    async def _allocate_code(session: AsyncSession) -> str:
        length = get_settings().affiliate_code_length
        for _ in range(MAX_CODE_ATTEMPTS):
            candidate = generate_short_code(length)
            if not await AffiliatesRepo.code_exists(session, candidate):
                return candidate
        raise RuntimeError("could not allocate a unique affiliate code")

    @staticmethod
    async def create_affiliate(
        session: AsyncSession,
        *,
        user_id: UUID | None,
        commission_rate: int | None = None,
        commission_tier: int = 1,
        payout_method: str | None = None,
    ) -> Affiliate:
        if commission_tier not in COMMISSION_TIERS:
            raise ValueError(f"commission_tier must be one of {COMMISSION_TIERS}")
        if user_id is not None:
            existing = await AffiliatesRepo.get_by_user_id(session, user_id)
            if existing is not None:
                return existing
        rate = validate_commission_rate(
            get_settings().default_commission_rate if commission_rate is None else commission_rate
        )

        affiliate = await AffiliatesRepo.create(
            session,
            affiliate=Affiliate(
                user_id=user_id,
                affiliate_code=await AffiliateService._allocate_code(session),
                commission_tier=commission_tier,
                commission_rate=rate,
                payout_method=payout_method,
            ),
        )
        logger.info(
            "affiliate_created",
            affiliate_id=str(affiliate.id),
            commission_rate=rate,
            commission_tier=commission_tier,
        )
        return affiliate

    @staticmethod
    async def record_referral(
        session: AsyncSession,
        *,
        affiliate_code: str,
        referred_user_id: UUID,
        now_utc: datetime | None = None,
    ) -> AffiliateReferral:
        now_utc = now_utc or datetime.now(timezone.utc)
        affiliate = await AffiliatesRepo.get_by_code(session, normalize_code(affiliate_code))
        if affiliate is None:
            raise AffiliateNotFoundError
        if not affiliate.is_active:
            raise AffiliateInactiveError
        if affiliate.user_id is not None and affiliate.user_id == referred_user_id:
            raise AffiliateSelfReferralError

        existing = await AffiliatesRepo.get_referral(
            session,
            affiliate_id=affiliate.id,
            referred_user_id=referred_user_id,
        )
        if existing is not None:
            return existing

        referral = await AffiliatesRepo.create_referral(
            session,
            referral=AffiliateReferral(
                affiliate_id=affiliate.id,
                referred_user_id=referred_user_id,
                referred_at=now_utc,
            ),
        )
        logger.info(
            "affiliate_referral_recorded",
            affiliate_id=str(affiliate.id),
            referral_id=str(referral.id),
        )
        return referral

    @staticmethod
    async def record_conversion(
        session: AsyncSession,
        *,
        referred_user_id: UUID,
        revenue_cents: int,
        subscription_id: str | None = None,
        now_utc: datetime | None = None,
    ) -> AffiliateReferral | None:
        """Add revenue from a referred user's payment to their referral row.

        Returns ``None`` when the user was not referred. The affiliate totals
        follow from the referral trigger.
        """
        now_utc = now_utc or datetime.now(timezone.utc)
        referral = await AffiliatesRepo.get_referral_by_referred_user_for_update(
            session,
            referred_user_id=referred_user_id,
        )
        if referral is None:
            return None

        affiliate = await AffiliatesRepo.get_by_id(session, referral.affiliate_id)
        if affiliate is None:
            raise AffiliateNotFoundError

        referral.revenue_cents += revenue_cents
        earned = commission_cents(
            revenue_cents=revenue_cents,
            commission_rate=affiliate.commission_rate,
        )
        referral.commission_cents += earned
        if earned > 0:
            referral.commission_paid = False
        if subscription_id is not None:
            referral.subscription_id = subscription_id
        if referral.converted_at is None:
            referral.converted_at = now_utc
        await session.flush()

        logger.info(
            "affiliate_conversion_recorded",
            affiliate_id=str(affiliate.id),
            referral_id=str(referral.id),
            revenue_cents=revenue_cents,
        )
        return referral

    @staticmethod
    async def mark_commissions_paid(
        session: AsyncSession,
        *,
        affiliate_id: UUID,
    ) -> CommissionPayout:
        """Settle every outstanding commission of an affiliate.

        Only the part of each referral's commission that was not paid before
        is counted, so a referral that converted again after an earlier
        payout contributes just the new amount.
        """
        affiliate = await AffiliatesRepo.get_by_id(session, affiliate_id)
        if affiliate is None:
            raise AffiliateNotFoundError
        referrals = await AffiliatesRepo.list_unpaid_referrals(
            session,
            affiliate_id=affiliate_id,
            for_update=True,
        )
        amount_cents = sum(
            commission_due(
                commission_cents=referral.commission_cents,
                commission_paid_cents=referral.commission_paid_cents,
            )
            for referral in referrals
        )
        updated = await AffiliatesRepo.mark_commissions_paid(
            session,
            referral_ids=[referral.id for referral in referrals],
        )
        for referral in referrals:
            await session.refresh(referral)
        logger.info(
            "affiliate_commissions_paid",
            affiliate_id=str(affiliate_id),
            referrals=updated,
            amount_cents=amount_cents,
        )
        return CommissionPayout(affiliate_id=affiliate_id, referrals=updated, amount_cents=amount_cents)

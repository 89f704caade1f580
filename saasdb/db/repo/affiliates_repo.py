from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from saasdb.db.models.affiliate_referrals import AffiliateReferral
from saasdb.db.models.affiliates import Affiliate


class AffiliatesRepo:
    @staticmethod
    async def create(session: AsyncSession, *, affiliate: Affiliate) -> Affiliate:
        session.add(affiliate)
        await session.flush()
        return affiliate

    @staticmethod
    async def get_by_id(session: AsyncSession, affiliate_id: UUID) -> Affiliate | None:
        return await session.get(Affiliate, affiliate_id)

    @staticmethod
    async def get_by_code(session: AsyncSession, affiliate_code: str) -> Affiliate | None:
        stmt = select(Affiliate).where(Affiliate.affiliate_code == affiliate_code)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_user_id(session: AsyncSession, user_id: UUID) -> Affiliate | None:
        stmt = select(Affiliate).where(Affiliate.user_id == user_id)
        result = await session.execute(stmt)
        return result.scalars().first()

    @staticmethod
    async def code_exists(session: AsyncSession, affiliate_code: str) -> bool:
        stmt = select(func.count(Affiliate.id)).where(Affiliate.affiliate_code == affiliate_code)
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0) > 0

    @staticmethod
    async def get_referral(
        session: AsyncSession,
        *,
        affiliate_id: UUID,
        referred_user_id: UUID,
    ) -> AffiliateReferral | None:
        stmt = select(AffiliateReferral).where(
            AffiliateReferral.affiliate_id == affiliate_id,
            AffiliateReferral.referred_user_id == referred_user_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_referral_by_referred_user_for_update(
        session: AsyncSession,
        *,
        referred_user_id: UUID,
    ) -> AffiliateReferral | None:
        stmt = (
            select(AffiliateReferral)
            .where(AffiliateReferral.referred_user_id == referred_user_id)
            .order_by(AffiliateReferral.referred_at.asc())
            .limit(1)
            .with_for_update()
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def create_referral(
        session: AsyncSession,
        *,
        referral: AffiliateReferral,
    ) -> AffiliateReferral:
        session.add(referral)
        await session.flush()
        return referral

    @staticmethod
    async def list_unpaid_referrals(
        session: AsyncSession,
        *,
        affiliate_id: UUID,
        for_update: bool = False,
    ) -> list[AffiliateReferral]:
        stmt = (
            select(AffiliateReferral)
            .where(
                AffiliateReferral.affiliate_id == affiliate_id,
                AffiliateReferral.commission_paid.is_(False),
                AffiliateReferral.commission_cents > AffiliateReferral.commission_paid_cents,
            )
            .order_by(AffiliateReferral.referred_at.asc())
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def mark_commissions_paid(
        session: AsyncSession,
        *,
        referral_ids: Sequence[UUID],
    ) -> int:
        if not referral_ids:
            return 0
        stmt = (
            update(AffiliateReferral)
            .where(AffiliateReferral.id.in_(referral_ids))
            .values(
                commission_paid=True,
                commission_paid_cents=AffiliateReferral.commission_cents,
            )
        )
        result = await session.execute(stmt)
        return result.rowcount or 0

from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from saasdb.db.models.promo_code_redemptions import PromoCodeRedemption
from saasdb.db.models.promo_codes import PromoCode


class PromoRepo:
    @staticmethod
    async def create_code(session: AsyncSession, *, promo_code: PromoCode) -> PromoCode:
        session.add(promo_code)
        await session.flush()
        return promo_code

    @staticmethod
    async def get_code_by_id(session: AsyncSession, promo_code_id: UUID) -> PromoCode | None:
        return await session.get(PromoCode, promo_code_id)

    @staticmethod
    async def get_code_by_code(session: AsyncSession, code: str) -> PromoCode | None:
        stmt = select(PromoCode).where(PromoCode.code == code)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_code_by_code_for_update(session: AsyncSession, code: str) -> PromoCode | None:
        stmt = select(PromoCode).where(PromoCode.code == code).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def set_active(session: AsyncSession, *, promo_code_id: UUID, is_active: bool) -> int:
        stmt = update(PromoCode).where(PromoCode.id == promo_code_id).values(is_active=is_active)
        result = await session.execute(stmt)
        return result.rowcount or 0

    @staticmethod
    async def get_redemption_by_code_and_user(
        session: AsyncSession,
        *,
        promo_code_id: UUID,
        user_id: UUID,
    ) -> PromoCodeRedemption | None:
        stmt = select(PromoCodeRedemption).where(
            PromoCodeRedemption.promo_code_id == promo_code_id,
            PromoCodeRedemption.user_id == user_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def create_redemption(
        session: AsyncSession,
        *,
        redemption: PromoCodeRedemption,
    ) -> PromoCodeRedemption:
        session.add(redemption)
        await session.flush()
        return redemption

    @staticmethod
    async def delete_redemption(session: AsyncSession, *, redemption_id: UUID) -> bool:
        redemption = await session.get(PromoCodeRedemption, redemption_id)
        if redemption is None:
            return False
        await session.delete(redemption)
        await session.flush()
        return True

    @staticmethod
    async def count_redemptions(session: AsyncSession, *, promo_code_id: UUID) -> int:
        stmt = select(func.count(PromoCodeRedemption.id)).where(
            PromoCodeRedemption.promo_code_id == promo_code_id
        )
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from saasdb.admin.promo.errors import (
    PromoAlreadyRedeemedError,
    PromoError,
    PromoNotFoundError,
)
from saasdb.admin.promo.rules import (
    discount_cents,
    ensure_redeemable,
    trial_extension_days,
    uses_remaining,
)
from saasdb.admin.promo.types import DISCOUNT_TYPES, PromoQuote, PromoRedeemResult
from saasdb.core.short_codes import generate_short_code, normalize_code
from saasdb.db.models.promo_code_redemptions import PromoCodeRedemption
from saasdb.db.models.promo_codes import PromoCode
from saasdb.db.repo.promo_repo import PromoRepo

logger = structlog.get_logger(__name__)

PROMO_CODE_LENGTH = 8


class PromoService:
    @staticmethod
    async def create_code(
        session: AsyncSession,
        *,
        discount_type: str,
        discount_value: int,
        code: str | None = None,
        description: str | None = None,
        applies_to: Sequence[str] = (),
        max_uses: int | None = None,
        valid_from: datetime | None = None,
        valid_until: datetime | None = None,
        created_by: UUID | None = None,
    ) -> PromoCode:
        if discount_type not in DISCOUNT_TYPES:
            raise ValueError(f"unknown discount_type: {discount_type}")

        promo_code = PromoCode(
            code=normalize_code(code) if code else generate_short_code(PROMO_CODE_LENGTH),
            description=description,
            discount_type=discount_type,
            discount_value=discount_value,
            applies_to=list(applies_to),
            max_uses=max_uses,
            valid_until=valid_until,
            created_by=created_by,
        )
        if valid_from is not None:
            promo_code.valid_from = valid_from
        await PromoRepo.create_code(session, promo_code=promo_code)
        logger.info(
            "promo_code_created",
            promo_code_id=str(promo_code.id),
            discount_type=discount_type,
            max_uses=max_uses,
        )
        return promo_code

    @staticmethod
    async def quote(
        session: AsyncSession,
        *,
        code: str,
        product: str | None = None,
        amount_cents: int | None = None,
        now_utc: datetime | None = None,
    ) -> PromoQuote:
        now_utc = now_utc or datetime.now(timezone.utc)
        promo_code = await PromoRepo.get_code_by_code(session, normalize_code(code))
        if promo_code is None:
            raise PromoNotFoundError

        ensure_redeemable(
            is_active=promo_code.is_active,
            valid_from=promo_code.valid_from,
            valid_until=promo_code.valid_until,
            max_uses=promo_code.max_uses,
            current_uses=promo_code.current_uses,
            applies_to=promo_code.applies_to,
            product=product,
            now_utc=now_utc,
        )
        return PromoQuote(
            promo_code_id=promo_code.id,
            code=promo_code.code,
            discount_type=promo_code.discount_type,
            discount_amount_cents=discount_cents(
                discount_type=promo_code.discount_type,
                discount_value=promo_code.discount_value,
                amount_cents=amount_cents,
            ),
            trial_extension_days=trial_extension_days(
                discount_type=promo_code.discount_type,
                discount_value=promo_code.discount_value,
            ),
        )

    @staticmethod
    async def redeem(
        session: AsyncSession,
        *,
        user_id: UUID,
        code: str,
        product: str | None = None,
        amount_cents: int | None = None,
        subscription_id: str | None = None,
        now_utc: datetime | None = None,
    ) -> PromoRedeemResult:
        now_utc = now_utc or datetime.now(timezone.utc)
        normalized = normalize_code(code)

        # Row lock serialises concurrent redemptions against max_uses.
        promo_code = await PromoRepo.get_code_by_code_for_update(session, normalized)
        if promo_code is None:
            logger.info("promo_code_redeem_rejected", reason="not_found", user_id=str(user_id))
            raise PromoNotFoundError

        existing = await PromoRepo.get_redemption_by_code_and_user(
            session,
            promo_code_id=promo_code.id,
            user_id=user_id,
        )
        if existing is not None:
            logger.info(
                "promo_code_redeem_rejected",
                reason="already_redeemed",
                promo_code_id=str(promo_code.id),
                user_id=str(user_id),
            )
            raise PromoAlreadyRedeemedError

        try:
            ensure_redeemable(
                is_active=promo_code.is_active,
                valid_from=promo_code.valid_from,
                valid_until=promo_code.valid_until,
                max_uses=promo_code.max_uses,
                current_uses=promo_code.current_uses,
                applies_to=promo_code.applies_to,
                product=product,
                now_utc=now_utc,
            )
        except PromoError as exc:
            logger.info(
                "promo_code_redeem_rejected",
                reason=type(exc).__name__,
                promo_code_id=str(promo_code.id),
                user_id=str(user_id),
            )
            raise

        amount = discount_cents(
            discount_type=promo_code.discount_type,
            discount_value=promo_code.discount_value,
            amount_cents=amount_cents,
        )
        redemption = await PromoRepo.create_redemption(
            session,
            redemption=PromoCodeRedemption(
                promo_code_id=promo_code.id,
                user_id=user_id,
                subscription_id=subscription_id,
                discount_amount_cents=amount,
                redeemed_at=now_utc,
            ),
        )
        # current_uses is recomputed by the redemption trigger.
        await session.refresh(promo_code, attribute_names=["current_uses"])

        logger.info(
            "promo_code_redeemed",
            promo_code_id=str(promo_code.id),
            redemption_id=str(redemption.id),
            user_id=str(user_id),
            discount_amount_cents=amount,
        )
        return PromoRedeemResult(
            redemption_id=redemption.id,
            promo_code_id=promo_code.id,
            discount_type=promo_code.discount_type,
            discount_amount_cents=amount,
            trial_extension_days=trial_extension_days(
                discount_type=promo_code.discount_type,
                discount_value=promo_code.discount_value,
            ),
            uses_remaining=uses_remaining(
                max_uses=promo_code.max_uses,
                current_uses=promo_code.current_uses,
            ),
        )

    @staticmethod
    async def set_active(session: AsyncSession, *, promo_code_id: UUID, is_active: bool) -> None:
        updated = await PromoRepo.set_active(
            session,
            promo_code_id=promo_code_id,
            is_active=is_active,
        )
        if updated == 0:
            raise PromoNotFoundError
        logger.info("promo_code_active_changed", promo_code_id=str(promo_code_id), is_active=is_active)

    @staticmethod
    async def revoke_redemption(session: AsyncSession, *, redemption_id: UUID) -> bool:
        removed = await PromoRepo.delete_redemption(session, redemption_id=redemption_id)
        if removed:
            logger.info("promo_redemption_revoked", redemption_id=str(redemption_id))
        return removed

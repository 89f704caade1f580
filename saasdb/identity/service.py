from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from saasdb.db.models.auth_audit_log import AuthAuditLogEntry
from saasdb.db.repo.auth_audit_repo import AuthAuditRepo
from saasdb.db.repo.user_sessions_repo import UserSessionsRepo
from saasdb.db.repo.users_repo import UsersRepo
from saasdb.identity.errors import UserNotFoundError
from saasdb.identity.schemas import FirebaseUserPayload

logger = structlog.get_logger(__name__)


class IdentitySyncService:
    @staticmethod
    async def sync_firebase_user(
        session: AsyncSession,
        *,
        payload: FirebaseUserPayload,
        ip_address: str | None = None,
        user_agent: str | None = None,
        now_utc: datetime | None = None,
    ) -> UUID:
        now_utc = now_utc or datetime.now(timezone.utc)
        user_id = await UsersRepo.upsert_firebase_user(
            session,
            firebase_uid=payload.uid,
            email=payload.email,
            email_verified=payload.email_verified,
            phone_number=payload.phone_number,
            display_name=payload.display_name,
            photo_url=payload.photo_url,
            provider_id=payload.sign_in_provider,
        )

        for info in payload.provider_data:
            await UsersRepo.link_auth_provider(
                session,
                user_id=user_id,
                provider_id=info.provider_id,
                provider_uid=info.uid,
                provider_data=payload.provider_snapshot(info),
                used_at=now_utc,
            )

        await AuthAuditRepo.create(
            session,
            entry=AuthAuditLogEntry(
                user_id=user_id,
                firebase_uid=payload.uid,
                event_type="sign_in",
                event_status="success",
                provider_id=payload.sign_in_provider,
                ip_address=ip_address,
                user_agent=user_agent,
                created_at=now_utc,
            ),
        )
        logger.info(
            "firebase_user_synced",
            user_id=str(user_id),
            provider_id=payload.sign_in_provider,
            linked_providers=len(payload.provider_data),
        )
        return user_id

    @staticmethod
    async def record_auth_failure(
        session: AsyncSession,
        *,
        firebase_uid: str | None,
        event_type: str,
        error_message: str,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> None:
        await AuthAuditRepo.create(
            session,
            entry=AuthAuditLogEntry(
                firebase_uid=firebase_uid,
                event_type=event_type,
                event_status="failure",
                ip_address=ip_address,
                user_agent=user_agent,
                error_message=error_message,
            ),
        )
        logger.warning("auth_event_failed", event_type=event_type, firebase_uid=firebase_uid)

    @staticmethod
    async def set_custom_claims(
        session: AsyncSession,
        *,
        user_id: UUID,
        claims: dict[str, object],
    ) -> None:
        if not await UsersRepo.update_custom_claims(session, user_id=user_id, claims=claims):
            raise UserNotFoundError
        await AuthAuditRepo.create(
            session,
            entry=AuthAuditLogEntry(
                user_id=user_id,
                event_type="custom_claims_updated",
                event_status="success",
                metadata_={"claim_keys": sorted(claims)},
            ),
        )
        logger.info("custom_claims_updated", user_id=str(user_id), claim_keys=sorted(claims))

    @staticmethod
    async def revoke_sessions(session: AsyncSession, *, user_id: UUID) -> int:
        user = await UsersRepo.get_by_id(session, user_id)
        if user is None:
            raise UserNotFoundError

        revoked = await UserSessionsRepo.revoke_all(session, user_id=user_id)
        await AuthAuditRepo.create(
            session,
            entry=AuthAuditLogEntry(
                user_id=user_id,
                firebase_uid=user.firebase_uid,
                event_type="sessions_revoked",
                event_status="success",
                metadata_={"revoked": revoked},
            ),
        )
        logger.info("user_sessions_revoked", user_id=str(user_id), revoked=revoked)
        return revoked

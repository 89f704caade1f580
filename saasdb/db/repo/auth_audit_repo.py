from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from saasdb.db.models.auth_audit_log import AuthAuditLogEntry


class AuthAuditRepo:
    @staticmethod
    async def create(session: AsyncSession, *, entry: AuthAuditLogEntry) -> AuthAuditLogEntry:
        session.add(entry)
        await session.flush()
        return entry

    @staticmethod
    async def list_for_user(
        session: AsyncSession,
        *,
        user_id: UUID,
        limit: int = 50,
    ) -> list[AuthAuditLogEntry]:
        stmt = (
            select(AuthAuditLogEntry)
            .where(AuthAuditLogEntry.user_id == user_id)
            .order_by(AuthAuditLogEntry.created_at.desc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_failures_for_firebase_uid(
        session: AsyncSession,
        *,
        firebase_uid: str,
        limit: int = 50,
    ) -> list[AuthAuditLogEntry]:
        stmt = (
            select(AuthAuditLogEntry)
            .where(
                AuthAuditLogEntry.firebase_uid == firebase_uid,
                AuthAuditLogEntry.event_status == "failure",
            )
            .order_by(AuthAuditLogEntry.created_at.desc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

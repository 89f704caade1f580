from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import Integer, func, literal, or_, select, update
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.ext.asyncio import AsyncSession

from saasdb.db.models.user_sessions import UserSession


class UserSessionsRepo:
    @staticmethod
    async def create(session: AsyncSession, *, user_session: UserSession) -> UserSession:
        session.add(user_session)
        await session.flush()
        return user_session

    @staticmethod
    async def touch(session: AsyncSession, *, session_id: UUID, seen_at: datetime) -> int:
        stmt = (
            update(UserSession)
            .where(UserSession.id == session_id, UserSession.revoked_at.is_(None))
            .values(last_active_at=seen_at)
        )
        result = await session.execute(stmt)
        return result.rowcount or 0

    @staticmethod
    async def list_active(
        session: AsyncSession,
        *,
        user_id: UUID,
        now_utc: datetime,
    ) -> list[UserSession]:
        stmt = (
            select(UserSession)
            .where(
                UserSession.user_id == user_id,
                UserSession.revoked_at.is_(None),
                or_(UserSession.expires_at.is_(None), UserSession.expires_at > now_utc),
            )
            .order_by(UserSession.last_active_at.desc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def revoke_all(session: AsyncSession, *, user_id: UUID) -> int:
        stmt = select(
            func.revoke_user_sessions(literal(user_id, PG_UUID(as_uuid=True)), type_=Integer)
        )
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)

    @staticmethod
    async def cleanup_expired(session: AsyncSession) -> int:
        result = await session.execute(select(func.cleanup_expired_sessions(type_=Integer)))
        return int(result.scalar_one() or 0)

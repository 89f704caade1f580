from __future__ import annotations

from uuid import UUID

from sqlalchemy import BOOLEAN, delete, func, literal, select
from sqlalchemy.dialects.postgresql import UUID as PG_UUID, insert
from sqlalchemy.ext.asyncio import AsyncSession

from saasdb.db.models.admin_users import AdminUser


class AdminUsersRepo:
    @staticmethod
    async def is_admin(session: AsyncSession, user_id: UUID) -> bool:
        stmt = select(func.is_admin(literal(user_id, PG_UUID(as_uuid=True)), type_=BOOLEAN))
        result = await session.execute(stmt)
        return bool(result.scalar_one())

    @staticmethod
    async def get_by_user_id(session: AsyncSession, user_id: UUID) -> AdminUser | None:
        stmt = select(AdminUser).where(AdminUser.user_id == user_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def grant(
        session: AsyncSession,
        *,
        user_id: UUID,
        role: str,
        permissions: dict[str, object] | None = None,
    ) -> AdminUser:
        stmt = insert(AdminUser).values(
            user_id=user_id,
            role=role,
            permissions=permissions or {},
        )
        stmt = stmt.on_conflict_do_update(
            constraint="uq_admin_users_user_id",
            set_={
                "role": stmt.excluded.role,
                "permissions": stmt.excluded.permissions,
            },
        ).returning(AdminUser)
        result = await session.execute(stmt.execution_options(populate_existing=True))
        return result.scalar_one()

    @staticmethod
    async def revoke(session: AsyncSession, *, user_id: UUID) -> int:
        result = await session.execute(delete(AdminUser).where(AdminUser.user_id == user_id))
        return result.rowcount or 0

from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

# Read by app_current_user_id() inside every row-level policy.
REQUEST_USER_SETTING = "app.user_id"


async def set_request_user(session: AsyncSession, user_id: UUID | None) -> None:
    """Scope row-level policies in the current transaction to ``user_id``.

    ``set_config(..., true)`` is transaction-local, so the setting vanishes on
    commit or rollback and never leaks to the next checkout of a pooled
    connection. Passing ``None`` clears it for the rest of the transaction.
    """
    value = "" if user_id is None else str(user_id)
    await session.execute(select(func.set_config(REQUEST_USER_SETTING, value, True)))


async def current_request_user(session: AsyncSession) -> UUID | None:
    result = await session.execute(select(func.app_current_user_id()))
    return result.scalar_one_or_none()

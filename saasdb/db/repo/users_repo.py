from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import BOOLEAN, Text, func, literal, select, update
from sqlalchemy.dialects.postgresql import JSONB, UUID as PG_UUID, insert
from sqlalchemy.ext.asyncio import AsyncSession

from saasdb.db.models.user_auth_providers import UserAuthProvider
from saasdb.db.models.user_profiles import UserProfile
from saasdb.db.models.users import User
from saasdb.db.repo.rows import FirebaseUserRow

_FIREBASE_USER_COLUMNS = (
    "id",
    "firebase_uid",
    "email",
    "email_verified",
    "phone_number",
    "display_name",
    "photo_url",
    "role",
    "status",
    "subscription_tier",
    "custom_claims",
)


class UsersRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, user_id: UUID) -> User | None:
        return await session.get(User, user_id)

    @staticmethod
    async def upsert_firebase_user(
        session: AsyncSession,
        *,
        firebase_uid: str,
        email: str | None,
        email_verified: bool,
        phone_number: str | None,
        display_name: str | None,
        photo_url: str | None,
        provider_id: str | None,
    ) -> UUID:
        stmt = select(
            func.upsert_firebase_user(
                literal(firebase_uid, Text),
                literal(email, Text),
                literal(email_verified, BOOLEAN),
                literal(phone_number, Text),
                literal(display_name, Text),
                literal(photo_url, Text),
                literal(provider_id, Text),
                type_=PG_UUID(as_uuid=True),
            )
        )
        result = await session.execute(stmt)
        return result.scalar_one()

    @staticmethod
    async def get_by_firebase_uid(
        session: AsyncSession, firebase_uid: str
    ) -> FirebaseUserRow | None:
        fn = func.get_user_by_firebase_uid(literal(firebase_uid, Text)).table_valued(
            *_FIREBASE_USER_COLUMNS
        )
        result = await session.execute(select(fn))
        row = result.mappings().one_or_none()
        if row is None:
            return None
        return FirebaseUserRow(**{name: row[name] for name in _FIREBASE_USER_COLUMNS})

    @staticmethod
    async def update_custom_claims(
        session: AsyncSession,
        *,
        user_id: UUID,
        claims: dict[str, object],
    ) -> bool:
        stmt = select(
            func.update_user_custom_claims(
                literal(user_id, PG_UUID(as_uuid=True)),
                literal(claims, JSONB),
                type_=BOOLEAN,
            )
        )
        result = await session.execute(stmt)
        return bool(result.scalar_one())

    @staticmethod
    async def soft_delete(session: AsyncSession, *, user_id: UUID, now_utc: datetime) -> int:
        stmt = (
            update(User)
            .where(User.id == user_id, User.deleted_at.is_(None))
            .values(status="deleted", deleted_at=now_utc)
        )
        result = await session.execute(stmt)
        return result.rowcount or 0

    @staticmethod
    async def get_profile(session: AsyncSession, user_id: UUID) -> UserProfile | None:
        stmt = select(UserProfile).where(UserProfile.user_id == user_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def link_auth_provider(
        session: AsyncSession,
        *,
        user_id: UUID,
        provider_id: str,
        provider_uid: str,
        provider_data: dict[str, object],
        used_at: datetime,
    ) -> None:
        stmt = insert(UserAuthProvider).values(
            user_id=user_id,
            provider_id=provider_id,
            provider_uid=provider_uid,
            provider_data=provider_data,
            last_used_at=used_at,
        )
        stmt = stmt.on_conflict_do_update(
            constraint="uq_user_auth_providers_user_provider",
            set_={
                "provider_uid": stmt.excluded.provider_uid,
                "provider_data": stmt.excluded.provider_data,
                "last_used_at": stmt.excluded.last_used_at,
            },
        )
        await session.execute(stmt)

    @staticmethod
    async def list_auth_providers(
        session: AsyncSession, user_id: UUID
    ) -> list[UserAuthProvider]:
        stmt = (
            select(UserAuthProvider)
            .where(UserAuthProvider.user_id == user_id)
            .order_by(UserAuthProvider.linked_at.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

from __future__ import annotations

from uuid import UUID

from saasdb.db.repo.users_repo import UsersRepo
from saasdb.db.session import SessionLocal


async def _create_user(seed: str, *, email: str | None = None) -> UUID:
    async with SessionLocal.begin() as session:
        return await UsersRepo.upsert_firebase_user(
            session,
            firebase_uid=f"fb-{seed}",
            email=email or f"{seed}@example.com",
            email_verified=True,
            phone_number=None,
            display_name=seed.title(),
            photo_url=None,
            provider_id="password",
        )

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from saasdb.db.models.user_profiles import UserProfile
from saasdb.db.models.user_sessions import UserSession
from saasdb.db.repo.user_sessions_repo import UserSessionsRepo
from saasdb.db.repo.users_repo import UsersRepo
from saasdb.db.session import SessionLocal
from saasdb.identity.schemas import FirebaseUserPayload
from saasdb.identity.service import IdentitySyncService

UTC = timezone.utc


@pytest.mark.asyncio
async def test_firebase_sync_is_idempotent_and_keeps_known_values() -> None:
    payload = FirebaseUserPayload(
        uid="fb-sync-1",
        email="first@example.com",
        display_name="First",
        sign_in_provider="google.com",
        provider_data=[{"provider_id": "google.com", "uid": "g-1", "email": "first@example.com"}],
    )
    async with SessionLocal.begin() as session:
        user_id = await IdentitySyncService.sync_firebase_user(session, payload=payload)

    async with SessionLocal.begin() as session:
        second_id = await IdentitySyncService.sync_firebase_user(
            session,
            payload=FirebaseUserPayload(uid="fb-sync-1", email_verified=True),
        )

    assert second_id == user_id

    async with SessionLocal() as session:
        row = await UsersRepo.get_by_firebase_uid(session, "fb-sync-1")
        profiles = await session.scalar(
            select(func.count()).select_from(UserProfile).where(UserProfile.user_id == user_id)
        )
        providers = await UsersRepo.list_auth_providers(session, user_id)
        profile = await UsersRepo.get_profile(session, user_id)

    assert row is not None
    assert row.email == "first@example.com"
    assert row.display_name == "First"
    assert row.email_verified is True
    assert profiles == 1
    assert profile is not None
    assert profile.user_id == user_id
    assert [provider.provider_id for provider in providers] == ["google.com"]


@pytest.mark.asyncio
async def test_soft_deleted_user_is_not_returned_by_firebase_lookup() -> None:
    async with SessionLocal.begin() as session:
        user_id = await IdentitySyncService.sync_firebase_user(
            session, payload=FirebaseUserPayload(uid="fb-gone")
        )
        await UsersRepo.soft_delete(session, user_id=user_id, now_utc=datetime.now(UTC))

    async with SessionLocal() as session:
        assert await UsersRepo.get_by_firebase_uid(session, "fb-gone") is None


@pytest.mark.asyncio
async def test_custom_claims_and_session_revocation() -> None:
    now_utc = datetime.now(UTC)
    async with SessionLocal.begin() as session:
        user_id = await IdentitySyncService.sync_firebase_user(
            session, payload=FirebaseUserPayload(uid="fb-claims")
        )
        for suffix in ("a", "b"):
            await UserSessionsRepo.create(
                session,
                user_session=UserSession(
                    user_id=user_id,
                    device_id=f"device-{suffix}",
                    expires_at=now_utc + timedelta(days=1),
                ),
            )
        await UserSessionsRepo.create(
            session,
            user_session=UserSession(
                user_id=user_id,
                device_id="device-stale",
                expires_at=now_utc - timedelta(days=31),
            ),
        )

    async with SessionLocal.begin() as session:
        await IdentitySyncService.set_custom_claims(
            session, user_id=user_id, claims={"therapist": True}
        )
        revoked = await IdentitySyncService.revoke_sessions(session, user_id=user_id)

    async with SessionLocal.begin() as session:
        deleted = await UserSessionsRepo.cleanup_expired(session)
        row = await UsersRepo.get_by_firebase_uid(session, "fb-claims")

    assert revoked == 2
    assert deleted == 1
    assert row is not None
    assert row.custom_claims == {"therapist": True}

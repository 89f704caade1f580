from __future__ import annotations

import pytest
from sqlalchemy import func, select, text
from sqlalchemy.exc import DBAPIError

from saasdb.db.models.thought_records import ThoughtRecord
from saasdb.db.rls import current_request_user, set_request_user
from saasdb.db.session import SessionLocal
from saasdb.journal.thought_records.service import ThoughtRecordService
from tests.integration.identity_fixtures import _create_user

READER_ROLE = "saasdb_rls_reader"


@pytest.mark.asyncio
async def test_request_user_is_transaction_local() -> None:
    user_id = await _create_user("rls-guc")

    async with SessionLocal.begin() as session:
        assert await current_request_user(session) is None
        await set_request_user(session, user_id)
        assert await current_request_user(session) == user_id
        await set_request_user(session, None)
        assert await current_request_user(session) is None

    async with SessionLocal.begin() as session:
        await set_request_user(session, user_id)

    async with SessionLocal() as session:
        assert await current_request_user(session) is None


async def _ensure_reader_role() -> None:
    try:
        async with SessionLocal.begin() as session:
            await session.execute(
                text(
                    f"""
                    DO $$
                    BEGIN
                        IF NOT EXISTS (SELECT 1 FROM pg_roles WHERE rolname = '{READER_ROLE}') THEN
                            CREATE ROLE {READER_ROLE} NOLOGIN;
                        END IF;
                    END
                    $$;
                    """
                )
            )
            await session.execute(
                text(
                    "GRANT SELECT ON thought_records, therapist_patient_relationships "
                    f"TO {READER_ROLE}"
                )
            )
            await session.execute(text(f"GRANT {READER_ROLE} TO CURRENT_USER"))
    except DBAPIError as exc:  # pragma: no cover - depends on role privileges
        pytest.skip(f"Cannot create a non-owner role for policy checks: {exc}")


@pytest.mark.asyncio
async def test_owner_policy_hides_other_users_records() -> None:
    owner_id = await _create_user("rls-owner")
    other_id = await _create_user("rls-other")
    async with SessionLocal.begin() as session:
        for user_id in (owner_id, other_id):
            await ThoughtRecordService.create_record(
                session,
                user_id=user_id,
                situation="s",
                automatic_thoughts="t",
                emotions=[{"emotion": "worry", "intensity": 50}],
            )
    await _ensure_reader_role()

    async with SessionLocal.begin() as session:
        await session.execute(text(f"SET LOCAL ROLE {READER_ROLE}"))
        await set_request_user(session, owner_id)
        visible = (await session.execute(select(ThoughtRecord.user_id))).scalars().all()

        await set_request_user(session, None)
        anonymous = await session.scalar(select(func.count()).select_from(ThoughtRecord))

    assert visible == [owner_id]
    assert anonymous == 0

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from saasdb.db.models.therapist_patient_relationships import TherapistPatientRelationship
from saasdb.db.models.therapists import Therapist


class TherapistsRepo:
    @staticmethod
    async def create(session: AsyncSession, *, therapist: Therapist) -> Therapist:
        session.add(therapist)
        await session.flush()
        return therapist

    @staticmethod
    async def get_by_id(session: AsyncSession, therapist_id: UUID) -> Therapist | None:
        return await session.get(Therapist, therapist_id)

    @staticmethod
    async def link_patient(
        session: AsyncSession,
        *,
        therapist_id: UUID,
        patient_id: UUID,
    ) -> None:
        stmt = insert(TherapistPatientRelationship).values(
            therapist_id=therapist_id,
            patient_id=patient_id,
            is_active=True,
        )
        stmt = stmt.on_conflict_do_update(
            constraint="uq_therapist_patient_relationships_pair",
            set_={"is_active": True, "ended_at": None},
        )
        await session.execute(stmt)

    @staticmethod
    async def end_relationship(
        session: AsyncSession,
        *,
        therapist_id: UUID,
        patient_id: UUID,
        ended_at: datetime,
    ) -> int:
        stmt = (
            update(TherapistPatientRelationship)
            .where(
                TherapistPatientRelationship.therapist_id == therapist_id,
                TherapistPatientRelationship.patient_id == patient_id,
                TherapistPatientRelationship.is_active.is_(True),
            )
            .values(is_active=False, ended_at=ended_at)
        )
        result = await session.execute(stmt)
        return result.rowcount or 0

    @staticmethod
    async def has_active_relationship(
        session: AsyncSession,
        *,
        therapist_id: UUID,
        patient_id: UUID,
    ) -> bool:
        stmt = select(func.count(TherapistPatientRelationship.id)).where(
            TherapistPatientRelationship.therapist_id == therapist_id,
            TherapistPatientRelationship.patient_id == patient_id,
            TherapistPatientRelationship.is_active.is_(True),
        )
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0) > 0

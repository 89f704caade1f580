from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from saasdb.db.models.core_beliefs import CoreBelief
from saasdb.db.models.relapse_prevention_plan import RelapsePreventionPlan
from saasdb.db.models.safety_behaviors import SafetyBehavior
from saasdb.db.models.values_assessment import ValuesAssessment
from saasdb.db.views import values_gap_analysis


class SelfWorkRepo:
    """Core beliefs, safety behaviours, values and relapse-prevention plans."""

    @staticmethod
    async def create_core_belief(session: AsyncSession, *, belief: CoreBelief) -> CoreBelief:
        session.add(belief)
        await session.flush()
        return belief

    @staticmethod
    async def rate_core_belief(
        session: AsyncSession,
        *,
        belief_id: UUID,
        current_strength: int,
        alternative_strength: int | None,
        reviewed_at: datetime,
    ) -> int:
        stmt = (
            update(CoreBelief)
            .where(CoreBelief.id == belief_id)
            .values(
                current_belief_strength=current_strength,
                alternative_strength=alternative_strength,
                last_reviewed=reviewed_at,
            )
        )
        result = await session.execute(stmt)
        return result.rowcount or 0

    @staticmethod
    async def list_core_beliefs(
        session: AsyncSession,
        *,
        user_id: UUID,
        active_only: bool = True,
    ) -> list[CoreBelief]:
        stmt = (
            select(CoreBelief)
            .where(CoreBelief.user_id == user_id)
            .order_by(CoreBelief.created_at.asc())
        )
        if active_only:
            stmt = stmt.where(CoreBelief.is_active_target.is_(True))
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def identify_safety_behavior(
        session: AsyncSession,
        *,
        user_id: UUID,
        behavior: str,
        situation: str,
        fear_addressed: str | None = None,
    ) -> SafetyBehavior:
        stmt = insert(SafetyBehavior).values(
            user_id=user_id,
            behavior=behavior,
            situation=situation,
            fear_addressed=fear_addressed,
            times_identified=1,
        )
        stmt = stmt.on_conflict_do_update(
            constraint="uq_safety_behaviors_user_behavior",
            set_={"times_identified": SafetyBehavior.times_identified + 1},
        ).returning(SafetyBehavior)
        result = await session.execute(stmt.execution_options(populate_existing=True))
        return result.scalar_one()

    @staticmethod
    async def upsert_value(
        session: AsyncSession,
        *,
        user_id: UUID,
        domain: str,
        importance: int | None,
        current_satisfaction: int | None,
        description: str | None = None,
        goals: str | None = None,
    ) -> None:
        stmt = insert(ValuesAssessment).values(
            user_id=user_id,
            domain=domain,
            importance=importance,
            current_satisfaction=current_satisfaction,
            description=description,
            goals=goals,
        )
        stmt = stmt.on_conflict_do_update(
            constraint="uq_values_assessment_user_domain",
            set_={
                "importance": stmt.excluded.importance,
                "current_satisfaction": stmt.excluded.current_satisfaction,
                "description": stmt.excluded.description,
                "goals": stmt.excluded.goals,
            },
        )
        await session.execute(stmt)

    @staticmethod
    async def values_gaps(session: AsyncSession, *, user_id: UUID) -> list[dict[str, object]]:
        stmt = (
            select(values_gap_analysis)
            .where(values_gap_analysis.c.user_id == user_id)
            .order_by(values_gap_analysis.c.gap.desc().nullslast())
        )
        result = await session.execute(stmt)
        return [dict(row) for row in result.mappings().all()]

    @staticmethod
    async def get_active_relapse_plan(
        session: AsyncSession,
        *,
        user_id: UUID,
    ) -> RelapsePreventionPlan | None:
        stmt = (
            select(RelapsePreventionPlan)
            .where(
                RelapsePreventionPlan.user_id == user_id,
                RelapsePreventionPlan.is_active.is_(True),
            )
            .order_by(RelapsePreventionPlan.updated_at.desc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def save_relapse_plan(
        session: AsyncSession,
        *,
        plan: RelapsePreventionPlan,
    ) -> RelapsePreventionPlan:
        """Store ``plan`` as the user's only active plan."""
        await session.execute(
            update(RelapsePreventionPlan)
            .where(
                RelapsePreventionPlan.user_id == plan.user_id,
                RelapsePreventionPlan.is_active.is_(True),
            )
            .values(is_active=False)
        )
        plan.is_active = True
        session.add(plan)
        await session.flush()
        return plan

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from meeras.db.models.questions import Question


class QuestionsRepo:
    @staticmethod
    async def list_for_category(
        session: AsyncSession,
        *,
        category_id: UUID,
    ) -> list[Question]:
        stmt = (
            select(Question)
            .where(Question.category_id == category_id)
            .order_by(Question.order_index.asc(), Question.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_by_ids(
        session: AsyncSession,
        *,
        question_ids: Sequence[UUID],
    ) -> list[Question]:
        if not question_ids:
            return []
        stmt = (
            select(Question)
            .where(Question.id.in_(tuple(question_ids)))
            .order_by(Question.order_index.asc(), Question.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

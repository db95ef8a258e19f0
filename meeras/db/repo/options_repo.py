from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from meeras.db.models.options import Option


class OptionsRepo:
    @staticmethod
    async def list_for_questions(
        session: AsyncSession,
        *,
        question_ids: Sequence[UUID],
    ) -> list[Option]:
        if not question_ids:
            return []
        stmt = (
            select(Option)
            .where(Option.question_id.in_(tuple(question_ids)))
            .order_by(Option.order_index.asc(), Option.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

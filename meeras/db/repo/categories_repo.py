from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from meeras.db.models.categories import Category


class CategoriesRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, category_id: UUID) -> Category | None:
        return await session.get(Category, category_id)

    @staticmethod
    async def list_ordered(session: AsyncSession) -> list[Category]:
        stmt = select(Category).order_by(Category.order_index.asc(), Category.id.asc())
        result = await session.execute(stmt)
        return list(result.scalars().all())

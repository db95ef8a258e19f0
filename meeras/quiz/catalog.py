from __future__ import annotations

from collections.abc import AsyncIterator, Iterable, Sequence
from contextlib import asynccontextmanager
from typing import Protocol
from uuid import UUID

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from meeras.db.models.categories import Category as CategoryRow
from meeras.db.models.options import Option as OptionRow
from meeras.db.models.questions import Question as QuestionRow
from meeras.db.repo.categories_repo import CategoriesRepo
from meeras.db.repo.options_repo import OptionsRepo
from meeras.db.repo.questions_repo import QuestionsRepo
from meeras.quiz.errors import FetchError
from meeras.quiz.types import Category, Option, Question

logger = structlog.get_logger(__name__)


class QuizCatalog(Protocol):
    """Read-only access to the categories, questions and options collections."""

    async def list_categories(self) -> list[Category]: ...

    async def get_category(self, category_id: UUID) -> Category | None: ...

    async def list_questions(self, category_id: UUID) -> list[Question]: ...

    async def list_questions_by_ids(self, question_ids: Sequence[UUID]) -> list[Question]: ...

    async def list_options(self, question_ids: Sequence[UUID]) -> list[Option]: ...


def group_options_by_question(options: Iterable[Option]) -> dict[UUID, tuple[Option, ...]]:
    grouped: dict[UUID, list[Option]] = {}
    for option in options:
        grouped.setdefault(option.question_id, []).append(option)
    return {question_id: tuple(items) for question_id, items in grouped.items()}


def _category_snapshot(row: CategoryRow) -> Category:
    return Category(
        id=row.id,
        name=row.name,
        description=row.description,
        order_index=row.order_index,
        created_at=row.created_at,
    )


def _question_snapshot(row: QuestionRow) -> Question:
    return Question(
        id=row.id,
        category_id=row.category_id,
        question_text=row.question_text,
        explanation=row.explanation,
        order_index=row.order_index,
        created_at=row.created_at,
    )


def _option_snapshot(row: OptionRow) -> Option:
    return Option(
        id=row.id,
        question_id=row.question_id,
        option_text=row.option_text,
        is_correct=bool(row.is_correct),
        order_index=row.order_index,
        explanation=row.explanation,
        created_at=row.created_at,
    )


@asynccontextmanager
async def _fetching(collection: str, **log_fields: object) -> AsyncIterator[None]:
    try:
        yield
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("quiz_catalog_fetch_failed", collection=collection, exc_info=exc, **log_fields)
        raise FetchError(f"Failed to load {collection}") from exc


class DatabaseQuizCatalog:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def list_categories(self) -> list[Category]:
        async with _fetching("categories"):
            async with self._session_factory() as session:
                rows = await CategoriesRepo.list_ordered(session)
        return [_category_snapshot(row) for row in rows]

    async def get_category(self, category_id: UUID) -> Category | None:
        async with _fetching("categories", category_id=str(category_id)):
            async with self._session_factory() as session:
                row = await CategoriesRepo.get_by_id(session, category_id)
        return _category_snapshot(row) if row is not None else None

    async def list_questions(self, category_id: UUID) -> list[Question]:
        async with _fetching("questions", category_id=str(category_id)):
            async with self._session_factory() as session:
                rows = await QuestionsRepo.list_for_category(session, category_id=category_id)
        return [_question_snapshot(row) for row in rows]

    async def list_questions_by_ids(self, question_ids: Sequence[UUID]) -> list[Question]:
        async with _fetching("questions", requested=len(question_ids)):
            async with self._session_factory() as session:
                rows = await QuestionsRepo.list_by_ids(session, question_ids=question_ids)
        return [_question_snapshot(row) for row in rows]

    async def list_options(self, question_ids: Sequence[UUID]) -> list[Option]:
        async with _fetching("options", requested=len(question_ids)):
            async with self._session_factory() as session:
                rows = await OptionsRepo.list_for_questions(session, question_ids=question_ids)
        return [_option_snapshot(row) for row in rows]

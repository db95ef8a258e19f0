from __future__ import annotations

from uuid import UUID

import structlog

from meeras.quiz.catalog import QuizCatalog, group_options_by_question
from meeras.quiz.types import QuizContent

logger = structlog.get_logger(__name__)


async def load_quiz_content(catalog: QuizCatalog, *, category_id: UUID) -> QuizContent:
    questions = await catalog.list_questions(category_id)
    if not questions:
        logger.info("quiz_category_empty", category_id=str(category_id))
        return QuizContent(questions=())

    # Options are requested only once the question ids are known.
    options = await catalog.list_options([question.id for question in questions])
    content = QuizContent(
        questions=tuple(questions),
        options_by_question=group_options_by_question(options),
    )
    logger.info(
        "quiz_content_loaded",
        category_id=str(category_id),
        questions=len(content.questions),
        options=len(options),
    )
    return content

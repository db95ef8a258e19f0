from __future__ import annotations

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

import structlog

from meeras.quiz.catalog import QuizCatalog, group_options_by_question
from meeras.quiz.errors import DataIntegrityError
from meeras.quiz.types import Answer, Option, Question, QuestionResult, QuizResults, QuizScore

logger = structlog.get_logger(__name__)


def find_option(options: Sequence[Option], option_id: UUID) -> Option | None:
    for option in options:
        if option.id == option_id:
            return option
    return None


def find_correct_option(options: Sequence[Option]) -> Option | None:
    """Return the single correct option, or None when zero or several are marked correct."""
    correct = [option for option in options if option.is_correct]
    if len(correct) != 1:
        return None
    return correct[0]


def score_percentage(correct_count: int, total_count: int) -> int | None:
    if total_count <= 0:
        return None
    ratio = Decimal(100 * correct_count) / Decimal(total_count)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_score(results: Sequence[QuestionResult]) -> QuizScore:
    correct_count = sum(1 for result in results if result.is_correct)
    total_count = len(results)
    return QuizScore(
        correct_count=correct_count,
        total_count=total_count,
        percentage=score_percentage(correct_count, total_count),
    )


def reconcile_results(
    answers: Sequence[Answer],
    questions: Sequence[Question],
    options: Sequence[Option],
) -> list[QuestionResult]:
    answers_by_question = {answer.question_id: answer for answer in answers}
    questions_by_id = {question.id: question for question in questions}

    missing_question_ids = [
        question_id for question_id in answers_by_question if question_id not in questions_by_id
    ]
    if missing_question_ids:
        raise DataIntegrityError(
            "answered question no longer exists",
            question_id=missing_question_ids[0],
        )

    options_by_question = group_options_by_question(options)
    ordered_questions = sorted(
        (question for question in questions if question.id in answers_by_question),
        key=lambda question: question.order_index,
    )

    results: list[QuestionResult] = []
    for question in ordered_questions:
        answer = answers_by_question[question.id]
        question_options = options_by_question.get(question.id, ())

        selected_option = find_option(question_options, answer.selected_option_id)
        if selected_option is None:
            raise DataIntegrityError("selected option not found", question_id=question.id)

        correct_option = find_correct_option(question_options)
        if correct_option is None:
            raise DataIntegrityError(
                "question must have exactly one correct option",
                question_id=question.id,
            )

        results.append(
            QuestionResult(
                question=question,
                selected_option=selected_option,
                correct_option=correct_option,
                # Trust the flag captured at submission time.
                is_correct=answer.is_correct,
            )
        )
    return results


async def build_results(catalog: QuizCatalog, answers: Sequence[Answer]) -> QuizResults:
    if not answers:
        return QuizResults(results=(), score=compute_score([]))

    question_ids = [answer.question_id for answer in answers]
    questions = await catalog.list_questions_by_ids(question_ids)
    options = await catalog.list_options(question_ids)

    try:
        results = reconcile_results(answers, questions, options)
    except DataIntegrityError as exc:
        logger.error(
            "quiz_results_data_integrity_error",
            reason=exc.message,
            question_id=str(exc.question_id) if exc.question_id is not None else None,
        )
        raise

    score = compute_score(results)
    logger.info(
        "quiz_results_built",
        correct=score.correct_count,
        total=score.total_count,
        percentage=score.percentage,
    )
    return QuizResults(results=tuple(results), score=score)

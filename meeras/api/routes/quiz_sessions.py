from __future__ import annotations

from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from meeras.api.deps import get_quiz_catalog, get_quiz_session_store
from meeras.api.routes.quiz_models import (
    AnswerFeedbackResponse,
    ChooseCategoryRequest,
    OptionResponse,
    QuestionResponse,
    QuestionResultResponse,
    QuizResultsResponse,
    QuizSessionResponse,
    QuizStateResponse,
    RevealedOptionResponse,
    SelectedCategoryResponse,
    SelectOptionRequest,
)
from meeras.quiz.catalog import QuizCatalog
from meeras.quiz.errors import (
    CategoryNotFoundError,
    DataIntegrityError,
    EmptyCategoryError,
    FetchError,
    InvalidOptionError,
    InvalidScreenError,
    QuizError,
    QuizNotReadyError,
    QuizSessionLimitError,
    QuizSessionNotFoundError,
)
from meeras.quiz.navigation import QuizFlow
from meeras.quiz.progression import QuizPhase, QuizProgression
from meeras.quiz.store import QuizSessionStore
from meeras.quiz.types import Option, QuizResults

router = APIRouter(tags=["quiz"])
logger = structlog.get_logger(__name__)


def _http_error(exc: QuizError) -> HTTPException:
    if isinstance(exc, FetchError):
        return HTTPException(status_code=503, detail={"code": "E_FETCH_FAILED", "message": exc.message})
    if isinstance(exc, DataIntegrityError):
        return HTTPException(status_code=409, detail={"code": "E_DATA_INTEGRITY", "message": exc.message})
    if isinstance(exc, QuizSessionNotFoundError):
        return HTTPException(status_code=404, detail={"code": "E_SESSION_NOT_FOUND"})
    if isinstance(exc, CategoryNotFoundError):
        return HTTPException(status_code=404, detail={"code": "E_CATEGORY_NOT_FOUND"})
    if isinstance(exc, InvalidOptionError):
        return HTTPException(status_code=422, detail={"code": "E_INVALID_OPTION"})
    if isinstance(exc, EmptyCategoryError):
        return HTTPException(status_code=409, detail={"code": "E_CATEGORY_EMPTY"})
    if isinstance(exc, (InvalidScreenError, QuizNotReadyError)):
        return HTTPException(status_code=409, detail={"code": "E_INVALID_SCREEN"})
    if isinstance(exc, QuizSessionLimitError):
        return HTTPException(status_code=503, detail={"code": "E_SESSION_LIMIT"})
    return HTTPException(status_code=400, detail={"code": "E_QUIZ"})


def _option_response(option: Option) -> OptionResponse:
    return OptionResponse(id=option.id, text=option.option_text)


def _revealed_option_response(option: Option) -> RevealedOptionResponse:
    return RevealedOptionResponse(
        id=option.id,
        text=option.option_text,
        is_correct=option.is_correct,
        explanation=option.explanation,
    )


def _quiz_state(progression: QuizProgression) -> QuizStateResponse:
    question = progression.current_question()
    if question is None:
        return QuizStateResponse(
            phase=progression.phase.value,
            error=progression.error_message,
            total_questions=progression.total_questions,
            progress_percent=100.0 if progression.phase is QuizPhase.COMPLETED else 0.0,
        )

    feedback = None
    options: list[RevealedOptionResponse | OptionResponse] = [
        _option_response(option) for option in progression.current_options()
    ]
    selected = progression.selected_option()
    if progression.revealed and selected is not None:
        feedback = AnswerFeedbackResponse(
            is_correct=selected.is_correct,
            option_explanation=selected.explanation,
            question_explanation=question.explanation,
        )
        # Only the chosen option reveals its correctness.
        options = [
            _revealed_option_response(option) if option.id == selected.id else _option_response(option)
            for option in progression.current_options()
        ]

    return QuizStateResponse(
        phase=progression.phase.value,
        total_questions=progression.total_questions,
        question_number=progression.current_index + 1,
        progress_percent=progression.progress_percent(),
        is_last_question=progression.is_last_question,
        question=QuestionResponse(id=question.id, text=question.question_text),
        options=options,
        selected_option_id=progression.selected_option_id,
        revealed=progression.revealed,
        feedback=feedback,
    )


def _session_response(flow: QuizFlow) -> QuizSessionResponse:
    return QuizSessionResponse(
        session_id=flow.id,
        screen=flow.screen.value,
        category=(
            SelectedCategoryResponse(id=flow.category.id, name=flow.category.name)
            if flow.category is not None
            else None
        ),
        quiz=_quiz_state(flow.progression) if flow.progression is not None else None,
        answers_count=(
            len(flow.progression.answers) if flow.progression is not None else len(flow.answers)
        ),
    )


def _results_response(flow: QuizFlow, results: QuizResults) -> QuizResultsResponse:
    return QuizResultsResponse(
        session_id=flow.id,
        category_name=flow.category.name if flow.category is not None else None,
        total_questions=results.score.total_count,
        correct_answers=results.score.correct_count,
        percentage=results.score.percentage,
        results=[
            QuestionResultResponse(
                question_number=index,
                question_id=result.question.id,
                question_text=result.question.question_text,
                explanation=result.question.explanation,
                selected_option=_revealed_option_response(result.selected_option),
                correct_option=_revealed_option_response(result.correct_option),
                is_correct=result.is_correct,
            )
            for index, result in enumerate(results.results, start=1)
        ],
    )


def _get_flow(store: QuizSessionStore, session_id: UUID) -> QuizFlow:
    try:
        return store.get(session_id)
    except QuizSessionNotFoundError as exc:
        raise _http_error(exc) from exc


@router.post(
    "/v1/quiz-sessions",
    response_model=QuizSessionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_quiz_session(
    store: QuizSessionStore = Depends(get_quiz_session_store),
) -> QuizSessionResponse:
    try:
        flow = store.create()
    except QuizSessionLimitError as exc:
        raise _http_error(exc) from exc
    return _session_response(flow)


@router.get("/v1/quiz-sessions/{session_id}", response_model=QuizSessionResponse)
async def get_quiz_session(
    session_id: UUID,
    store: QuizSessionStore = Depends(get_quiz_session_store),
) -> QuizSessionResponse:
    return _session_response(_get_flow(store, session_id))


@router.delete("/v1/quiz-sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_quiz_session(
    session_id: UUID,
    store: QuizSessionStore = Depends(get_quiz_session_store),
) -> None:
    store.discard(session_id)


@router.post("/v1/quiz-sessions/{session_id}/category", response_model=QuizSessionResponse)
async def choose_category(
    session_id: UUID,
    payload: ChooseCategoryRequest,
    store: QuizSessionStore = Depends(get_quiz_session_store),
    catalog: QuizCatalog = Depends(get_quiz_catalog),
) -> QuizSessionResponse:
    flow = _get_flow(store, session_id)
    try:
        category = await catalog.get_category(payload.category_id)
        if category is None:
            raise CategoryNotFoundError
        flow.choose_category(category.id, category.name)
        await flow.load_quiz(catalog)
    except QuizError as exc:
        raise _http_error(exc) from exc

    logger.info(
        "quiz_category_chosen",
        flow_id=str(flow.id),
        category_id=str(category.id),
        phase=flow.progression.phase.value if flow.progression is not None else None,
    )
    return _session_response(flow)


@router.post("/v1/quiz-sessions/{session_id}/select", response_model=QuizSessionResponse)
async def select_option(
    session_id: UUID,
    payload: SelectOptionRequest,
    store: QuizSessionStore = Depends(get_quiz_session_store),
) -> QuizSessionResponse:
    flow = _get_flow(store, session_id)
    try:
        flow.select_option(payload.option_id)
    except QuizError as exc:
        raise _http_error(exc) from exc
    return _session_response(flow)


@router.post("/v1/quiz-sessions/{session_id}/submit", response_model=QuizSessionResponse)
async def submit_answer(
    session_id: UUID,
    store: QuizSessionStore = Depends(get_quiz_session_store),
) -> QuizSessionResponse:
    flow = _get_flow(store, session_id)
    try:
        flow.submit()
    except QuizError as exc:
        raise _http_error(exc) from exc
    return _session_response(flow)


@router.post("/v1/quiz-sessions/{session_id}/advance", response_model=QuizSessionResponse)
async def advance_question(
    session_id: UUID,
    store: QuizSessionStore = Depends(get_quiz_session_store),
) -> QuizSessionResponse:
    flow = _get_flow(store, session_id)
    try:
        flow.advance()
    except QuizError as exc:
        raise _http_error(exc) from exc
    return _session_response(flow)


@router.post("/v1/quiz-sessions/{session_id}/back", response_model=QuizSessionResponse)
async def back_to_categories(
    session_id: UUID,
    store: QuizSessionStore = Depends(get_quiz_session_store),
) -> QuizSessionResponse:
    flow = _get_flow(store, session_id)
    try:
        flow.back_to_categories()
    except QuizError as exc:
        raise _http_error(exc) from exc
    return _session_response(flow)


@router.post("/v1/quiz-sessions/{session_id}/restart", response_model=QuizSessionResponse)
async def restart_quiz(
    session_id: UUID,
    store: QuizSessionStore = Depends(get_quiz_session_store),
) -> QuizSessionResponse:
    flow = _get_flow(store, session_id)
    flow.restart()
    return _session_response(flow)


@router.get("/v1/quiz-sessions/{session_id}/results", response_model=QuizResultsResponse)
async def get_quiz_results(
    session_id: UUID,
    store: QuizSessionStore = Depends(get_quiz_session_store),
    catalog: QuizCatalog = Depends(get_quiz_catalog),
) -> QuizResultsResponse:
    flow = _get_flow(store, session_id)
    try:
        results = await flow.load_results(catalog)
    except QuizError as exc:
        raise _http_error(exc) from exc
    return _results_response(flow, results)

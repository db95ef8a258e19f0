from __future__ import annotations

import pytest

from meeras.quiz.catalog import group_options_by_question
from meeras.quiz.errors import EmptyCategoryError, InvalidOptionError, QuizNotReadyError
from meeras.quiz.progression import QuizPhase, QuizProgression
from meeras.quiz.types import Answer, QuizContent
from tests.quiz.quiz_fixtures import (
    BASIC_SHARES_ID,
    Q1_A,
    Q1_B,
    Q1_ID,
    Q2_A,
    Q2_B,
    Q2_ID,
    Q3_A,
    make_options,
    make_questions,
)


def _basic_shares_content() -> QuizContent:
    questions = [question for question in make_questions() if question.category_id == BASIC_SHARES_ID]
    return QuizContent(
        questions=tuple(questions),
        options_by_question=group_options_by_question(make_options()),
    )


def _ready_progression() -> QuizProgression:
    return QuizProgression.from_content(_basic_shares_content())


def test_loaded_quiz_awaits_selection_on_first_question() -> None:
    progression = _ready_progression()

    assert progression.phase is QuizPhase.AWAITING_SELECTION
    assert progression.current_index == 0
    assert progression.current_question().id == Q1_ID
    assert [option.option_text for option in progression.current_options()] == ["A", "B", "C"]
    assert progression.progress_percent() == 50.0


def test_empty_content_is_terminal_empty_state() -> None:
    progression = QuizProgression.from_content(QuizContent(questions=()))

    assert progression.phase is QuizPhase.EMPTY
    assert progression.current_question() is None
    with pytest.raises(EmptyCategoryError):
        progression.select_option(Q1_A)


def test_failed_loading_halts_before_ready() -> None:
    progression = QuizProgression.loading()
    progression.mark_failed("Failed to load questions")

    assert progression.phase is QuizPhase.FAILED
    assert progression.error_message == "Failed to load questions"
    with pytest.raises(QuizNotReadyError):
        progression.submit()
    with pytest.raises(QuizNotReadyError):
        progression.mark_loaded(_basic_shares_content())


def test_selection_is_changeable_before_submission() -> None:
    progression = _ready_progression()

    progression.select_option(Q1_A)
    progression.select_option(Q1_B)

    assert progression.phase is QuizPhase.SELECTED
    assert progression.selected_option_id == Q1_B
    assert progression.answers == ()


def test_selecting_option_of_another_question_is_rejected() -> None:
    progression = _ready_progression()

    with pytest.raises(InvalidOptionError):
        progression.select_option(Q3_A)
    assert progression.phase is QuizPhase.AWAITING_SELECTION
    assert progression.selected_option_id is None


def test_submit_without_selection_is_noop() -> None:
    progression = _ready_progression()

    assert progression.submit() is None
    assert progression.selected_option_id is None
    assert progression.revealed is False
    assert progression.answers == ()
    assert progression.phase is QuizPhase.AWAITING_SELECTION


def test_submit_copies_correctness_from_selected_option() -> None:
    progression = _ready_progression()
    progression.select_option(Q1_A)

    answer = progression.submit()

    assert answer == Answer(question_id=Q1_ID, selected_option_id=Q1_A, is_correct=False)
    assert progression.revealed is True
    assert progression.phase is QuizPhase.REVEALED
    assert progression.answers == (answer,)


def test_selection_is_locked_after_reveal() -> None:
    progression = _ready_progression()
    progression.select_option(Q1_A)
    progression.submit()

    progression.select_option(Q1_B)

    assert progression.selected_option_id == Q1_A
    assert progression.phase is QuizPhase.REVEALED
    assert len(progression.answers) == 1


def test_double_submit_records_single_answer() -> None:
    progression = _ready_progression()
    progression.select_option(Q1_B)
    progression.submit()

    assert progression.submit() is None
    assert len(progression.answers) == 1


def test_advance_before_reveal_is_noop() -> None:
    progression = _ready_progression()
    progression.select_option(Q1_B)

    assert progression.advance() is None
    assert progression.current_index == 0
    assert progression.phase is QuizPhase.SELECTED


def test_advance_moves_to_next_question_and_clears_selection() -> None:
    progression = _ready_progression()
    progression.select_option(Q1_B)
    progression.submit()

    assert progression.advance() is None
    assert progression.current_index == 1
    assert progression.current_question().id == Q2_ID
    assert progression.selected_option_id is None
    assert progression.revealed is False
    assert progression.phase is QuizPhase.AWAITING_SELECTION
    assert progression.is_last_question is True


def test_full_run_completes_once_with_one_answer_per_question_in_order() -> None:
    progression = _ready_progression()

    progression.select_option(Q1_A)
    progression.submit()
    progression.advance()
    progression.select_option(Q2_B)
    progression.select_option(Q2_A)
    progression.submit()
    completed = progression.advance()

    assert completed == (
        Answer(question_id=Q1_ID, selected_option_id=Q1_A, is_correct=False),
        Answer(question_id=Q2_ID, selected_option_id=Q2_A, is_correct=True),
    )
    assert progression.phase is QuizPhase.COMPLETED
    assert progression.advance() is None
    assert progression.submit() is None
    assert progression.answers == completed

from __future__ import annotations

from enum import Enum
from uuid import UUID

from meeras.quiz.errors import EmptyCategoryError, InvalidOptionError, QuizNotReadyError
from meeras.quiz.types import Answer, Option, Question, QuizContent


class QuizPhase(str, Enum):
    LOADING = "LOADING"
    FAILED = "FAILED"
    EMPTY = "EMPTY"
    AWAITING_SELECTION = "AWAITING_SELECTION"
    SELECTED = "SELECTED"
    REVEALED = "REVEALED"
    COMPLETED = "COMPLETED"


IN_PLAY_PHASES = frozenset(
    {
        QuizPhase.AWAITING_SELECTION,
        QuizPhase.SELECTED,
        QuizPhase.REVEALED,
    }
)


class QuizProgression:
    """Single-question-at-a-time quiz flow.

    select -> submit -> reveal -> advance, one Answer per question in
    question order. Submitting without a selection and selecting while the
    answer is revealed leave the state untouched. Completion hands out the
    accumulated answers exactly once.
    """

    def __init__(self) -> None:
        self.phase = QuizPhase.LOADING
        self.error_message: str | None = None
        self._content = QuizContent(questions=())
        self.current_index = 0
        self.selected_option_id: UUID | None = None
        self.revealed = False
        self._answers: list[Answer] = []

    @classmethod
    def loading(cls) -> QuizProgression:
        return cls()

    @classmethod
    def from_content(cls, content: QuizContent) -> QuizProgression:
        progression = cls()
        progression.mark_loaded(content)
        return progression

    @property
    def questions(self) -> tuple[Question, ...]:
        return self._content.questions

    @property
    def answers(self) -> tuple[Answer, ...]:
        return tuple(self._answers)

    @property
    def total_questions(self) -> int:
        return len(self._content.questions)

    @property
    def is_last_question(self) -> bool:
        return self.current_index >= self.total_questions - 1

    def mark_loaded(self, content: QuizContent) -> None:
        if self.phase is not QuizPhase.LOADING:
            raise QuizNotReadyError(f"cannot load quiz content in phase {self.phase.value}")
        self._content = content
        self.phase = QuizPhase.AWAITING_SELECTION if content.questions else QuizPhase.EMPTY

    def mark_failed(self, message: str) -> None:
        if self.phase is not QuizPhase.LOADING:
            raise QuizNotReadyError(f"cannot fail quiz loading in phase {self.phase.value}")
        self.error_message = message
        self.phase = QuizPhase.FAILED

    def current_question(self) -> Question | None:
        if self.phase not in IN_PLAY_PHASES:
            return None
        return self._content.questions[self.current_index]

    def current_options(self) -> tuple[Option, ...]:
        question = self.current_question()
        if question is None:
            return ()
        return self._content.options_for(question.id)

    def find_current_option(self, option_id: UUID | None) -> Option | None:
        if option_id is None:
            return None
        for option in self.current_options():
            if option.id == option_id:
                return option
        return None

    def selected_option(self) -> Option | None:
        return self.find_current_option(self.selected_option_id)

    def progress_percent(self) -> float:
        if self.total_questions == 0:
            return 0.0
        return (self.current_index + 1) / self.total_questions * 100

    def select_option(self, option_id: UUID) -> None:
        self._ensure_playable()
        if self.phase is QuizPhase.REVEALED or self.phase is QuizPhase.COMPLETED:
            return
        if self.find_current_option(option_id) is None:
            raise InvalidOptionError(f"option {option_id} does not belong to the current question")
        self.selected_option_id = option_id
        self.phase = QuizPhase.SELECTED

    def submit(self) -> Answer | None:
        self._ensure_playable()
        if self.phase is not QuizPhase.SELECTED:
            return None

        question = self._content.questions[self.current_index]
        chosen = self.find_current_option(self.selected_option_id)
        if chosen is None:
            return None

        answer = Answer(
            question_id=question.id,
            selected_option_id=chosen.id,
            is_correct=chosen.is_correct,
        )
        self._answers.append(answer)
        self.revealed = True
        self.phase = QuizPhase.REVEALED
        return answer

    def advance(self) -> tuple[Answer, ...] | None:
        """Move past a revealed question; returns the answers once, on completion."""
        self._ensure_playable()
        if self.phase is not QuizPhase.REVEALED:
            return None

        if not self.is_last_question:
            self.current_index += 1
            self.selected_option_id = None
            self.revealed = False
            self.phase = QuizPhase.AWAITING_SELECTION
            return None

        self.phase = QuizPhase.COMPLETED
        return self.answers

    def _ensure_playable(self) -> None:
        if self.phase is QuizPhase.EMPTY:
            raise EmptyCategoryError("no questions available in this category")
        if self.phase is QuizPhase.LOADING or self.phase is QuizPhase.FAILED:
            raise QuizNotReadyError(f"quiz is not ready (phase {self.phase.value})")

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class Category:
    id: UUID
    name: str
    description: str
    order_index: int
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class Question:
    id: UUID
    category_id: UUID
    question_text: str
    explanation: str
    order_index: int
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class Option:
    id: UUID
    question_id: UUID
    option_text: str
    is_correct: bool
    order_index: int
    explanation: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class Answer:
    question_id: UUID
    selected_option_id: UUID
    is_correct: bool


@dataclass(frozen=True, slots=True)
class QuizContent:
    questions: tuple[Question, ...]
    options_by_question: dict[UUID, tuple[Option, ...]] = field(default_factory=dict)

    def options_for(self, question_id: UUID) -> tuple[Option, ...]:
        return self.options_by_question.get(question_id, ())


@dataclass(frozen=True, slots=True)
class QuestionResult:
    question: Question
    selected_option: Option
    correct_option: Option
    is_correct: bool


@dataclass(frozen=True, slots=True)
class QuizScore:
    correct_count: int
    total_count: int
    percentage: int | None


@dataclass(frozen=True, slots=True)
class QuizResults:
    results: tuple[QuestionResult, ...]
    score: QuizScore

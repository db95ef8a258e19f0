from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field


class CategoryResponse(BaseModel):
    id: UUID
    name: str
    description: str
    order_index: int


class CategoryListResponse(BaseModel):
    categories: list[CategoryResponse]


class ChooseCategoryRequest(BaseModel):
    category_id: UUID


class SelectOptionRequest(BaseModel):
    option_id: UUID


class SelectedCategoryResponse(BaseModel):
    id: UUID
    name: str


class OptionResponse(BaseModel):
    id: UUID
    text: str


class RevealedOptionResponse(OptionResponse):
    is_correct: bool
    explanation: str | None = None


class QuestionResponse(BaseModel):
    id: UUID
    text: str


class AnswerFeedbackResponse(BaseModel):
    is_correct: bool
    option_explanation: str | None = None
    question_explanation: str


class QuizStateResponse(BaseModel):
    phase: str
    error: str | None = None
    total_questions: int = Field(ge=0)
    question_number: int | None = Field(default=None, ge=1)
    progress_percent: float = Field(ge=0.0, le=100.0)
    is_last_question: bool = False
    question: QuestionResponse | None = None
    options: list[RevealedOptionResponse | OptionResponse] = Field(default_factory=list)
    selected_option_id: UUID | None = None
    revealed: bool = False
    feedback: AnswerFeedbackResponse | None = None


class QuizSessionResponse(BaseModel):
    session_id: UUID
    screen: str
    category: SelectedCategoryResponse | None = None
    quiz: QuizStateResponse | None = None
    answers_count: int = Field(ge=0)


class QuestionResultResponse(BaseModel):
    question_number: int = Field(ge=1)
    question_id: UUID
    question_text: str
    explanation: str
    selected_option: RevealedOptionResponse
    correct_option: RevealedOptionResponse
    is_correct: bool


class QuizResultsResponse(BaseModel):
    session_id: UUID
    category_name: str | None = None
    total_questions: int = Field(ge=0)
    correct_answers: int = Field(ge=0)
    percentage: int | None = Field(default=None, ge=0, le=100)
    results: list[QuestionResultResponse]

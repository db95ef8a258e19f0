from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from uuid import UUID

import structlog

from meeras.quiz.catalog import QuizCatalog
from meeras.quiz.errors import FetchError, InvalidScreenError
from meeras.quiz.loading import load_quiz_content
from meeras.quiz.progression import QuizProgression
from meeras.quiz.results import build_results
from meeras.quiz.types import Answer, QuizResults

logger = structlog.get_logger(__name__)

CompletionHook = Callable[["QuizFlow", tuple[Answer, ...]], None]


class Screen(str, Enum):
    LANDING = "LANDING"
    QUESTIONS = "QUESTIONS"
    RESULTS = "RESULTS"


@dataclass(frozen=True, slots=True)
class SelectedCategory:
    id: UUID
    name: str


class QuizFlow:
    """Screen flow of one visitor: category selection, quiz, results.

    Every screen change bumps ``generation``; a fetch started under an older
    generation is dropped when it resolves.
    """

    def __init__(self, flow_id: UUID, *, on_complete: CompletionHook | None = None) -> None:
        self.id = flow_id
        self.screen = Screen.LANDING
        self.category: SelectedCategory | None = None
        self.progression: QuizProgression | None = None
        self.answers: tuple[Answer, ...] = ()
        self.results: QuizResults | None = None
        self.generation = 0
        self._on_complete = on_complete

    def choose_category(self, category_id: UUID, category_name: str) -> int:
        self.category = SelectedCategory(id=category_id, name=category_name)
        self.progression = QuizProgression.loading()
        self.answers = ()
        self.results = None
        self.screen = Screen.QUESTIONS
        self.generation += 1
        return self.generation

    async def load_quiz(self, catalog: QuizCatalog) -> None:
        progression = self._require_progression()
        category = self.category
        assert category is not None
        token = self.generation

        try:
            content = await load_quiz_content(catalog, category_id=category.id)
        except FetchError as exc:
            if self._is_stale(token, "quiz"):
                return
            progression.mark_failed(exc.message)
            logger.warning("quiz_loading_failed", flow_id=str(self.id), category_id=str(category.id))
            return

        if self._is_stale(token, "quiz"):
            return
        progression.mark_loaded(content)

    def select_option(self, option_id: UUID) -> None:
        self._require_progression().select_option(option_id)

    def submit(self) -> Answer | None:
        return self._require_progression().submit()

    def advance(self) -> tuple[Answer, ...] | None:
        completed = self._require_progression().advance()
        if completed is not None:
            self.complete(completed)
        return completed

    def complete(self, answers: tuple[Answer, ...]) -> None:
        self._require_screen(Screen.QUESTIONS)
        self.answers = answers
        self.results = None
        self.screen = Screen.RESULTS
        self.generation += 1
        if self._on_complete is not None:
            self._on_complete(self, answers)

    async def load_results(self, catalog: QuizCatalog) -> QuizResults:
        self._require_screen(Screen.RESULTS)
        if self.results is not None:
            return self.results

        token = self.generation
        results = await build_results(catalog, self.answers)
        if self._is_stale(token, "results"):
            raise InvalidScreenError("results are no longer displayed")
        self.results = results
        return results

    def restart(self) -> None:
        self.category = None
        self.progression = None
        self.answers = ()
        self.results = None
        self.screen = Screen.LANDING
        self.generation += 1

    def back_to_categories(self) -> None:
        self._require_screen(Screen.QUESTIONS)
        self.category = None
        self.progression = None
        self.answers = ()
        self.screen = Screen.LANDING
        self.generation += 1

    def _require_screen(self, screen: Screen) -> None:
        if self.screen is not screen:
            raise InvalidScreenError(f"expected screen {screen.value}, got {self.screen.value}")

    def _require_progression(self) -> QuizProgression:
        self._require_screen(Screen.QUESTIONS)
        assert self.progression is not None
        return self.progression

    def _is_stale(self, token: int, fetch: str) -> bool:
        if token == self.generation:
            return False
        logger.info(
            "quiz_stale_fetch_discarded",
            flow_id=str(self.id),
            fetch=fetch,
            token=token,
            generation=self.generation,
        )
        return True

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from time import monotonic
from uuid import UUID, uuid4

import structlog

from meeras.quiz.errors import QuizSessionLimitError, QuizSessionNotFoundError
from meeras.quiz.navigation import QuizFlow
from meeras.quiz.types import Answer

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class _StoredFlow:
    flow: QuizFlow
    last_seen: float


def _log_completion(flow: QuizFlow, answers: tuple[Answer, ...]) -> None:
    logger.info(
        "quiz_completed",
        flow_id=str(flow.id),
        category_id=str(flow.category.id) if flow.category is not None else None,
        answers=len(answers),
        correct=sum(1 for answer in answers if answer.is_correct),
    )


class QuizSessionStore:
    """Process-local registry of quiz flows. Nothing survives a restart."""

    def __init__(
        self,
        *,
        idle_ttl_seconds: float,
        max_active: int,
        clock: Callable[[], float] = monotonic,
    ) -> None:
        self._idle_ttl_seconds = idle_ttl_seconds
        self._max_active = max_active
        self._clock = clock
        self._flows: dict[UUID, _StoredFlow] = {}

    def __len__(self) -> int:
        return len(self._flows)

    def create(self) -> QuizFlow:
        now = self._clock()
        self._prune(now=now)
        if len(self._flows) >= self._max_active:
            logger.warning("quiz_session_limit_reached", max_active=self._max_active)
            raise QuizSessionLimitError

        flow = QuizFlow(uuid4(), on_complete=_log_completion)
        self._flows[flow.id] = _StoredFlow(flow=flow, last_seen=now)
        logger.info("quiz_session_created", flow_id=str(flow.id))
        return flow

    def get(self, flow_id: UUID) -> QuizFlow:
        now = self._clock()
        stored = self._flows.get(flow_id)
        if stored is None:
            raise QuizSessionNotFoundError
        if now - stored.last_seen > self._idle_ttl_seconds:
            self._flows.pop(flow_id, None)
            logger.info("quiz_session_expired", flow_id=str(flow_id))
            raise QuizSessionNotFoundError
        stored.last_seen = now
        return stored.flow

    def discard(self, flow_id: UUID) -> None:
        self._flows.pop(flow_id, None)

    def _prune(self, *, now: float) -> None:
        cutoff = now - self._idle_ttl_seconds
        expired = [flow_id for flow_id, stored in self._flows.items() if stored.last_seen < cutoff]
        for flow_id in expired:
            del self._flows[flow_id]
        if expired:
            logger.info("quiz_sessions_pruned", expired=len(expired))

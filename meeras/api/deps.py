from __future__ import annotations

from fastapi import Request

from meeras.quiz.catalog import QuizCatalog
from meeras.quiz.store import QuizSessionStore


def get_quiz_catalog(request: Request) -> QuizCatalog:
    return request.app.state.quiz_catalog


def get_quiz_session_store(request: Request) -> QuizSessionStore:
    return request.app.state.quiz_sessions

import uvicorn
from fastapi import FastAPI

from meeras.api.routes.categories import router as categories_router
from meeras.api.routes.health import router as health_router
from meeras.api.routes.quiz_sessions import router as quiz_sessions_router
from meeras.core.config import get_settings
from meeras.core.logging import configure_logging
from meeras.db.session import SessionLocal
from meeras.quiz.catalog import DatabaseQuizCatalog, QuizCatalog
from meeras.quiz.store import QuizSessionStore


def create_app(
    *,
    catalog: QuizCatalog | None = None,
    session_store: QuizSessionStore | None = None,
) -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Meeras Quiz API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.quiz_catalog = catalog if catalog is not None else DatabaseQuizCatalog(SessionLocal)
    app.state.quiz_sessions = (
        session_store
        if session_store is not None
        else QuizSessionStore(
            idle_ttl_seconds=settings.quiz_session_idle_ttl_seconds,
            max_active=settings.quiz_session_max_active,
        )
    )
    app.include_router(health_router)
    app.include_router(categories_router)
    app.include_router(quiz_sessions_router)
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "meeras.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_env == "dev",
    )


if __name__ == "__main__":
    run()

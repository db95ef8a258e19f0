from __future__ import annotations

import pytest
from sqlalchemy import text

from meeras.core.integration_db_safety import assert_safe_integration_db
from meeras.db.models import Category, Option, Question  # noqa: F401
from meeras.db.models.base import Base
from meeras.db.session import engine

TRUNCATE_TABLES = (
    "options",
    "questions",
    "categories",
)

TRUNCATE_SQL = f"TRUNCATE TABLE {', '.join(TRUNCATE_TABLES)} CASCADE"


@pytest.fixture(scope="session", autouse=True)
def guard_integration_db_target() -> None:
    try:
        assert_safe_integration_db(str(engine.url))
    except RuntimeError as exc:
        pytest.skip(str(exc))


@pytest.fixture(autouse=True)
async def cleanup_db() -> None:
    # Dispose pooled connections between tests to avoid cross-event-loop asyncpg reuse.
    await engine.dispose()

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as exc:  # pragma: no cover - environment-dependent
        pytest.skip(f"Postgres is required for integration tests: {exc}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await conn.execute(text(TRUNCATE_SQL))

    yield

    await engine.dispose()

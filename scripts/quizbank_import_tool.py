from __future__ import annotations

import argparse
import asyncio
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import delete, insert
from sqlalchemy.engine import make_url

from meeras.core.config import get_settings
from meeras.db.models.categories import Category
from meeras.db.models.options import Option
from meeras.db.models.questions import Question
from meeras.db.session import SessionLocal


@dataclass(slots=True)
class ImportSummary:
    categories: int = 0
    questions: int = 0
    options: int = 0


@dataclass(slots=True)
class ImportRecords:
    categories: list[dict[str, Any]]
    questions: list[dict[str, Any]]
    options: list[dict[str, Any]]


PRODUCTION_ENVS = {"prod", "production"}
REPLACE_ALL_CONFIRMATION = "PROD_REPLACE_ALL_OK"


def _validate_replace_all_safety(
    *,
    app_env: str,
    database_url: str,
    replace_all: bool,
    confirmation_value: str,
    expected_db_name: str,
) -> None:
    if not replace_all:
        return
    if app_env.strip().lower() not in PRODUCTION_ENVS:
        return
    if confirmation_value != REPLACE_ALL_CONFIRMATION:
        raise RuntimeError(
            "--replace-all in production requires explicit confirmation: "
            f"set QUIZBANK_REPLACE_ALL_CONFIRM={REPLACE_ALL_CONFIRMATION}"
        )
    actual_db_name = make_url(database_url).database or ""
    if actual_db_name != expected_db_name:
        raise RuntimeError(
            f"expected DB name mismatch: expected={expected_db_name!r}, actual={actual_db_name!r}"
        )


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import a JSON quiz bank into categories/questions/options.")
    parser.add_argument("--input", type=Path, default=Path("QuizBank/meeras_basics.json"))
    parser.add_argument(
        "--replace-all",
        action="store_true",
        help="Delete existing categories (and their questions/options) before import.",
    )
    parser.add_argument("--dry-run", action="store_true")
    return parser.parse_args()


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _read_bank(path: Path) -> list[dict[str, Any]]:
    if not path.exists():
        raise ValueError(f"input file does not exist: {path}")
    with path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    categories = payload.get("categories") if isinstance(payload, dict) else None
    if not isinstance(categories, list) or not categories:
        raise ValueError(f"{path.name}: expected a non-empty 'categories' list")
    return categories


def build_records(raw_categories: list[dict[str, Any]], *, source: str) -> tuple[ImportRecords, ImportSummary]:
    summary = ImportSummary()
    records = ImportRecords(categories=[], questions=[], options=[])

    for category_index, raw_category in enumerate(raw_categories):
        if not isinstance(raw_category, dict):
            raise ValueError(f"{source}: category #{category_index + 1} must be an object")
        name = _text(raw_category.get("name"))
        if not name:
            raise ValueError(f"{source}: category #{category_index + 1} has an empty name")
        category_id: UUID = uuid4()
        records.categories.append(
            {
                "id": category_id,
                "name": name,
                "description": _text(raw_category.get("description")),
                "order_index": category_index,
            }
        )
        summary.categories += 1

        for question_index, raw_question in enumerate(raw_category.get("questions") or []):
            location = f"{source}: {name} question #{question_index + 1}"
            if not isinstance(raw_question, dict):
                raise ValueError(f"{location}: question must be an object")
            question_text = _text(raw_question.get("question"))
            if not question_text:
                raise ValueError(f"{location}: empty question")

            raw_options = raw_question.get("options") or []
            for option_index, raw_option in enumerate(raw_options):
                if not isinstance(raw_option, dict):
                    raise ValueError(f"{location}: option #{option_index + 1} must be an object")
            if len(raw_options) < 2:
                raise ValueError(f"{location}: at least two options are required")
            correct_total = sum(1 for raw_option in raw_options if raw_option.get("is_correct") is True)
            if correct_total != 1:
                raise ValueError(f"{location}: exactly one correct option is required, got {correct_total}")

            question_id: UUID = uuid4()
            records.questions.append(
                {
                    "id": question_id,
                    "category_id": category_id,
                    "question_text": question_text,
                    "explanation": _text(raw_question.get("explanation")),
                    "order_index": question_index,
                }
            )
            summary.questions += 1

            for option_index, raw_option in enumerate(raw_options):
                option_text = _text(raw_option.get("text"))
                if not option_text:
                    raise ValueError(f"{location}: option #{option_index + 1} is empty")
                records.options.append(
                    {
                        "id": uuid4(),
                        "question_id": question_id,
                        "option_text": option_text,
                        "is_correct": raw_option.get("is_correct") is True,
                        "explanation": _text(raw_option.get("explanation")) or None,
                        "order_index": option_index,
                    }
                )
                summary.options += 1

    return records, summary


async def _persist_records(records: ImportRecords, *, replace_all: bool) -> None:
    if not records.categories:
        raise ValueError("no importable categories found")

    async with SessionLocal.begin() as session:
        if replace_all:
            await session.execute(delete(Option))
            await session.execute(delete(Question))
            await session.execute(delete(Category))

        await session.execute(insert(Category), records.categories)
        if records.questions:
            await session.execute(insert(Question), records.questions)
        if records.options:
            await session.execute(insert(Option), records.options)


async def _run() -> int:
    args = _parse_args()
    records, summary = build_records(_read_bank(args.input), source=args.input.name)

    settings = get_settings()
    _validate_replace_all_safety(
        app_env=settings.app_env,
        database_url=settings.database_url,
        replace_all=args.replace_all,
        confirmation_value=os.getenv("QUIZBANK_REPLACE_ALL_CONFIRM", ""),
        expected_db_name=os.getenv("QUIZBANK_EXPECTED_DB_NAME", ""),
    )

    if not args.dry_run:
        await _persist_records(records, replace_all=args.replace_all)

    print(  # noqa: T201
        "quizbank_import "
        f"categories={summary.categories} "
        f"questions={summary.questions} "
        f"options={summary.options} "
        f"replace_all={args.replace_all} "
        f"dry_run={args.dry_run}"
    )
    return 0


def main() -> int:
    return asyncio.run(_run())


if __name__ == "__main__":
    raise SystemExit(main())

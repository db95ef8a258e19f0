from __future__ import annotations

import json
from pathlib import Path

import pytest

from scripts.quizbank_import_tool import _read_bank, _validate_replace_all_safety, build_records

PROD_DB_URL = "postgresql+asyncpg://meeras:secret@db:5432/meeras"


def _bank(*questions: dict) -> list[dict]:
    return [{"name": "Basic Shares", "description": "Fixed shares.", "questions": list(questions)}]


def _question(*options: dict, text: str = "Husband's share without children?") -> dict:
    return {"question": text, "explanation": "An-Nisa 4:12.", "options": list(options)}


def test_build_records_links_categories_questions_and_options() -> None:
    records, summary = build_records(
        _bank(
            _question(
                {"text": "One quarter", "is_correct": False},
                {"text": "One half", "is_correct": True, "explanation": "No children."},
            )
        ),
        source="bank.json",
    )

    assert (summary.categories, summary.questions, summary.options) == (1, 1, 2)
    category = records.categories[0]
    question = records.questions[0]
    assert question["category_id"] == category["id"]
    assert [option["question_id"] for option in records.options] == [question["id"], question["id"]]
    assert [option["order_index"] for option in records.options] == [0, 1]
    assert records.options[0]["explanation"] is None
    assert records.options[1]["is_correct"] is True


@pytest.mark.parametrize("correct_flags", [(False, False), (True, True)])
def test_build_records_requires_exactly_one_correct_option(correct_flags: tuple[bool, bool]) -> None:
    bank = _bank(
        _question(
            {"text": "One quarter", "is_correct": correct_flags[0]},
            {"text": "One half", "is_correct": correct_flags[1]},
        )
    )

    with pytest.raises(ValueError, match="exactly one correct option"):
        build_records(bank, source="bank.json")


def test_build_records_rejects_empty_question() -> None:
    bank = _bank(
        _question(
            {"text": "A", "is_correct": True},
            {"text": "B", "is_correct": False},
            text="  ",
        )
    )

    with pytest.raises(ValueError, match="empty question"):
        build_records(bank, source="bank.json")


@pytest.mark.parametrize(
    ("bank", "message"),
    [
        (["Basic Shares"], "category #1 must be an object"),
        (_bank("Husband's share?"), "question must be an object"),
        (_bank(_question({"text": "One half", "is_correct": True}, "One quarter")), "option #2 must be an object"),
    ],
)
def test_build_records_rejects_non_object_entries(bank: list, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        build_records(bank, source="bank.json")


def test_read_bank_rejects_missing_categories(tmp_path: Path) -> None:
    path = tmp_path / "bank.json"
    path.write_text(json.dumps({"categories": []}), encoding="utf-8")

    with pytest.raises(ValueError, match="non-empty 'categories'"):
        _read_bank(path)


def test_bundled_quiz_bank_is_importable() -> None:
    path = Path(__file__).resolve().parents[2] / "QuizBank" / "meeras_basics.json"

    records, summary = build_records(_read_bank(path), source=path.name)

    assert summary.categories == 2
    assert records.categories[0]["name"] == "Basic Shares"


def test_validate_replace_all_safety_skips_when_replace_all_is_disabled() -> None:
    _validate_replace_all_safety(
        app_env="production",
        database_url=PROD_DB_URL,
        replace_all=False,
        confirmation_value="",
        expected_db_name="",
    )


def test_validate_replace_all_safety_skips_outside_production() -> None:
    _validate_replace_all_safety(
        app_env="dev",
        database_url=PROD_DB_URL,
        replace_all=True,
        confirmation_value="",
        expected_db_name="",
    )


def test_validate_replace_all_safety_rejects_missing_confirmation() -> None:
    with pytest.raises(RuntimeError, match="explicit confirmation"):
        _validate_replace_all_safety(
            app_env="prod",
            database_url=PROD_DB_URL,
            replace_all=True,
            confirmation_value="",
            expected_db_name="meeras",
        )


def test_validate_replace_all_safety_rejects_db_name_mismatch() -> None:
    with pytest.raises(RuntimeError, match="expected DB name mismatch"):
        _validate_replace_all_safety(
            app_env="production",
            database_url=PROD_DB_URL,
            replace_all=True,
            confirmation_value="PROD_REPLACE_ALL_OK",
            expected_db_name="wrong_db",
        )


def test_validate_replace_all_safety_allows_confirmed_production_replace_all() -> None:
    _validate_replace_all_safety(
        app_env="production",
        database_url=PROD_DB_URL,
        replace_all=True,
        confirmation_value="PROD_REPLACE_ALL_OK",
        expected_db_name="meeras",
    )

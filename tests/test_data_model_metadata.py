from __future__ import annotations

from meeras.db.models import Category, Option, Question  # noqa: F401
from meeras.db.models.base import Base


def test_catalog_tables_registered() -> None:
    assert {"categories", "questions", "options"}.issubset(set(Base.metadata.tables))


def test_order_indexes_present() -> None:
    categories_indexes = {index.name for index in Base.metadata.tables["categories"].indexes}
    assert "idx_categories_order_index" in categories_indexes

    questions_indexes = {index.name for index in Base.metadata.tables["questions"].indexes}
    assert "idx_questions_category_order" in questions_indexes

    options_indexes = {index.name for index in Base.metadata.tables["options"].indexes}
    assert "idx_options_question_order" in options_indexes


def test_child_rows_cascade_with_parent() -> None:
    questions = Base.metadata.tables["questions"]
    (question_fk,) = questions.c.category_id.foreign_keys
    assert question_fk.column.table.name == "categories"
    assert question_fk.ondelete == "CASCADE"

    options = Base.metadata.tables["options"]
    (option_fk,) = options.c.question_id.foreign_keys
    assert option_fk.column.table.name == "questions"
    assert option_fk.ondelete == "CASCADE"
    assert options.c.explanation.nullable is True
    assert options.c.is_correct.nullable is False

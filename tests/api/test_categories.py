from __future__ import annotations

from fastapi.testclient import TestClient

from meeras.main import create_app
from tests.quiz.quiz_fixtures import BASIC_SHARES_ID, FakeQuizCatalog


def test_categories_are_listed_in_order() -> None:
    client = TestClient(create_app(catalog=FakeQuizCatalog()))

    response = client.get("/v1/categories")

    assert response.status_code == 200
    categories = response.json()["categories"]
    assert [category["name"] for category in categories] == [
        "Basic Shares",
        "Residuary Heirs",
        "Coming Soon",
    ]
    assert categories[0] == {
        "id": str(BASIC_SHARES_ID),
        "name": "Basic Shares",
        "description": "Fixed shares.",
        "order_index": 0,
    }


def test_categories_fetch_failure_surfaces_message() -> None:
    catalog = FakeQuizCatalog()
    catalog.fail_on.add("categories")
    client = TestClient(create_app(catalog=catalog))

    response = client.get("/v1/categories")

    assert response.status_code == 503
    assert response.json()["detail"] == {
        "code": "E_FETCH_FAILED",
        "message": "Failed to load categories",
    }
    assert catalog.calls == ["categories"]

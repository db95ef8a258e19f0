from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from meeras.api.deps import get_quiz_catalog
from meeras.api.routes.quiz_models import CategoryListResponse, CategoryResponse
from meeras.quiz.catalog import QuizCatalog
from meeras.quiz.errors import FetchError

router = APIRouter(tags=["categories"])


@router.get("/v1/categories", response_model=CategoryListResponse)
async def list_categories(catalog: QuizCatalog = Depends(get_quiz_catalog)) -> CategoryListResponse:
    try:
        categories = await catalog.list_categories()
    except FetchError as exc:
        raise HTTPException(
            status_code=503,
            detail={"code": "E_FETCH_FAILED", "message": exc.message},
        ) from exc

    return CategoryListResponse(
        categories=[
            CategoryResponse(
                id=category.id,
                name=category.name,
                description=category.description,
                order_index=category.order_index,
            )
            for category in categories
        ]
    )

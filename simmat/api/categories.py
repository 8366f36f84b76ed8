"""POST /api/categories: parse a CLA file and report its canonical layout."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from simmat.engine.categories import parse_category_text
from simmat.engine.errors import SimMatError
from simmat.engine.grid import GridLayout
from simmat.models.requests import CategoriesRequest
from simmat.models.responses import CategoriesResponse, CategorySummary

router = APIRouter()


@router.post("/categories", response_model=CategoriesResponse)
async def categories(req: CategoriesRequest) -> CategoriesResponse:
    try:
        tree, index = parse_category_text(req.categories)
    except SimMatError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    layout = GridLayout.from_tree(tree)
    return CategoriesResponse(
        num_categories=tree.num_categories,
        num_models=index.num_models,
        categories=[
            CategorySummary(
                name=c.name,
                parent=c.parent_name,
                full_name=c.full_name,
                position=c.position,
                model_count=len(c.models),
                models=list(c.models),
            )
            for c in tree.category_order
        ],
        grid_size=layout.size,
        divider_offsets=list(layout.divider_offsets),
    )

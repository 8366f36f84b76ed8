"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"


class CategorySummary(BaseModel):
    name: str
    parent: str
    full_name: str
    position: int
    model_count: int
    models: list[str] = Field(default_factory=list)


class CategoriesResponse(BaseModel):
    num_categories: int = 0
    num_models: int = 0
    categories: list[CategorySummary] = Field(default_factory=list)
    grid_size: int = 0
    divider_offsets: list[int] = Field(default_factory=list)

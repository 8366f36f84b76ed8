"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class CategoriesRequest(BaseModel):
    categories: str = Field(..., description="CLA category file text")


class RenderRequest(BaseModel):
    categories: str = Field(..., description="CLA category file text")
    matrix: str = Field(..., description="Base64 of the little-endian float32 dissimilarity matrix")
    distance: bool = Field(default=False, description="Grayscale distance image instead of tier colours")
    paper: bool = Field(default=False, description="White background print palette")
    full_names: bool = Field(default=False, description="Label blocks with full hierarchical names")

"""Request/response schemas for categories and tags."""

from datetime import datetime

from pydantic import BaseModel, Field


class TaxonomyCreate(BaseModel):
    display_name: str = Field(..., max_length=255)
    description: str = Field(default="", max_length=10_000)


class TaxonomyUpdate(BaseModel):
    display_name: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=10_000)


class CategoryResponse(BaseModel):
    name: str = Field(..., description="Resource name, e.g. categories/3")
    id: int
    display_name: str
    slug: str
    description: str
    created_at: datetime | None
    updated_at: datetime | None


class CategoriesListResponse(BaseModel):
    categories: list[CategoryResponse]


class TagResponse(BaseModel):
    name: str = Field(..., description="Resource name, e.g. tags/7")
    id: int
    display_name: str
    slug: str
    description: str
    note_count: int = Field(..., ge=0)
    created_at: datetime | None
    updated_at: datetime | None


class TagsListResponse(BaseModel):
    tags: list[TagResponse]
    total: int

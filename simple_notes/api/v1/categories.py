"""Category endpoints. Reads are public; writes need a signed-in caller."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from simple_notes.api.v1.deps import CurrentIdentity, ResourceId
from simple_notes.api.v1.errors import to_http_error
from simple_notes.core.database import get_db
from simple_notes.core.errors import ServiceError
from simple_notes.models import Category
from simple_notes.schemas.taxonomy import (
    CategoriesListResponse,
    CategoryResponse,
    TaxonomyCreate,
    TaxonomyUpdate,
)
from simple_notes.services import categories as category_service

router = APIRouter()


def category_to_response(category: Category) -> CategoryResponse:
    return CategoryResponse(
        name=f"categories/{category.id}",
        id=category.id,
        display_name=category.name,
        slug=category.slug,
        description=category.description or "",
        created_at=category.created_at,
        updated_at=category.updated_at,
    )


@router.get("", response_model=CategoriesListResponse)
def list_categories(db: Annotated[Session, Depends(get_db)]) -> CategoriesListResponse:
    categories = category_service.list_categories(db)
    return CategoriesListResponse(categories=[category_to_response(c) for c in categories])


@router.get("/slug/{slug}", response_model=CategoryResponse)
def get_category_by_slug(slug: str, db: Annotated[Session, Depends(get_db)]) -> CategoryResponse:
    try:
        category = category_service.get_category_by_slug(db, slug)
    except ServiceError as e:
        raise to_http_error(e) from e
    return category_to_response(category)


@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(category_id: ResourceId, db: Annotated[Session, Depends(get_db)]) -> CategoryResponse:
    try:
        category = category_service.get_category(db, category_id)
    except ServiceError as e:
        raise to_http_error(e) from e
    return category_to_response(category)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    body: TaxonomyCreate,
    identity: CurrentIdentity,
    db: Annotated[Session, Depends(get_db)],
) -> CategoryResponse:
    """Create a category; the slug is derived from display_name and made unique."""
    try:
        category = category_service.create_category(
            db, identity, display_name=body.display_name, description=body.description
        )
    except ServiceError as e:
        raise to_http_error(e) from e
    return category_to_response(category)


@router.put("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: ResourceId,
    body: TaxonomyUpdate,
    identity: CurrentIdentity,
    db: Annotated[Session, Depends(get_db)],
) -> CategoryResponse:
    try:
        category = category_service.update_category(
            db,
            identity,
            category_id,
            display_name=body.display_name,
            description=body.description,
        )
    except ServiceError as e:
        raise to_http_error(e) from e
    return category_to_response(category)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: ResourceId,
    identity: CurrentIdentity,
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    """Fails with 409 while notes still belong to the category."""
    try:
        category_service.delete_category(db, identity, category_id)
    except ServiceError as e:
        raise to_http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Tag endpoints. Listing is ordered by usage; writes need a signed-in caller."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from simple_notes.api.v1.deps import CurrentIdentity, ResourceId
from simple_notes.api.v1.errors import to_http_error
from simple_notes.core.database import get_db
from simple_notes.core.errors import ServiceError
from simple_notes.models import Tag
from simple_notes.models.base import MAX_ID
from simple_notes.schemas.taxonomy import TagResponse, TagsListResponse, TaxonomyCreate, TaxonomyUpdate
from simple_notes.services import tags as tag_service

router = APIRouter()


def tag_to_response(tag: Tag, note_count: int) -> TagResponse:
    return TagResponse(
        name=f"tags/{tag.id}",
        id=tag.id,
        display_name=tag.name,
        slug=tag.slug,
        description=tag.description or "",
        note_count=note_count,
        created_at=tag.created_at,
        updated_at=tag.updated_at,
    )


def _single(db: Session, tag: Tag) -> TagResponse:
    return tag_to_response(tag, tag_service.note_counts(db, [tag.id])[tag.id])


@router.get("", response_model=TagsListResponse)
def list_tags(
    db: Annotated[Session, Depends(get_db)],
    limit: int | None = Query(None, ge=1, le=MAX_ID, description="Page size; all tags when omitted"),
    offset: int = Query(0, ge=0, le=MAX_ID),
) -> TagsListResponse:
    tags, total = tag_service.list_tags(db, limit=limit, offset=offset)
    counts = tag_service.note_counts(db, [t.id for t in tags])
    return TagsListResponse(tags=[tag_to_response(t, counts[t.id]) for t in tags], total=total)


@router.get("/slug/{slug}", response_model=TagResponse)
def get_tag_by_slug(slug: str, db: Annotated[Session, Depends(get_db)]) -> TagResponse:
    try:
        tag = tag_service.get_tag_by_slug(db, slug)
    except ServiceError as e:
        raise to_http_error(e) from e
    return _single(db, tag)


@router.get("/{tag_id}", response_model=TagResponse)
def get_tag(tag_id: ResourceId, db: Annotated[Session, Depends(get_db)]) -> TagResponse:
    try:
        tag = tag_service.get_tag(db, tag_id)
    except ServiceError as e:
        raise to_http_error(e) from e
    return _single(db, tag)


@router.post("", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
def create_tag(
    body: TaxonomyCreate,
    identity: CurrentIdentity,
    db: Annotated[Session, Depends(get_db)],
) -> TagResponse:
    try:
        tag = tag_service.create_tag(db, identity, display_name=body.display_name, description=body.description)
    except ServiceError as e:
        raise to_http_error(e) from e
    return tag_to_response(tag, 0)


@router.put("/{tag_id}", response_model=TagResponse)
def update_tag(
    tag_id: ResourceId,
    body: TaxonomyUpdate,
    identity: CurrentIdentity,
    db: Annotated[Session, Depends(get_db)],
) -> TagResponse:
    try:
        tag = tag_service.update_tag(
            db, identity, tag_id, display_name=body.display_name, description=body.description
        )
    except ServiceError as e:
        raise to_http_error(e) from e
    return _single(db, tag)


@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tag(
    tag_id: ResourceId,
    identity: CurrentIdentity,
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    """Fails with 409 while any note carries the tag."""
    try:
        tag_service.delete_tag(db, identity, tag_id)
    except ServiceError as e:
        raise to_http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)

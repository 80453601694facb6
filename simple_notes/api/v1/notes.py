"""Note endpoints: public, visibility-filtered reads and author/admin writes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from simple_notes.api.v1.deps import CurrentIdentity, ResourceId
from simple_notes.api.v1.errors import to_http_error
from simple_notes.core.database import get_db
from simple_notes.core.errors import ServiceError
from simple_notes.models import Note
from simple_notes.models.base import MAX_ID
from simple_notes.schemas.notes import NoteResponse, NotesListResponse, NoteWrite
from simple_notes.services import notes as note_service

router = APIRouter()


def note_to_response(note: Note) -> NoteResponse:
    return NoteResponse(
        name=f"notes/{note.id}",
        id=note.id,
        title=note.title,
        summary=note.summary,
        content=note.content,
        cover_image=note.cover_image or "",
        author_id=note.author_id,
        category_id=note.category_id,
        tag_ids=[tag.id for tag in note.tags],
        visibility=note.visibility,
        published=note.published,
        published_at=note.published_at,
        created_at=note.created_at,
        updated_at=note.updated_at,
    )


@router.get("", response_model=NotesListResponse)
def list_notes(
    identity: CurrentIdentity,
    db: Annotated[Session, Depends(get_db)],
    page: int = Query(1, le=MAX_ID, description="1-based page number"),
    page_size: int = Query(note_service.DEFAULT_PAGE_SIZE, description="Max 100"),
    category_id: int | None = Query(None, ge=1, le=MAX_ID),
    tag_id: int | None = Query(None, ge=1, le=MAX_ID),
    search: str = Query("", description="Substring match on the title"),
    sort_by: str = Query("published_at"),
    sort_desc: bool = Query(True),
) -> NotesListResponse:
    """
    Published notes, newest first by default.

    Anonymous callers see PUBLIC notes only; authors also see their own PRIVATE
    notes and ADMIN/HOST see everything.
    """
    try:
        result = note_service.list_notes(
            db,
            identity,
            page=page,
            page_size=page_size,
            category_id=category_id,
            tag_id=tag_id,
            search=search,
            sort_by=sort_by,
            sort_desc=sort_desc,
        )
    except ServiceError as e:
        raise to_http_error(e) from e
    return NotesListResponse(
        notes=[note_to_response(n) for n in result.notes],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
    )


@router.get("/{note_id}", response_model=NoteResponse)
def get_note(
    note_id: ResourceId,
    identity: CurrentIdentity,
    db: Annotated[Session, Depends(get_db)],
) -> NoteResponse:
    try:
        note = note_service.get_note(db, identity, note_id)
    except ServiceError as e:
        raise to_http_error(e) from e
    return note_to_response(note)


@router.post("", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
def create_note(
    body: NoteWrite,
    identity: CurrentIdentity,
    db: Annotated[Session, Depends(get_db)],
) -> NoteResponse:
    try:
        note = note_service.create_note(db, identity, body)
    except ServiceError as e:
        raise to_http_error(e) from e
    return note_to_response(note)


@router.put("/{note_id}", response_model=NoteResponse)
def update_note(
    note_id: ResourceId,
    body: NoteWrite,
    identity: CurrentIdentity,
    db: Annotated[Session, Depends(get_db)],
) -> NoteResponse:
    try:
        note = note_service.update_note(db, identity, note_id, body)
    except ServiceError as e:
        raise to_http_error(e) from e
    return note_to_response(note)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_note(
    note_id: ResourceId,
    identity: CurrentIdentity,
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    try:
        note_service.delete_note(db, identity, note_id)
    except ServiceError as e:
        raise to_http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Request/response schemas for note endpoints."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field

from simple_notes.models.base import MAX_ID
from simple_notes.models.note import NoteVisibility

RowId = Annotated[int, Field(ge=1, le=MAX_ID)]


class NoteWrite(BaseModel):
    """Body for creating or replacing a note."""

    title: str = Field(..., max_length=255)
    summary: str = Field(..., description="Short description shown in listings")
    content: str = Field(..., description="Markdown body")
    cover_image: str = Field(default="", max_length=1024)
    category_id: RowId | None = None
    tag_ids: list[RowId] = Field(default_factory=list)
    visibility: NoteVisibility = NoteVisibility.PUBLIC
    published: bool = False


class NoteResponse(BaseModel):
    name: str = Field(..., description="Resource name, e.g. notes/42")
    id: int
    title: str
    summary: str
    content: str
    cover_image: str
    author_id: int
    category_id: int | None
    tag_ids: list[int]
    visibility: NoteVisibility
    published: bool
    published_at: datetime | None
    created_at: datetime | None
    updated_at: datetime | None


class NotesListResponse(BaseModel):
    notes: list[NoteResponse]
    total: int = Field(..., ge=0, description="Readable notes matching the filters")
    page: int
    page_size: int
    total_pages: int

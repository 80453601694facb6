"""Request/response schemas for attachment endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field

from simple_notes.models.base import MAX_ID


class AttachmentResponse(BaseModel):
    """Attachment metadata; the blob itself is served by the file server."""

    name: str = Field(..., description="Resource name, e.g. attachments/7")
    id: int
    filename: str
    mime_type: str
    size: int = Field(..., ge=0)
    author_id: int
    note_id: int | None
    note: str | None = Field(default=None, description="Linked note resource name")
    external_link: str = Field(..., description="Path under /file that serves the content")
    created_at: datetime | None


class AttachmentUpdate(BaseModel):
    """Link the attachment to a note, or unlink it with null."""

    note_id: int | None = Field(..., ge=1, le=MAX_ID)


class AttachmentsListResponse(BaseModel):
    attachments: list[AttachmentResponse]
    total_size: int

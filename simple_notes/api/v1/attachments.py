"""Attachment endpoints: multipart upload, metadata reads, link/unlink, delete."""

from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status
from sqlalchemy.orm import Session

from simple_notes.api.v1.deps import CurrentIdentity, ResourceId
from simple_notes.api.v1.errors import to_http_error
from simple_notes.core.config import get_settings
from simple_notes.core.database import get_db
from simple_notes.core.errors import ServiceError
from simple_notes.models import Attachment
from simple_notes.models.base import MAX_ID
from simple_notes.schemas.attachments import (
    AttachmentResponse,
    AttachmentsListResponse,
    AttachmentUpdate,
)
from simple_notes.services import attachments as attachment_service

router = APIRouter()

FALLBACK_MIME_TYPE = "application/octet-stream"


def external_link(attachment: Attachment) -> str:
    return f"/file/attachments/{attachment.id}/{quote(attachment.filename)}"


def attachment_to_response(attachment: Attachment) -> AttachmentResponse:
    return AttachmentResponse(
        name=f"attachments/{attachment.id}",
        id=attachment.id,
        filename=attachment.filename,
        mime_type=attachment.mime_type,
        size=attachment.size,
        author_id=attachment.author_id,
        note_id=attachment.note_id,
        note=f"notes/{attachment.note_id}" if attachment.note_id is not None else None,
        external_link=external_link(attachment),
        created_at=attachment.created_at,
    )


@router.get("", response_model=AttachmentsListResponse)
def list_attachments(
    identity: CurrentIdentity,
    db: Annotated[Session, Depends(get_db)],
    note_id: int | None = Query(None, ge=1, le=MAX_ID, description="List a readable note's attachments"),
    page_size: int = Query(attachment_service.DEFAULT_LIST_SIZE, description="Max 1000"),
) -> AttachmentsListResponse:
    """
    Attachments of note_id (anyone who can read the note), or, without it, the
    caller's own uploads (sign-in required).
    """
    try:
        attachments = attachment_service.list_attachments(db, identity, note_id=note_id, page_size=page_size)
    except ServiceError as e:
        raise to_http_error(e) from e
    return AttachmentsListResponse(
        attachments=[attachment_to_response(a) for a in attachments],
        total_size=sum(a.size for a in attachments),
    )


@router.post("", response_model=AttachmentResponse, status_code=status.HTTP_201_CREATED)
async def create_attachment(
    identity: CurrentIdentity,
    db: Annotated[Session, Depends(get_db)],
    file: UploadFile = File(..., description="File content"),
    note_id: int | None = Form(None, ge=1, le=MAX_ID),
    mime_type: str | None = Form(None, description="Overrides the part's Content-Type"),
) -> AttachmentResponse:
    """Upload a file (multipart/form-data); optionally link it to a note you can edit."""
    max_bytes = get_settings().MAX_UPLOAD_BYTES
    # Read one byte past the limit so the service can reject oversized uploads.
    content = await file.read(max_bytes + 1)
    try:
        attachment = attachment_service.create_attachment(
            db,
            identity,
            filename=file.filename or "",
            mime_type=mime_type or file.content_type or FALLBACK_MIME_TYPE,
            content=content,
            note_id=note_id,
            max_bytes=max_bytes,
        )
    except ServiceError as e:
        raise to_http_error(e) from e
    return attachment_to_response(attachment)


@router.get("/{attachment_id}", response_model=AttachmentResponse)
def get_attachment(
    attachment_id: ResourceId,
    identity: CurrentIdentity,
    db: Annotated[Session, Depends(get_db)],
) -> AttachmentResponse:
    try:
        attachment = attachment_service.get_attachment(db, identity, attachment_id)
    except ServiceError as e:
        raise to_http_error(e) from e
    return attachment_to_response(attachment)


@router.patch("/{attachment_id}", response_model=AttachmentResponse)
def update_attachment(
    attachment_id: ResourceId,
    body: AttachmentUpdate,
    identity: CurrentIdentity,
    db: Annotated[Session, Depends(get_db)],
) -> AttachmentResponse:
    """Link to body.note_id, or unlink with null."""
    try:
        attachment = attachment_service.update_attachment(db, identity, attachment_id, body.note_id)
    except ServiceError as e:
        raise to_http_error(e) from e
    return attachment_to_response(attachment)


@router.delete("/{attachment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_attachment(
    attachment_id: ResourceId,
    identity: CurrentIdentity,
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    try:
        attachment_service.delete_attachment(db, identity, attachment_id)
    except ServiceError as e:
        raise to_http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Attachment upload, listing and linking, with read rules inherited from the linked note."""

import logging
import re

from sqlalchemy.orm import Session

from simple_notes.core.errors import InvalidArgument, NotFound
from simple_notes.core.identity import Identity
from simple_notes.core.permissions import (
    can_mutate,
    can_read_attachment,
    can_read_note,
    ensure_allowed,
    ensure_can_mutate,
    ensure_authenticated,
)
from simple_notes.models import Attachment, Note

logger = logging.getLogger(__name__)

MAX_FILENAME_LEN = 255
DEFAULT_LIST_SIZE = 50
MAX_LIST_SIZE = 1000
MIME_TYPE_PATTERN = re.compile(
    r"^[a-zA-Z0-9][a-zA-Z0-9!#$&\-^_.]*/[a-zA-Z0-9][a-zA-Z0-9!#$&\-^_.]*$"
)


def is_valid_filename(filename: str) -> bool:
    """A bare, local file name: no separators, no leading/trailing space or dot."""
    if not filename or len(filename) > MAX_FILENAME_LEN:
        return False
    if "/" in filename or "\\" in filename or "\x00" in filename:
        return False
    if filename[0] in " ." or filename[-1] in " .":
        return False
    return True


def is_valid_mime_type(mime_type: str) -> bool:
    return bool(MIME_TYPE_PATTERN.match(mime_type))


def _find_attachment(db: Session, attachment_id: int) -> Attachment:
    attachment = db.get(Attachment, attachment_id)
    if attachment is None:
        raise NotFound(f"attachment not found: {attachment_id}")
    return attachment


def _linked_note(db: Session, attachment: Attachment) -> Note | None:
    if attachment.note_id is None:
        return None
    return db.get(Note, attachment.note_id)


def _note_to_link(db: Session, identity: Identity, note_id: int) -> Note:
    """Only someone who may edit a note can attach files to it."""
    note = db.get(Note, note_id)
    if note is None:
        raise NotFound(f"note not found: {note_id}")
    ensure_allowed(
        can_mutate(note.author_id, identity),
        identity,
        "permission denied: cannot attach files to this note",
    )
    return note


def create_attachment(
    db: Session,
    identity: Identity | None,
    filename: str,
    mime_type: str,
    content: bytes,
    note_id: int | None = None,
    max_bytes: int = 32 * 1024 * 1024,
) -> Attachment:
    """Store an uploaded file with the caller as author, optionally linked to a note."""
    identity = ensure_authenticated(identity)
    if not filename:
        raise InvalidArgument("filename is required")
    if not is_valid_filename(filename):
        raise InvalidArgument("filename contains invalid characters")
    if not mime_type:
        raise InvalidArgument("type is required")
    if not is_valid_mime_type(mime_type):
        raise InvalidArgument("invalid MIME type format")
    if len(content) == 0:
        raise InvalidArgument("file content cannot be empty")
    if len(content) > max_bytes:
        raise InvalidArgument(f"file size exceeds the limit ({max_bytes} bytes)")
    if note_id is not None:
        _note_to_link(db, identity, note_id)

    attachment = Attachment(
        filename=filename,
        mime_type=mime_type,
        size=len(content),
        content=content,
        author_id=identity.user_id,
        note_id=note_id,
    )
    db.add(attachment)
    db.commit()
    db.refresh(attachment)
    logger.info(
        "Stored attachment id=%s size=%s note_id=%s for user id=%s",
        attachment.id,
        attachment.size,
        attachment.note_id,
        identity.user_id,
    )
    return attachment


def list_attachments(
    db: Session,
    identity: Identity | None,
    note_id: int | None = None,
    page_size: int = DEFAULT_LIST_SIZE,
) -> list[Attachment]:
    """
    Attachments of a note the caller can read, or, without note_id, the caller's own uploads.
    """
    if page_size <= 0:
        page_size = DEFAULT_LIST_SIZE
    page_size = min(page_size, MAX_LIST_SIZE)

    query = db.query(Attachment)
    if note_id is not None:
        note = db.get(Note, note_id)
        if note is None:
            raise NotFound(f"note not found: {note_id}")
        ensure_allowed(can_read_note(note, identity), identity)
        query = query.filter(Attachment.note_id == note.id)
    else:
        identity = ensure_authenticated(identity)
        query = query.filter(Attachment.author_id == identity.user_id)
    return query.order_by(Attachment.id.desc()).limit(page_size).all()


def get_attachment(db: Session, identity: Identity | None, attachment_id: int) -> Attachment:
    """Return the attachment if the caller may read it (the blob column stays deferred)."""
    attachment = _find_attachment(db, attachment_id)
    note = _linked_note(db, attachment)
    ensure_allowed(can_read_attachment(attachment.author_id, note, identity), identity)
    return attachment


def update_attachment(
    db: Session,
    identity: Identity | None,
    attachment_id: int,
    note_id: int | None,
) -> Attachment:
    """Link to note_id, or unlink when it is None."""
    identity = ensure_authenticated(identity)
    attachment = _find_attachment(db, attachment_id)
    ensure_can_mutate(attachment.author_id, identity)
    if note_id is not None:
        _note_to_link(db, identity, note_id)
    attachment.note_id = note_id
    db.commit()
    db.refresh(attachment)
    return attachment


def delete_attachment(db: Session, identity: Identity | None, attachment_id: int) -> None:
    identity = ensure_authenticated(identity)
    attachment = _find_attachment(db, attachment_id)
    ensure_can_mutate(attachment.author_id, identity)
    db.delete(attachment)
    db.commit()
    logger.info("Deleted attachment id=%s by user id=%s", attachment_id, identity.user_id)

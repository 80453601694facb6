"""Note listing and CRUD with visibility and ownership checks."""

import logging
import math
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from simple_notes.core.errors import InvalidArgument, NotFound
from simple_notes.core.identity import Identity
from simple_notes.core.permissions import (
    can_mutate,
    can_read_note,
    ensure_allowed,
    ensure_can_read,
    ensure_authenticated,
    readable_notes_clause,
)
from simple_notes.models import Attachment, Category, Note, Tag, note_tags
from simple_notes.models.base import MAX_ID
from simple_notes.schemas.notes import NoteWrite

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
SORTABLE_COLUMNS = {
    "published_at": Note.published_at,
    "created_at": Note.created_at,
    "updated_at": Note.updated_at,
    "title": Note.title,
}


@dataclass
class NotePage:
    notes: list[Note]
    total: int
    page: int
    page_size: int
    total_pages: int


def list_notes(
    db: Session,
    identity: Identity | None,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    category_id: int | None = None,
    tag_id: int | None = None,
    search: str = "",
    sort_by: str = "",
    sort_desc: bool = True,
) -> NotePage:
    """
    Published notes the caller may read, paginated.

    PRIVATE notes appear only for their author and for ADMIN/HOST callers; total
    counts the readable notes so pagination never reveals hidden ones.
    """
    page = min(page, MAX_ID) if page > 0 else 1
    if page_size <= 0:
        page_size = DEFAULT_PAGE_SIZE
    page_size = min(page_size, MAX_PAGE_SIZE)

    sort_column = SORTABLE_COLUMNS.get(sort_by or "published_at")
    if sort_column is None:
        raise InvalidArgument(
            f"sort_by must be one of: {', '.join(sorted(SORTABLE_COLUMNS))}"
        )

    query = db.query(Note).filter(Note.published.is_(True), readable_notes_clause(identity))
    if category_id is not None:
        query = query.filter(Note.category_id == category_id)
    if tag_id is not None:
        query = query.filter(
            Note.id.in_(db.query(note_tags.c.note_id).filter(note_tags.c.tag_id == tag_id))
        )
    if search:
        query = query.filter(Note.title.contains(search, autoescape=True))

    total = query.with_entities(func.count(Note.id)).scalar() or 0
    order = sort_column.desc() if sort_desc else sort_column.asc()
    rows = (
        query.order_by(order, Note.id.desc() if sort_desc else Note.id.asc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    notes = [note for note in rows if can_read_note(note, identity)]
    return NotePage(
        notes=notes,
        total=total,
        page=page,
        page_size=page_size,
        total_pages=max(1, math.ceil(total / page_size)),
    )


def _find_note(db: Session, note_id: int) -> Note:
    note = db.get(Note, note_id)
    if note is None:
        raise NotFound(f"note not found: {note_id}")
    return note


def get_note(db: Session, identity: Identity | None, note_id: int) -> Note:
    note = _find_note(db, note_id)
    ensure_can_read(note.visibility, note.author_id, identity, "permission denied: cannot read this note")
    return note


def _validated_relations(db: Session, data: NoteWrite) -> list[Tag]:
    """Check required text fields and referenced category/tags; return the tags."""
    if not data.title.strip():
        raise InvalidArgument("title is required")
    if not data.summary.strip():
        raise InvalidArgument("summary is required")
    if not data.content.strip():
        raise InvalidArgument("content is required")
    if data.category_id is not None and db.get(Category, data.category_id) is None:
        raise InvalidArgument(f"category not found: {data.category_id}")

    tag_ids = list(dict.fromkeys(data.tag_ids))
    if not tag_ids:
        return []
    tags = db.query(Tag).filter(Tag.id.in_(tag_ids)).all()
    missing = sorted(set(tag_ids) - {tag.id for tag in tags})
    if missing:
        raise InvalidArgument(f"tag not found: {', '.join(str(t) for t in missing)}")
    return sorted(tags, key=lambda tag: tag.id)


def create_note(db: Session, identity: Identity | None, data: NoteWrite) -> Note:
    """The caller becomes the author; a published note gets published_at now."""
    identity = ensure_authenticated(identity)
    tags = _validated_relations(db, data)
    note = Note(
        title=data.title,
        summary=data.summary,
        content=data.content,
        cover_image=data.cover_image,
        author_id=identity.user_id,
        category_id=data.category_id,
        visibility=data.visibility,
        published=data.published,
        published_at=datetime.now(UTC) if data.published else None,
    )
    note.tags = tags
    db.add(note)
    db.commit()
    db.refresh(note)
    return note


def update_note(db: Session, identity: Identity | None, note_id: int, data: NoteWrite) -> Note:
    """
    Replace a note's editable fields. Author or ADMIN/HOST only.

    published_at is stamped only on a false -> true transition of published.
    """
    identity = ensure_authenticated(identity)
    note = _find_note(db, note_id)
    allowed = can_mutate(note.author_id, identity)
    if not allowed:
        logger.info("Denied update of note id=%s for user id=%s", note.id, identity.user_id)
    ensure_allowed(
        allowed,
        identity,
        "permission denied: only author or admin can update note",
    )
    tags = _validated_relations(db, data)

    if not note.published and data.published:
        note.published_at = datetime.now(UTC)
    note.title = data.title
    note.summary = data.summary
    note.content = data.content
    note.cover_image = data.cover_image
    note.category_id = data.category_id
    note.visibility = data.visibility
    note.published = data.published
    note.tags = tags
    db.commit()
    db.refresh(note)
    return note


def delete_note(db: Session, identity: Identity | None, note_id: int) -> None:
    """Delete a note; its attachments become unlinked (readable by their uploader only)."""
    identity = ensure_authenticated(identity)
    note = _find_note(db, note_id)
    allowed = can_mutate(note.author_id, identity)
    if not allowed:
        logger.info("Denied delete of note id=%s for user id=%s", note.id, identity.user_id)
    ensure_allowed(
        allowed,
        identity,
        "permission denied: only author or admin can delete note",
    )
    unlinked = (
        db.query(Attachment)
        .filter(Attachment.note_id == note.id)
        .update({Attachment.note_id: None}, synchronize_session=False)
    )
    note.tags = []
    db.delete(note)
    db.commit()
    logger.info(
        "Deleted note id=%s by user id=%s (attachments unlinked=%s)",
        note_id,
        identity.user_id,
        unlinked,
    )

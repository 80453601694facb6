"""Tag CRUD. Reads are public; writes need an authenticated caller."""

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from simple_notes.core.errors import FailedPrecondition, InvalidArgument, NotFound
from simple_notes.core.identity import Identity
from simple_notes.core.permissions import ensure_authenticated
from simple_notes.models import Tag, note_tags
from simple_notes.models.base import MAX_ID
from simple_notes.services.slugs import unique_slug

logger = logging.getLogger(__name__)


def note_counts(db: Session, tag_ids: list[int]) -> dict[int, int]:
    """Number of notes carrying each tag (missing ids map to 0)."""
    if not tag_ids:
        return {}
    rows = db.execute(
        select(note_tags.c.tag_id, func.count(note_tags.c.note_id))
        .where(note_tags.c.tag_id.in_(tag_ids))
        .group_by(note_tags.c.tag_id)
    ).all()
    counts = {tag_id: 0 for tag_id in tag_ids}
    counts.update({tag_id: count for tag_id, count in rows})
    return counts


def list_tags(db: Session, limit: int | None = None, offset: int = 0) -> tuple[list[Tag], int]:
    """Most used tags first, then by name; returns (page, total)."""
    total = db.query(func.count(Tag.id)).scalar() or 0
    usage = (
        select(note_tags.c.tag_id, func.count(note_tags.c.note_id).label("uses"))
        .group_by(note_tags.c.tag_id)
        .subquery()
    )
    query = (
        db.query(Tag)
        .outerjoin(usage, usage.c.tag_id == Tag.id)
        .order_by(func.coalesce(usage.c.uses, 0).desc(), Tag.name.asc(), Tag.id.asc())
    )
    if limit is not None and limit > 0:
        query = query.limit(min(limit, MAX_ID)).offset(min(max(offset, 0), MAX_ID))
    return query.all(), total


def get_tag(db: Session, tag_id: int) -> Tag:
    tag = db.get(Tag, tag_id)
    if tag is None:
        raise NotFound(f"tag not found: {tag_id}")
    return tag


def get_tag_by_slug(db: Session, slug: str) -> Tag:
    if not slug:
        raise InvalidArgument("slug is required")
    tag = db.query(Tag).filter(Tag.slug == slug).first()
    if tag is None:
        raise NotFound(f"tag not found with slug: {slug}")
    return tag


def create_tag(db: Session, identity: Identity | None, display_name: str, description: str = "") -> Tag:
    ensure_authenticated(identity)
    if not display_name.strip():
        raise InvalidArgument("tag name is required")
    tag = Tag(
        name=display_name.strip(),
        slug=unique_slug(db, Tag, display_name, fallback="tag"),
        description=description,
    )
    db.add(tag)
    db.commit()
    db.refresh(tag)
    return tag


def update_tag(
    db: Session,
    identity: Identity | None,
    tag_id: int,
    display_name: str | None = None,
    description: str | None = None,
) -> Tag:
    ensure_authenticated(identity)
    tag = get_tag(db, tag_id)
    if display_name is not None:
        if not display_name.strip():
            raise InvalidArgument("tag name is required")
        tag.name = display_name.strip()
        tag.slug = unique_slug(db, Tag, display_name, fallback="tag", exclude_id=tag.id)
    if description is not None:
        tag.description = description
    db.commit()
    db.refresh(tag)
    return tag


def delete_tag(db: Session, identity: Identity | None, tag_id: int) -> None:
    """Refuses while any note still carries the tag."""
    identity = ensure_authenticated(identity)
    tag = get_tag(db, tag_id)
    in_use = note_counts(db, [tag.id])[tag.id]
    if in_use:
        raise FailedPrecondition(f"cannot delete tag: tag has {in_use} note(s)")
    db.delete(tag)
    db.commit()
    logger.info("Deleted tag id=%s by user id=%s", tag_id, identity.user_id)

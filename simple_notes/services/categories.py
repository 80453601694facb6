"""Category CRUD. Reads are public; writes need an authenticated caller."""

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from simple_notes.core.errors import FailedPrecondition, InvalidArgument, NotFound
from simple_notes.core.identity import Identity
from simple_notes.core.permissions import ensure_authenticated
from simple_notes.models import Category, Note
from simple_notes.services.slugs import unique_slug

logger = logging.getLogger(__name__)


def list_categories(db: Session) -> list[Category]:
    return db.query(Category).order_by(Category.name, Category.id).all()


def get_category(db: Session, category_id: int) -> Category:
    category = db.get(Category, category_id)
    if category is None:
        raise NotFound(f"category not found: {category_id}")
    return category


def get_category_by_slug(db: Session, slug: str) -> Category:
    if not slug:
        raise InvalidArgument("slug is required")
    category = db.query(Category).filter(Category.slug == slug).first()
    if category is None:
        raise NotFound(f"category not found with slug: {slug}")
    return category


def create_category(
    db: Session,
    identity: Identity | None,
    display_name: str,
    description: str = "",
) -> Category:
    ensure_authenticated(identity)
    if not display_name.strip():
        raise InvalidArgument("category name is required")
    category = Category(
        name=display_name.strip(),
        slug=unique_slug(db, Category, display_name, fallback="category"),
        description=description,
    )
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def update_category(
    db: Session,
    identity: Identity | None,
    category_id: int,
    display_name: str | None = None,
    description: str | None = None,
) -> Category:
    ensure_authenticated(identity)
    category = get_category(db, category_id)
    if display_name is not None:
        if not display_name.strip():
            raise InvalidArgument("category name is required")
        category.name = display_name.strip()
        category.slug = unique_slug(db, Category, display_name, fallback="category", exclude_id=category.id)
    if description is not None:
        category.description = description
    db.commit()
    db.refresh(category)
    return category


def delete_category(db: Session, identity: Identity | None, category_id: int) -> None:
    """Refuses while any note still belongs to the category."""
    identity = ensure_authenticated(identity)
    category = get_category(db, category_id)
    note_count = (
        db.query(func.count(Note.id)).filter(Note.category_id == category.id).scalar() or 0
    )
    if note_count:
        raise FailedPrecondition(f"cannot delete category: category has {note_count} note(s)")
    db.delete(category)
    db.commit()
    logger.info("Deleted category id=%s by user id=%s", category_id, identity.user_id)

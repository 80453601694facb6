"""URL slugs for categories and tags."""

import re

from sqlalchemy.orm import Session

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9-]+")
_DASH_RUNS = re.compile(r"-{2,}")


def slugify(name: str, fallback: str) -> str:
    """Lowercase, spaces to dashes, keep [a-z0-9-]; fallback if nothing is left."""
    slug = name.strip().lower().replace(" ", "-")
    slug = _NON_SLUG_CHARS.sub("", slug)
    slug = _DASH_RUNS.sub("-", slug).strip("-")
    return slug or fallback


def unique_slug(db: Session, model: type, name: str, fallback: str, exclude_id: int | None = None) -> str:
    """slugify(name), suffixed with -2, -3, ... until no other row of model uses it."""
    base = slugify(name, fallback)
    candidate = base
    suffix = 2
    while True:
        query = db.query(model.id).filter(model.slug == candidate)
        if exclude_id is not None:
            query = query.filter(model.id != exclude_id)
        if query.first() is None:
            return candidate
        candidate = f"{base}-{suffix}"
        suffix += 1

"""SQLAlchemy ORM models."""

from simple_notes.models.attachment import Attachment
from simple_notes.models.base import Base
from simple_notes.models.category import Category
from simple_notes.models.note import Note, NoteVisibility, note_tags
from simple_notes.models.tag import Tag
from simple_notes.models.user import User, UserRole

__all__ = [
    "Attachment",
    "Base",
    "Category",
    "Note",
    "NoteVisibility",
    "Tag",
    "User",
    "UserRole",
    "note_tags",
]

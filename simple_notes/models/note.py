"""ORM model for notes and the note/tag association."""

import enum

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import relationship

from simple_notes.models.base import Base, TimestampMixin


class NoteVisibility(str, enum.Enum):
    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"


note_tags = Table(
    "note_tags",
    Base.metadata,
    Column("note_id", ForeignKey("notes.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Note(TimestampMixin, Base):
    """
    A note owned by its author.

    Readable according to visibility; mutable by the author or an ADMIN/HOST.
    published_at is set once, when published flips from false to true.
    """

    __tablename__ = "notes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    summary = Column(Text, nullable=False, default="")
    content = Column(Text, nullable=False, default="")
    cover_image = Column(String(1024), nullable=False, default="")
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    category_id = Column(
        Integer,
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    visibility = Column(
        Enum(NoteVisibility, name="note_visibility", native_enum=False, length=16),
        nullable=False,
        default=NoteVisibility.PUBLIC,
    )
    published = Column(Boolean, nullable=False, default=False)
    published_at = Column(DateTime(timezone=True), nullable=True)

    tags = relationship("Tag", secondary=note_tags, lazy="selectin", order_by="Tag.id")

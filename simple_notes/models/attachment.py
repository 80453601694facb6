"""ORM model for uploaded file attachments (content stored as a blob)."""

from sqlalchemy import BigInteger, Column, ForeignKey, Integer, LargeBinary, String
from sqlalchemy.orm import deferred

from simple_notes.models.base import Base, TimestampMixin


class Attachment(TimestampMixin, Base):
    """
    File uploaded by author_id; optionally linked to a single note.

    Read access follows the linked note, or only the author when unlinked.
    """

    __tablename__ = "attachments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    filename = Column(String(255), nullable=False)
    mime_type = Column(String(255), nullable=False)
    size = Column(BigInteger, nullable=False)
    content = deferred(Column(LargeBinary, nullable=False))
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    note_id = Column(
        Integer,
        ForeignKey("notes.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

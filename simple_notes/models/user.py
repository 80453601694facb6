"""ORM model for application users (credentials and roles)."""

import enum

from sqlalchemy import Column, DateTime, Enum, Integer, String, Text

from simple_notes.models.base import Base, TimestampMixin


class UserRole(str, enum.Enum):
    """HOST is the first registered user; ADMIN and HOST are privileged."""

    HOST = "HOST"
    ADMIN = "ADMIN"
    USER = "USER"


class User(TimestampMixin, Base):
    """
    User account for JWT authentication and ownership checks.

    Never hard-deleted: deleted_at marks a soft delete and hides the row from lookups.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    nickname = Column(String(255), nullable=False, default="")
    avatar = Column(String(1024), nullable=False, default="")
    bio = Column(Text, nullable=False, default="")
    role = Column(
        Enum(UserRole, name="user_role", native_enum=False, length=16),
        nullable=False,
        default=UserRole.USER,
    )
    deleted_at = Column(DateTime(timezone=True), nullable=True)

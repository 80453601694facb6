"""User registration, login and profile management."""

import logging
from datetime import UTC, datetime

from sqlalchemy import func, text
from sqlalchemy.orm import Session

from simple_notes.core.errors import (
    AlreadyExists,
    InvalidArgument,
    InvalidCredentials,
    NotFound,
    PermissionDenied,
)
from simple_notes.core.identity import Identity
from simple_notes.core.permissions import (
    can_change_role,
    can_mutate,
    ensure_allowed,
    ensure_authenticated,
)
from simple_notes.core.security import (
    hash_password,
    validate_password,
    validate_username,
    verify_password,
)
from simple_notes.models.user import User, UserRole

logger = logging.getLogger(__name__)


def find_user_by_id(db: Session, user_id: int) -> User | None:
    """Active (not soft-deleted) user by id."""
    return (
        db.query(User)
        .filter(User.id == user_id, User.deleted_at.is_(None))
        .first()
    )


def find_user_by_username(db: Session, username: str) -> User | None:
    """Active (not soft-deleted) user by username."""
    return (
        db.query(User)
        .filter(User.username == username, User.deleted_at.is_(None))
        .first()
    )


def _username_taken(db: Session, username: str) -> bool:
    # Soft-deleted rows keep their username because the column is unique.
    return db.query(User.id).filter(User.username == username).first() is not None


def role_for_new_user(db: Session, exclude_id: int | None = None) -> UserRole:
    """HOST for the very first account in the store, USER afterwards."""
    query = db.query(func.count(User.id))
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    user_count = query.scalar() or 0
    return UserRole.HOST if user_count == 0 else UserRole.USER


def _serialize_registrations(db: Session) -> None:
    # SHARE ROW EXCLUSIVE conflicts with itself, so concurrent registrations queue
    # until the holder commits. SQLite gets the same effect from its write lock.
    if db.get_bind().dialect.name == "postgresql":
        db.execute(text("LOCK TABLE users IN SHARE ROW EXCLUSIVE MODE"))


def save_new_user(db: Session, user: User, role: UserRole | None = None) -> User:
    """
    Insert a new account and commit it.

    Without an explicit role the account becomes HOST only if no other user row
    exists. The row is written before counting, so of two simultaneous first
    registrations the later one always sees the earlier one.
    """
    _serialize_registrations(db)
    user.role = role or UserRole.USER
    db.add(user)
    db.flush()
    if role is None:
        user.role = role_for_new_user(db, exclude_id=user.id)
    db.commit()
    db.refresh(user)
    return user


def register_user(
    db: Session,
    username: str,
    password: str,
    nickname: str = "",
    avatar: str = "",
    bio: str = "",
) -> User:
    """Create an account. The first registered user becomes HOST."""
    for error in (validate_username(username), validate_password(password)):
        if error:
            raise InvalidArgument(error)
    if _username_taken(db, username):
        raise AlreadyExists("user with this username already exists")

    user = User(
        username=username,
        password_hash=hash_password(password),
        nickname=nickname,
        avatar=avatar,
        bio=bio,
    )
    save_new_user(db, user)
    logger.info("Registered user id=%s username=%s role=%s", user.id, user.username, user.role.value)
    return user


def authenticate_user(db: Session, username: str, password: str) -> User:
    """Return the user whose credentials match; InvalidCredentials otherwise."""
    if not username.strip() or not password.strip():
        raise InvalidArgument("username and password are required")
    user = find_user_by_username(db, username)
    if user is None or not verify_password(password, user.password_hash):
        raise InvalidCredentials()
    return user


def get_user(db: Session, user_id: int) -> User:
    user = find_user_by_id(db, user_id)
    if user is None:
        raise NotFound(f"user not found: {user_id}")
    return user


def get_current_user(db: Session, identity: Identity | None) -> User:
    identity = ensure_authenticated(identity)
    return get_user(db, identity.user_id)


def list_users(db: Session, identity: Identity | None) -> list[User]:
    ensure_authenticated(identity)
    return (
        db.query(User)
        .filter(User.deleted_at.is_(None))
        .order_by(User.id)
        .all()
    )


def update_user(
    db: Session,
    identity: Identity | None,
    user_id: int,
    *,
    username: str | None = None,
    nickname: str | None = None,
    avatar: str | None = None,
    bio: str | None = None,
    role: UserRole | None = None,
) -> User:
    """
    Update a profile. Callers may edit themselves; ADMIN/HOST may edit anyone.

    A role change is accepted only from an ADMIN/HOST caller, so a USER cannot
    promote itself through its own profile update.
    """
    user = get_user(db, user_id)
    ensure_allowed(can_mutate(user.id, identity), identity, "permission denied: cannot update this user")

    if role is not None and role != user.role:
        if not can_change_role(identity):
            logger.info("Rejected role change for user id=%s by user id=%s", user.id, identity.user_id)
            raise PermissionDenied("permission denied: only ADMIN or HOST can change roles")
        user.role = role

    if username is not None and username != user.username:
        error = validate_username(username)
        if error:
            raise InvalidArgument(error)
        if _username_taken(db, username):
            raise AlreadyExists("user with this username already exists")
        user.username = username
    if nickname is not None:
        user.nickname = nickname
    if avatar is not None:
        user.avatar = avatar
    if bio is not None:
        user.bio = bio

    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, identity: Identity | None, user_id: int) -> None:
    """Soft-delete: the row stays, lookups and logins stop seeing it."""
    user = get_user(db, user_id)
    ensure_allowed(can_mutate(user.id, identity), identity, "permission denied: cannot delete this user")
    user.deleted_at = datetime.now(UTC)
    db.commit()
    logger.info("Soft-deleted user id=%s by user id=%s", user.id, identity.user_id)

"""Read and mutation rules for notes and attachments."""

from sqlalchemy import or_, true

from simple_notes.core.errors import AuthenticationRequired, PermissionDenied
from simple_notes.core.identity import Identity
from simple_notes.models.note import Note, NoteVisibility


def _owns_or_privileged(author_id: int, identity: Identity | None) -> bool:
    if identity is None:
        return False
    return identity.user_id == author_id or identity.is_privileged


def can_read(
    visibility: NoteVisibility,
    author_id: int,
    identity: Identity | None,
) -> bool:
    """PUBLIC is readable by anyone; anything else only by its author or ADMIN/HOST."""
    if visibility == NoteVisibility.PUBLIC:
        return True
    return _owns_or_privileged(author_id, identity)


def can_mutate(author_id: int, identity: Identity | None) -> bool:
    """Update/delete needs the author or ADMIN/HOST; visibility is not consulted."""
    return _owns_or_privileged(author_id, identity)


def can_read_note(note: Note, identity: Identity | None) -> bool:
    return can_read(note.visibility, note.author_id, identity)


def can_read_attachment(
    attachment_author_id: int,
    note: Note | None,
    identity: Identity | None,
) -> bool:
    """
    A linked attachment follows its note's read rule.

    An unlinked one is readable only by its uploader; ADMIN/HOST get no override here.
    """
    if note is not None:
        return can_read_note(note, identity)
    return identity is not None and identity.user_id == attachment_author_id


def can_change_role(identity: Identity | None) -> bool:
    return identity is not None and identity.is_privileged


def ensure_authenticated(identity: Identity | None) -> Identity:
    if identity is None:
        raise AuthenticationRequired()
    return identity


def ensure_allowed(allowed: bool, identity: Identity | None, message: str = "permission denied") -> None:
    """Raise AuthenticationRequired (no identity) or PermissionDenied (identity, but refused)."""
    if allowed:
        return
    if identity is None:
        raise AuthenticationRequired()
    raise PermissionDenied(message)


def readable_notes_clause(identity: Identity | None):
    """SQL filter selecting exactly the notes can_read_note allows for identity."""
    if identity is not None and identity.is_privileged:
        return true()
    if identity is None:
        return Note.visibility == NoteVisibility.PUBLIC
    return or_(Note.visibility == NoteVisibility.PUBLIC, Note.author_id == identity.user_id)


def ensure_can_read(
    visibility: NoteVisibility,
    author_id: int,
    identity: Identity | None,
    message: str = "permission denied",
) -> None:
    ensure_allowed(can_read(visibility, author_id, identity), identity, message)


def ensure_can_mutate(author_id: int, identity: Identity | None, message: str = "permission denied") -> None:
    ensure_allowed(can_mutate(author_id, identity), identity, message)

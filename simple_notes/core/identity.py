"""Resolve the caller's identity from an Authorization header, without a database lookup."""

from dataclasses import dataclass
from datetime import datetime

from simple_notes.core.tokens import TokenError, decode_access_token
from simple_notes.models.base import MAX_ID
from simple_notes.models.user import UserRole

# Route names reachable without an identity: registration, login, public reads.
PUBLIC_ENDPOINTS = frozenset(
    {
        "register_user",
        "login_user",
        "list_notes",
        "get_note",
        "list_categories",
        "get_category",
        "get_category_by_slug",
        "list_tags",
        "get_tag",
        "get_tag_by_slug",
        "list_attachments",
        "get_health",
    }
)


@dataclass(frozen=True)
class Identity:
    """Authenticated caller for the duration of one request."""

    user_id: int
    username: str
    role: UserRole

    @property
    def is_privileged(self) -> bool:
        return self.role in (UserRole.ADMIN, UserRole.HOST)


def extract_bearer_token(authorization_header: str | None) -> str | None:
    """Return the token from 'Bearer <token>', or None if the header has another shape."""
    if not authorization_header:
        return None
    parts = authorization_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


def resolve_identity(
    authorization_header: str | None,
    secret: str | bytes,
    now: datetime | None = None,
) -> Identity | None:
    """Decode the bearer token into an Identity; any failure yields None."""
    token = extract_bearer_token(authorization_header)
    if token is None:
        return None
    try:
        claims = decode_access_token(token, secret, now=now)
    except TokenError:
        return None
    try:
        user_id = int(claims.subject)
    except ValueError:
        return None
    if not 1 <= user_id <= MAX_ID:
        return None
    return Identity(user_id=user_id, username=claims.username, role=claims.role)


@dataclass(frozen=True)
class IdentityResolver:
    """Signing secret plus the allowlist of endpoints that accept anonymous callers."""

    secret: str | bytes
    public_endpoints: frozenset[str] = PUBLIC_ENDPOINTS

    def resolve(self, authorization_header: str | None, now: datetime | None = None) -> Identity | None:
        return resolve_identity(authorization_header, self.secret, now=now)

    def is_public(self, endpoint_name: str | None) -> bool:
        return endpoint_name is not None and endpoint_name in self.public_endpoints

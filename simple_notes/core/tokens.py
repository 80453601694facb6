"""Stateless access tokens: HS256 JWTs carrying user id, username and role."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt.utils import base64url_decode, base64url_encode

from simple_notes.models.user import UserRole

ISSUER = "simple-notes"
KEY_ID = "v1"
ACCESS_TOKEN_AUDIENCE = "user.access-token"
ACCESS_TOKEN_TYPE = "access"
ACCESS_TOKEN_DURATION = timedelta(hours=24)
ALGORITHM = "HS256"


class TokenError(Exception):
    """Base class for access token validation failures."""


class BadSignatureError(TokenError):
    pass


class BadKeyIdError(TokenError):
    pass


class BadIssuerError(TokenError):
    pass


class BadAudienceError(TokenError):
    pass


class ExpiredTokenError(TokenError):
    pass


class WrongTokenTypeError(TokenError):
    pass


class MalformedTokenError(TokenError):
    pass


@dataclass(frozen=True)
class AccessTokenClaims:
    subject: str
    username: str
    role: UserRole
    issued_at: datetime
    expires_at: datetime


def _as_secret(secret: str | bytes) -> bytes:
    return secret.encode("utf-8") if isinstance(secret, str) else secret


def encode_access_token(
    user_id: int,
    username: str,
    role: UserRole | str,
    secret: str | bytes,
    now: datetime | None = None,
    duration: timedelta = ACCESS_TOKEN_DURATION,
) -> tuple[str, datetime]:
    """Sign an access token for the given user; return (token, expires_at)."""
    issued_at = now or datetime.now(UTC)
    expires_at = issued_at + duration
    payload: dict[str, Any] = {
        "type": ACCESS_TOKEN_TYPE,
        "role": UserRole(role).value,
        "username": username,
        "iss": ISSUER,
        "aud": ACCESS_TOKEN_AUDIENCE,
        "sub": str(user_id),
        "iat": issued_at,
        "exp": expires_at,
    }
    token = jwt.encode(
        payload,
        _as_secret(secret),
        algorithm=ALGORITHM,
        headers={"kid": KEY_ID},
    )
    return token, expires_at


def decode_access_token(
    token: str,
    secret: str | bytes,
    now: datetime | None = None,
) -> AccessTokenClaims:
    """
    Verify an access token and return its claims.

    Raises a TokenError subclass naming the first check that failed. Only HS256
    is accepted, so a token signed with any other algorithm fails as a bad signature.
    """
    # The header is read without the signature so a damaged signature is never
    # reported as a malformed token.
    signing_input, _, signature_segment = token.rpartition(".")
    try:
        header = jwt.get_unverified_header(f"{signing_input}.")
    except jwt.DecodeError as e:
        raise MalformedTokenError(str(e)) from e
    if header.get("alg") != ALGORITHM:
        raise BadSignatureError(f"unexpected signing method: {header.get('alg')}")

    # Changes confined to the unused low bits of the final character still count.
    try:
        signature = base64url_decode(signature_segment)
    except ValueError as e:
        raise BadSignatureError(f"undecodable signature: {e}") from e
    if base64url_encode(signature).decode("ascii") != signature_segment:
        raise BadSignatureError("signature is not canonically encoded")

    try:
        # Expiry is checked below against the caller's clock.
        payload = jwt.decode(
            token,
            _as_secret(secret),
            algorithms=[ALGORITHM],
            audience=ACCESS_TOKEN_AUDIENCE,
            issuer=ISSUER,
            options={
                "verify_exp": False,
                "verify_iat": False,
                "verify_nbf": False,
                "require": ["exp", "iat", "sub", "iss", "aud"],
            },
        )
    except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as e:
        raise BadSignatureError(str(e)) from e
    except jwt.InvalidIssuerError as e:
        raise BadIssuerError(str(e)) from e
    except jwt.InvalidAudienceError as e:
        raise BadAudienceError(str(e)) from e
    except jwt.InvalidTokenError as e:
        raise MalformedTokenError(str(e)) from e

    if header.get("kid") != KEY_ID:
        raise BadKeyIdError(f"unexpected kid: {header.get('kid')}")

    current = now or datetime.now(UTC)
    try:
        expires_at = datetime.fromtimestamp(int(payload["exp"]), UTC)
        issued_at = datetime.fromtimestamp(int(payload["iat"]), UTC)
    except (TypeError, ValueError, OverflowError) as e:
        raise MalformedTokenError("invalid exp or iat claim") from e
    if current >= expires_at:
        raise ExpiredTokenError("token has expired")

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise WrongTokenTypeError("invalid token type: expected access token")

    try:
        role = UserRole(payload.get("role"))
    except ValueError as e:
        raise MalformedTokenError(f"unknown role: {payload.get('role')}") from e

    return AccessTokenClaims(
        subject=str(payload["sub"]),
        username=str(payload.get("username", "")),
        role=role,
        issued_at=issued_at,
        expires_at=expires_at,
    )

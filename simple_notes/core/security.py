"""Password hashing and credential validation rules."""

import re

import bcrypt

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 50
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128


def validate_username(username: str) -> str | None:
    """Return an error message if the username is not acceptable, else None."""
    if not username or not username.strip():
        return "username is required"
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        return f"username must be between {USERNAME_MIN_LEN} and {USERNAME_MAX_LEN} characters"
    if not USERNAME_PATTERN.match(username):
        return "username can only contain alphanumeric characters, underscores, and hyphens"
    return None


def validate_password(password: str) -> str | None:
    """Return an error message if the password is not acceptable, else None."""
    if not password or not password.strip():
        return "password is required"
    if not (PASSWORD_MIN_LEN <= len(password) <= PASSWORD_MAX_LEN):
        return f"password must be between {PASSWORD_MIN_LEN} and {PASSWORD_MAX_LEN} characters"
    return None


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False

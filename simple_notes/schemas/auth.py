"""Request/response schemas for registration, login and user endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field

from simple_notes.models.user import UserRole


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(..., max_length=255, description="Username")
    password: str = Field(..., max_length=1024, description="Password")


class RegisterRequest(BaseModel):
    """New account; the first account ever registered becomes HOST."""

    username: str = Field(..., max_length=255, description="3-50 chars of letters, digits, _ and -")
    password: str = Field(..., max_length=1024, description="6-128 chars")
    nickname: str = Field(default="", max_length=255)
    avatar: str = Field(default="", max_length=1024)
    bio: str = Field(default="", max_length=10_000)


class UserResponse(BaseModel):
    """Public view of a user (never includes the password hash)."""

    name: str = Field(..., description="Resource name, e.g. users/1")
    id: int
    username: str
    nickname: str
    avatar: str
    bio: str
    role: UserRole
    created_at: datetime | None = None
    updated_at: datetime | None = None


class LoginResponse(BaseModel):
    """Access token returned after successful login."""

    user: UserResponse
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_at: datetime = Field(..., description="When the access token stops being accepted")


class UserUpdateRequest(BaseModel):
    """Partial profile update. role is honoured only for ADMIN/HOST callers."""

    username: str | None = Field(default=None, max_length=255)
    nickname: str | None = Field(default=None, max_length=255)
    avatar: str | None = Field(default=None, max_length=1024)
    bio: str | None = Field(default=None, max_length=10_000)
    role: UserRole | None = None


class UsersListResponse(BaseModel):
    users: list[UserResponse]
    total: int

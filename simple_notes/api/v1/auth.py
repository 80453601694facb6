"""Login and current-user endpoints."""

from datetime import timedelta
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from simple_notes.api.v1.deps import CurrentIdentity, get_identity_resolver
from simple_notes.api.v1.errors import to_http_error
from simple_notes.api.v1.users import user_to_response
from simple_notes.core.config import get_settings
from simple_notes.core.database import get_db
from simple_notes.core.errors import ServiceError
from simple_notes.core.identity import IdentityResolver
from simple_notes.core.tokens import encode_access_token
from simple_notes.schemas.auth import LoginRequest, LoginResponse, UserResponse
from simple_notes.services import users as user_service

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
def login_user(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    resolver: Annotated[IdentityResolver, Depends(get_identity_resolver)],
) -> LoginResponse:
    """
    Authenticate with username and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    try:
        user = user_service.authenticate_user(db, body.username, body.password)
    except ServiceError as e:
        raise to_http_error(e) from e
    token, expires_at = encode_access_token(
        user.id,
        user.username,
        user.role,
        resolver.secret,
        duration=timedelta(minutes=get_settings().JWT_EXPIRE_MINUTES),
    )
    return LoginResponse(
        user=user_to_response(user),
        access_token=token,
        token_type="bearer",
        expires_at=expires_at,
    )


@router.get("/me", response_model=UserResponse)
def get_current_user(
    identity: CurrentIdentity,
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Profile of the user the bearer token belongs to."""
    try:
        user = user_service.get_current_user(db, identity)
    except ServiceError as e:
        raise to_http_error(e) from e
    return user_to_response(user)

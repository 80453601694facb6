"""User registration and profile endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from simple_notes.api.v1.deps import CurrentIdentity, ResourceId
from simple_notes.api.v1.errors import to_http_error
from simple_notes.core.database import get_db
from simple_notes.core.errors import ServiceError
from simple_notes.models import User
from simple_notes.schemas.auth import (
    RegisterRequest,
    UserResponse,
    UsersListResponse,
    UserUpdateRequest,
)
from simple_notes.services import users as user_service

router = APIRouter()


def user_to_response(user: User) -> UserResponse:
    return UserResponse(
        name=f"users/{user.id}",
        id=user.id,
        username=user.username,
        nickname=user.nickname or "",
        avatar=user.avatar or "",
        bio=user.bio or "",
        role=user.role,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register_user(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Create an account. The first account in an empty system becomes HOST."""
    try:
        user = user_service.register_user(
            db,
            username=body.username,
            password=body.password,
            nickname=body.nickname,
            avatar=body.avatar,
            bio=body.bio,
        )
    except ServiceError as e:
        raise to_http_error(e) from e
    return user_to_response(user)


@router.get("", response_model=UsersListResponse)
def list_users(
    identity: CurrentIdentity,
    db: Annotated[Session, Depends(get_db)],
) -> UsersListResponse:
    try:
        users = user_service.list_users(db, identity)
    except ServiceError as e:
        raise to_http_error(e) from e
    return UsersListResponse(users=[user_to_response(u) for u in users], total=len(users))


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: ResourceId,
    _identity: CurrentIdentity,
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    try:
        user = user_service.get_user(db, user_id)
    except ServiceError as e:
        raise to_http_error(e) from e
    return user_to_response(user)


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: ResourceId,
    body: UserUpdateRequest,
    identity: CurrentIdentity,
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """
    Update a profile (self, or anyone for ADMIN/HOST).

    Sending role as a USER is refused with 403 rather than silently ignored.
    """
    try:
        user = user_service.update_user(
            db,
            identity,
            user_id,
            username=body.username,
            nickname=body.nickname,
            avatar=body.avatar,
            bio=body.bio,
            role=body.role,
        )
    except ServiceError as e:
        raise to_http_error(e) from e
    return user_to_response(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: ResourceId,
    identity: CurrentIdentity,
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    """Soft-delete a user (self, or anyone for ADMIN/HOST)."""
    try:
        user_service.delete_user(db, identity, user_id)
    except ServiceError as e:
        raise to_http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)

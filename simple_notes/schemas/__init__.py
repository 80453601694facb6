"""Pydantic request/response schemas."""

from simple_notes.schemas.attachments import (
    AttachmentResponse,
    AttachmentsListResponse,
    AttachmentUpdate,
)
from simple_notes.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    UserResponse,
    UsersListResponse,
    UserUpdateRequest,
)
from simple_notes.schemas.health import HealthResponse
from simple_notes.schemas.notes import NoteResponse, NotesListResponse, NoteWrite
from simple_notes.schemas.taxonomy import (
    CategoriesListResponse,
    CategoryResponse,
    TagResponse,
    TagsListResponse,
    TaxonomyCreate,
    TaxonomyUpdate,
)

__all__ = [
    "AttachmentResponse",
    "AttachmentUpdate",
    "AttachmentsListResponse",
    "CategoriesListResponse",
    "CategoryResponse",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "NoteResponse",
    "NoteWrite",
    "NotesListResponse",
    "RegisterRequest",
    "TagResponse",
    "TagsListResponse",
    "TaxonomyCreate",
    "TaxonomyUpdate",
    "UserResponse",
    "UserUpdateRequest",
    "UsersListResponse",
]

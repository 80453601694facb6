"""API v1 routes. Every route passes through authenticate before its endpoint runs."""

from fastapi import APIRouter, Depends

from simple_notes.api.v1 import attachments, auth, categories, health, notes, tags, users
from simple_notes.api.v1.deps import authenticate

router = APIRouter(dependencies=[Depends(authenticate)])
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(notes.router, prefix="/notes", tags=["notes"])
router.include_router(attachments.router, prefix="/attachments", tags=["attachments"])
router.include_router(categories.router, prefix="/categories", tags=["categories"])
router.include_router(tags.router, prefix="/tags", tags=["tags"])

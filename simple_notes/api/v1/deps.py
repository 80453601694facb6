"""Request-scoped dependencies: the identity resolver and the resolved caller."""

from typing import Annotated

from fastapi import Depends, HTTPException, Path, Request, status

from simple_notes.core.identity import Identity, IdentityResolver
from simple_notes.models.base import MAX_ID

# Path ids outside the column range are rejected with 422 before reaching the database.
ResourceId = Annotated[int, Path(ge=1, le=MAX_ID)]


def get_identity_resolver(request: Request) -> IdentityResolver:
    """The resolver built at startup (secret plus public endpoint allowlist)."""
    return request.app.state.identity_resolver


def authenticate(
    request: Request,
    resolver: Annotated[IdentityResolver, Depends(get_identity_resolver)],
) -> Identity | None:
    """
    Resolve the caller from the Authorization header, once per request.

    Endpoints outside the resolver's public allowlist are rejected with 401 when
    no valid token was presented. FastAPI caches the result for the request, so
    endpoints that also declare CurrentIdentity get the same value.
    """
    identity = resolver.resolve(request.headers.get("Authorization"))
    request.state.identity = identity
    route = request.scope.get("route")
    if identity is None and not resolver.is_public(getattr(route, "name", None)):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity


CurrentIdentity = Annotated[Identity | None, Depends(authenticate)]

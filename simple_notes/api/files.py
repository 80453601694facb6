"""
Direct file serving for attachment blobs under /file.

Lives outside /api/v1 so browsers can use the URL in <img>/<video> tags. The
caller is resolved from the Authorization header with the same resolver as the
API; read access follows can_read_attachment.
"""

import re
from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from simple_notes.api.v1.deps import ResourceId, get_identity_resolver
from simple_notes.api.v1.errors import to_http_error
from simple_notes.core.database import get_db
from simple_notes.core.errors import ServiceError
from simple_notes.core.identity import IdentityResolver
from simple_notes.services import attachments as attachment_service

router = APIRouter()

FALLBACK_CONTENT_TYPE = "application/octet-stream"

# Types a browser would execute or render as a document.
UNSAFE_CONTENT_TYPES = frozenset(
    {
        "text/html",
        "text/javascript",
        "application/javascript",
        "application/x-javascript",
        "text/xml",
        "application/xml",
        "application/xhtml+xml",
        "image/svg+xml",
    }
)
INLINE_PREFIXES = ("image/", "video/", "audio/")
RANGE_PREFIXES = ("video/", "audio/")

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Content-Security-Policy": "default-src 'none'; style-src 'unsafe-inline';",
    "Cache-Control": "private, max-age=3600",
}

_RANGE_PATTERN = re.compile(r"^bytes=(\d*)-(\d*)$")


def safe_content_type(mime_type: str | None) -> str:
    """
    Content-Type to send for a stored MIME type.

    Active content is downgraded to octet-stream before text/* gets a charset, so
    text/html never slips through as "text/html; charset=utf-8".
    """
    base = (mime_type or "").split(";", 1)[0].strip().lower()
    if not base or base in UNSAFE_CONTENT_TYPES:
        return FALLBACK_CONTENT_TYPE
    if base.startswith("text/"):
        return f"{base}; charset=utf-8"
    return base


def is_inline(content_type: str) -> bool:
    return content_type.startswith(INLINE_PREFIXES) or content_type == "application/pdf"


def content_disposition(filename: str) -> str:
    """attachment; with an RFC 5987 filename* when the name is not plain ASCII."""
    quoted = quote(filename)
    if quoted != filename:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{filename}"'


def parse_range(header: str | None, size: int) -> tuple[int, int] | None:
    """
    Single byte range from a Range header as inclusive (start, end).

    None means serve the whole body; an unsatisfiable range raises 416.
    """
    if not header:
        return None
    match = _RANGE_PATTERN.match(header.strip())
    if match is None:
        return None
    first, last = match.groups()
    if not first and not last:
        return None
    if not first:
        # Suffix range: the last N bytes.
        length = int(last)
        if length == 0:
            raise _unsatisfiable(size)
        return max(size - length, 0), size - 1
    start = int(first)
    end = min(int(last), size - 1) if last else size - 1
    if start >= size or start > end:
        raise _unsatisfiable(size)
    return start, end


def _unsatisfiable(size: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_416_REQUESTED_RANGE_NOT_SATISFIABLE,
        detail="requested range not satisfiable",
        headers={"Content-Range": f"bytes */{size}"},
    )


@router.get("/attachments/{attachment_id}/{filename}")
def serve_attachment_file(
    attachment_id: ResourceId,
    filename: str,
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    resolver: Annotated[IdentityResolver, Depends(get_identity_resolver)],
) -> Response:
    """
    Stream an attachment's content with hardening headers.

    The filename segment is cosmetic; the id alone selects the attachment.
    Video and audio honour single byte ranges for players that seek.
    """
    identity = resolver.resolve(request.headers.get("Authorization"))
    try:
        attachment = attachment_service.get_attachment(db, identity, attachment_id)
    except ServiceError as e:
        raise to_http_error(e) from e

    blob = attachment.content
    if not blob:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="attachment content not found")

    content_type = safe_content_type(attachment.mime_type)
    headers = dict(SECURITY_HEADERS)
    if not is_inline(content_type):
        headers["Content-Disposition"] = content_disposition(attachment.filename)

    if content_type.startswith(RANGE_PREFIXES):
        headers["Accept-Ranges"] = "bytes"
        byte_range = parse_range(request.headers.get("Range"), len(blob))
        if byte_range is not None:
            start, end = byte_range
            headers["Content-Range"] = f"bytes {start}-{end}/{len(blob)}"
            return Response(
                content=blob[start : end + 1],
                status_code=status.HTTP_206_PARTIAL_CONTENT,
                media_type=content_type,
                headers=headers,
            )

    return Response(content=blob, media_type=content_type, headers=headers)

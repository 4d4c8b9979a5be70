from __future__ import annotations

"""
Optimistic concurrency via HTTP preconditions.

- `compute_etag()` derives a weak ETag from a row's `updated_at` (microseconds).
- `require_if_match()` checks the client's `If-Match` on write requests:
    * header present and stale  -> 412 Precondition Failed
    * header absent, strict mode -> 428 Precondition Required
      (`settings.ENFORCE_IF_MATCH`)
    * `If-Match: *` always passes.
"""

from datetime import datetime
from typing import Optional

from django.conf import settings
from rest_framework.exceptions import APIException


class PreconditionFailed(APIException):
    """HTTP 412: `If-Match` does not match the current representation."""
    status_code = 412
    default_detail = "Precondition failed (If-Match does not match current resource state)."
    default_code = "stale_resource"


class PreconditionRequired(APIException):
    """HTTP 428: strict mode is on and the client sent no `If-Match`."""
    status_code = 428
    default_detail = "Precondition required. Send If-Match with the current ETag."
    default_code = "if_match_required"


def compute_etag(updated_at: Optional[datetime]) -> Optional[str]:
    """Return a weak ETag such as `W/"1723591234.123456"`, or None without a timestamp."""
    if not updated_at:
        return None
    return f'W/"{updated_at.timestamp():.6f}"'


def _parse_if_match(header: Optional[str]) -> set[str]:
    if not header:
        return set()
    return {part.strip() for part in header.split(",") if part.strip()}


def require_if_match(request, updated_at: Optional[datetime], *, enforce: Optional[bool] = None) -> None:
    """
    Enforce `If-Match` against the ETag computed from `updated_at`.

    Raises:
        PreconditionRequired: strict mode and no header.
        PreconditionFailed: header present and no tag matches.
    """
    if enforce is None:
        enforce = bool(getattr(settings, "ENFORCE_IF_MATCH", False))

    tags = _parse_if_match(request.headers.get("If-Match"))
    if not tags:
        if enforce:
            raise PreconditionRequired()
        return
    if "*" in tags:
        return

    current = compute_etag(updated_at)
    if not current or current not in tags:
        raise PreconditionFailed()

"""
Core middleware for authentication fallback and observability.

Components
----------
- `FallbackAuthenticationMiddleware`:
    * Applies the fallback policy: every page requires an authenticated user.
    * Anonymous requests are redirected to `LOGIN_URL` (with `?next=`).
    * Views decorated with `login_not_required` (e.g. the login page) and paths
      under `AUTH_FALLBACK_EXEMPT_PREFIXES` are skipped. DRF views mark themselves
      `login_required = False`, so the API answers its own JSON 403 instead.

- `RequestIDLogMiddleware`:
    * Reads `X-Request-ID` (or generates one) and reflects it in the response.
    * Stores the id in a contextvar for use by `core.logging.RequestIDFilter`.
    * Logs one structured line per request including latency (ms) and user id.
"""

from __future__ import annotations

import logging
import re
import time
import uuid
from typing import Callable

from django.conf import settings
from django.contrib.auth.middleware import LoginRequiredMiddleware
from django.http import HttpRequest, HttpResponse

from .logging import request_id_var

logger = logging.getLogger("contact_manager.request")

# Allow simple, safe request-id tokens coming from clients
_ALLOWED_CHARS = re.compile(r"^[A-Za-z0-9._\-]{1,200}$")


def _coerce_request_id(raw: str | None) -> str:
    """Coerce a client-provided request id to a safe token, or generate a new one."""
    if raw and _ALLOWED_CHARS.match(raw):
        return raw
    return uuid.uuid4().hex


class FallbackAuthenticationMiddleware(LoginRequiredMiddleware):
    """
    Require authentication for every view not explicitly opted out.

    Must be placed after `AuthenticationMiddleware`.
    """

    def _exempt_prefixes(self) -> tuple[str, ...]:
        return tuple(getattr(settings, "AUTH_FALLBACK_EXEMPT_PREFIXES", ()))

    def process_view(self, request, view_func, view_args, view_kwargs):
        if request.path.startswith(self._exempt_prefixes()):
            return None
        return super().process_view(request, view_func, view_args, view_kwargs)


class RequestIDLogMiddleware:
    """
    - Reads `X-Request-ID` (if provided) or generates one.
    - Adds `request.request_id` and response header `X-Request-ID`.
    - Logs one structured line per request with latency (ms) and key attributes.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        rid = _coerce_request_id(request.headers.get("X-Request-ID"))
        setattr(request, "request_id", rid)
        token = request_id_var.set(rid)

        start = time.perf_counter()
        try:
            response = self.get_response(request)
            duration_ms = int((time.perf_counter() - start) * 1000)

            response.headers["X-Request-ID"] = rid

            # Only when authenticated; avoids an extra DB hit for anonymous users.
            user = getattr(request, "user", None)
            user_id = getattr(user, "id", None) if getattr(user, "is_authenticated", False) else None

            logger.info(
                "request",
                extra={
                    "request_id": rid,
                    "method": request.method,
                    "path": request.path,
                    "status": getattr(response, "status_code", 0),
                    "user_id": user_id,
                    "duration_ms": duration_ms,
                },
            )
            return response
        finally:
            request_id_var.reset(token)

"""Core utility views (unauthenticated).

- `health`: readiness endpoint that checks DB connectivity and returns a
  minimal JSON payload for load balancers/k8s probes.
"""

import logging

from django.contrib.auth.decorators import login_not_required
from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.utils.timezone import now

logger = logging.getLogger(__name__)


@login_not_required
def health(request):
    """
    Lightweight health endpoint (exempt from the fallback login policy).

    Returns:
        200 JSON when DB is reachable; 503 JSON when the connection fails.
    """
    status = 200
    payload = {
        "app": "contact-manager",
        "time": now().isoformat(),
        "db": "ok",
    }
    try:
        connection.ensure_connection()
    except DatabaseError as exc:
        logger.warning("health check: database unreachable: %s", exc)
        payload["db"] = "down"
        payload["error"] = str(exc)
        status = 503
    return JsonResponse(payload, status=status)

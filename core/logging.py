"""
Logging helpers for request-scoped correlation.

- `request_id_var` holds the current request id (set by
  `core.middleware.RequestIDLogMiddleware`, "-" outside requests).
- `RequestIDFilter` copies it onto every record so `%(request_id)s` works in
  formatters for request, authorization and management-command logs alike.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


class RequestIDFilter(logging.Filter):
    """Attach `request_id` to records that do not already carry one."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get()
        return True

"""
Optimistic concurrency for detail routes using weak ETags.

- GET (retrieve) attaches `ETag` computed from the row's `updated_at`.
- PUT/PATCH/DELETE (and detail actions that opt in via `check_if_match()`)
  validate `If-Match` through `core.utils.concurrency.require_if_match`:
  412 on a stale tag, 428 when `ENFORCE_IF_MATCH=True` and the header is missing.
- `get_object()` is memoized per request so the object-level authorization in
  `OperationPermission` runs once even when DRF's generic handlers call it again.

List responses intentionally carry no ETag.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.response import Response

from core.utils.concurrency import compute_etag, require_if_match


class ETagConcurrencyMixin:
    def get_object(self):
        if not hasattr(self, "_object_cache"):
            self._object_cache = super().get_object()
        return self._object_cache

    def check_if_match(self, obj) -> None:
        require_if_match(self.request, getattr(obj, "updated_at", None))

    def _set_etag(self, response: Response, obj) -> Response:
        etag = compute_etag(getattr(obj, "updated_at", None))
        if etag:
            response["ETag"] = etag
        return response

    def retrieve(self, request, *args, **kwargs) -> Response:
        instance = self.get_object()
        serializer = self.get_serializer(instance)
        return self._set_etag(Response(serializer.data), instance)

    def update(self, request, *args, **kwargs) -> Response:
        self.check_if_match(self.get_object())
        response = super().update(request, *args, **kwargs)
        return self._set_etag(response, self.get_object())

    def destroy(self, request, *args, **kwargs) -> Response:
        instance = self.get_object()
        self.check_if_match(instance)
        self.perform_destroy(instance)
        return Response(status=status.HTTP_204_NO_CONTENT)

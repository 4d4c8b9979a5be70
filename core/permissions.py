"""
Permission classes used across the API.

This module exposes:
- `OperationPermission`: object-level guard that asks the authorization service
  (`core.authorization`) whether `request.user` may perform the view's current
  operation on the object.

Usage
-----
Views declare which operation requirement(s) apply to an object by implementing
`get_operation_requirements(obj)`; any one granted requirement is enough:

    permission_classes = [IsAuthenticated, OperationPermission]

    def get_operation_requirements(self, obj):
        return (ContactOperations.UPDATE,) if self.action == "update" else ()

An empty tuple means the object needs no operation check for this action.
"""

from rest_framework.permissions import BasePermission

from core.authorization import authorize


class OperationPermission(BasePermission):
    """Object-level permission delegating to the registered authorization handlers."""

    message = "You do not have permission to perform this operation on this resource."
    code = "operation_denied"

    def has_object_permission(self, request, view, obj) -> bool:
        getter = getattr(view, "get_operation_requirements", None)
        requirements = tuple(getter(obj)) if getter else ()
        if not requirements:
            return True
        return any(authorize(request, obj, requirement) for requirement in requirements)

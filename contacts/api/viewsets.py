from __future__ import annotations

"""
Contact API.

- `GET /api/contacts/`: approved contacts, the caller's own contacts, and
  everything for administrators/managers (`Contact.objects.visible_to`).
- `GET /api/contacts/{id}/`: approved contacts for everyone; others need
  Read or Approve (see `contacts.authorization.read_requirements`).
- `POST`: creates a `Submitted` contact owned by the caller.
- `PUT/PATCH`: needs Update; editing an approved contact resets it to review
  unless the editor may approve.
- `DELETE`: needs Delete.
- `POST /api/contacts/{id}/approve/` and `/reject/`: need Approve/Reject.

Detail routes look contacts up across all owners so that an existing but
forbidden contact answers 403 (not 404); the decision is made by the
authorization handlers through `OperationPermission`.
"""

import logging

from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from drf_spectacular.utils import OpenApiResponse, extend_schema, extend_schema_view

from contacts import services
from contacts.authorization import ContactOperations, read_requirements
from contacts.models import Contact
from contacts.serializers import ContactSerializer
from core.permissions import OperationPermission

from .mixins import ETagConcurrencyMixin

logger = logging.getLogger(__name__)


@extend_schema_view(
    list=extend_schema(tags=["Contacts"], description="List contacts visible to the caller."),
    retrieve=extend_schema(tags=["Contacts"], description="Retrieve a contact."),
    create=extend_schema(tags=["Contacts"], description="Create a contact (starts as Submitted)."),
    update=extend_schema(tags=["Contacts"], description="Update a contact."),
    partial_update=extend_schema(tags=["Contacts"], description="Partial update a contact."),
    destroy=extend_schema(tags=["Contacts"], description="Delete a contact."),
)
class ContactViewSet(ETagConcurrencyMixin, viewsets.ModelViewSet):
    """Contact CRUD plus approve/reject, gated by the contact authorization handlers."""
    permission_classes = [IsAuthenticated, OperationPermission]
    serializer_class = ContactSerializer
    lookup_value_regex = r"\d+"
    filterset_fields = ["status", "city", "state"]
    search_fields = ["name", "email", "city"]
    ordering_fields = ["name", "created_at", "updated_at", "status"]
    ordering = ["name"]

    operation_requirements = {
        "update": ContactOperations.UPDATE,
        "partial_update": ContactOperations.UPDATE,
        "destroy": ContactOperations.DELETE,
        "approve": ContactOperations.APPROVE,
        "reject": ContactOperations.REJECT,
    }

    def get_queryset(self):
        qs = Contact.objects.select_related("owner")
        if self.action == "list":
            return qs.visible_to(self.request.user)
        return qs.all()

    def get_operation_requirements(self, obj):
        if self.action == "retrieve":
            return read_requirements(obj)
        requirement = self.operation_requirements.get(self.action)
        return (requirement,) if requirement else ()

    def perform_create(self, serializer):
        contact = services.prepare_new_contact(self.request, Contact(**serializer.validated_data))
        serializer.save(owner=contact.owner, status=contact.status)

    def perform_update(self, serializer):
        contact = serializer.instance
        services.apply_edit_review_rule(self.request, contact)
        serializer.save(status=contact.status)

    def perform_destroy(self, instance):
        logger.info("contact %s deleted by user_id=%s", instance.pk, self.request.user.pk)
        instance.delete()

    def _review(self, request, operation):
        contact = self.get_object()
        self.check_if_match(contact)
        services.review(request, contact, operation)
        return self._set_etag(Response(self.get_serializer(contact).data), contact)

    @extend_schema(
        tags=["Contacts"],
        request=None,
        responses={200: ContactSerializer, 403: OpenApiResponse(description="Not allowed to approve")},
    )
    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):
        """Mark the contact `Approved`."""
        return self._review(request, ContactOperations.APPROVE)

    @extend_schema(
        tags=["Contacts"],
        request=None,
        responses={200: ContactSerializer, 403: OpenApiResponse(description="Not allowed to reject")},
    )
    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):
        """Mark the contact `Rejected`."""
        return self._review(request, ContactOperations.REJECT)

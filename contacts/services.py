"""
Write-side rules for contacts, shared by the JSON API and the pages.

- New contacts are owned by the creating user and start as `Submitted`.
- Editing an approved contact sends it back to review unless the editor may
  approve it.
- Approve/Reject set the matching status.

Denials raise Django's `PermissionDenied`; DRF maps it to a 403 response and
Django renders its 403 page for the server-rendered views.
"""

from __future__ import annotations

import logging

from django.core.exceptions import PermissionDenied

from core.authorization import OperationRequirement, authorize

from .authorization import STATUS_FOR_OPERATION, ContactOperations
from .models import Contact, ContactStatus

logger = logging.getLogger(__name__)


def require_any(request, contact: Contact, *requirements: OperationRequirement) -> None:
    """Raise `PermissionDenied` unless one of `requirements` is granted."""
    if not requirements:
        return
    if not any(authorize(request, contact, requirement) for requirement in requirements):
        raise PermissionDenied(
            f"Not allowed to {'/'.join(r.name.lower() for r in requirements)} this contact."
        )


def prepare_new_contact(request, contact: Contact) -> Contact:
    """Assign owner and initial status to an unsaved contact and authorize Create."""
    contact.owner = request.user
    contact.status = ContactStatus.SUBMITTED
    require_any(request, contact, ContactOperations.CREATE)
    return contact


def apply_edit_review_rule(request, contact: Contact) -> None:
    """Reset an approved contact to `Submitted` when the editor cannot approve."""
    if contact.status != ContactStatus.APPROVED:
        return
    if not authorize(request, contact, ContactOperations.APPROVE):
        contact.status = ContactStatus.SUBMITTED


def review(request, contact: Contact, operation: OperationRequirement) -> Contact:
    """Approve or reject `contact` after authorizing `operation`."""
    try:
        new_status = STATUS_FOR_OPERATION[operation]
    except KeyError:
        raise ValueError(f"{operation} is not a review operation") from None
    require_any(request, contact, operation)
    contact.status = new_status
    contact.save(update_fields=["status", "updated_at"])
    logger.info("contact %s marked %s by user_id=%s", contact.pk, new_status, request.user.pk)
    return contact

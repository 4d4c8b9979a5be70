from django.db import models

from accounts.roles import ADMINISTRATOR, MANAGER
from core.authorization import get_role_claims
from core.models import OwnedModel, OwnedQuerySet


class ContactStatus(models.TextChoices):
    SUBMITTED = "Submitted", "Submitted"
    APPROVED = "Approved", "Approved"
    REJECTED = "Rejected", "Rejected"


class ContactQuerySet(OwnedQuerySet):
    def approved(self):
        return self.filter(status=ContactStatus.APPROVED)

    def visible_to(self, user):
        """
        Contacts `user` may list: approved ones and their own; reviewers
        (administrators and managers) see everything.
        """
        if user is None or not getattr(user, "is_authenticated", False):
            return self.none()
        if get_role_claims(user) & {ADMINISTRATOR, MANAGER}:
            return self.all()
        return self.approved() | self.for_user(user)


class Contact(OwnedModel):
    name = models.CharField(max_length=200)
    address = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    zip = models.CharField("ZIP code", max_length=20, blank=True)
    email = models.EmailField(blank=True)
    status = models.CharField(
        max_length=16,
        choices=ContactStatus.choices,
        default=ContactStatus.SUBMITTED,
    )

    objects = ContactQuerySet.as_manager()

    class Meta:
        ordering = ["name", "id"]
        indexes = [
            models.Index(fields=["owner", "status"], name="contacts_co_owner_i_6b1f0e_idx"),
            models.Index(fields=["status"], name="contacts_co_status_1c9d2a_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.status})"

"""
Seed data: role holders and a handful of sample contacts.

`initialize()` is idempotent:
- ensures the role groups exist,
- ensures an administrator and a manager account (confirmed email, password
  reset to the supplied value on every run),
- creates the sample contacts, owned by the administrator, only when the
  contacts table is empty.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.db import transaction

from accounts.roles import ADMINISTRATOR, MANAGER, ROLES

from .models import Contact, ContactStatus

logger = logging.getLogger(__name__)

ADMIN_EMAIL = "admin@contoso.com"
MANAGER_EMAIL = "manager@contoso.com"

SAMPLE_CONTACTS = [
    {
        "name": "Debra Garcia",
        "address": "1234 Main St",
        "city": "Redmond",
        "state": "WA",
        "zip": "10999",
        "email": "debra@example.com",
        "status": ContactStatus.APPROVED,
    },
    {
        "name": "Thorsten Weinrich",
        "address": "5678 1st Ave W",
        "city": "Redmond",
        "state": "WA",
        "zip": "10999",
        "email": "thorsten@example.com",
        "status": ContactStatus.SUBMITTED,
    },
    {
        "name": "Yuhong Li",
        "address": "9012 State st",
        "city": "Redmond",
        "state": "WA",
        "zip": "10999",
        "email": "yuhong@example.com",
        "status": ContactStatus.REJECTED,
    },
    {
        "name": "Jon Orton",
        "address": "3456 Maple St",
        "city": "Redmond",
        "state": "WA",
        "zip": "10999",
        "email": "jon@example.com",
        "status": ContactStatus.SUBMITTED,
    },
    {
        "name": "Diliana Alexieva-Bosseva",
        "address": "7890 2nd Ave E",
        "city": "Redmond",
        "state": "WA",
        "zip": "10999",
        "email": "diliana@example.com",
        "status": ContactStatus.APPROVED,
    },
]


@dataclass(frozen=True)
class SeedResult:
    admin_id: int
    manager_id: int
    contacts_created: int


def ensure_user(email: str, password: str):
    """Create (or refresh) a confirmed, active account whose username is `email`."""
    User = get_user_model()
    user, created = User.objects.get_or_create(
        username=email,
        defaults={"email": email, "email_confirmed": True},
    )
    user.email = email
    user.email_confirmed = True
    user.is_active = True
    user.set_password(password)
    user.save()
    if created:
        logger.info("seed: created user %s", email)
    return user


def ensure_role(user, role: str) -> None:
    group, _ = Group.objects.get_or_create(name=role)
    user.groups.add(group)


@transaction.atomic
def initialize(*, admin_password: str, manager_password: str) -> SeedResult:
    for role in ROLES:
        Group.objects.get_or_create(name=role)

    admin = ensure_user(ADMIN_EMAIL, admin_password)
    ensure_role(admin, ADMINISTRATOR)

    manager = ensure_user(MANAGER_EMAIL, manager_password)
    ensure_role(manager, MANAGER)

    created = 0
    if not Contact.objects.exists():
        Contact.objects.bulk_create(Contact(owner=admin, **row) for row in SAMPLE_CONTACTS)
        created = len(SAMPLE_CONTACTS)
        logger.info("seed: created %d sample contacts", created)

    return SeedResult(admin_id=admin.pk, manager_id=manager.pk, contacts_created=created)

"""Custom user model for Contact Manager.

Behavior
--------
- Django's default authentication via `AbstractUser`.
- `email_confirmed`: set once the user follows the confirmation link sent at
  registration. Login is refused while False when
  `ACCOUNTS_REQUIRE_CONFIRMED_EMAIL` is on.
- `role_claims`: the user's role names (Django group names), e.g.
  {"Administrator"}. Computed once per instance; the request user is loaded
  fresh for every request, so a role change applies from the next request.
"""

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils.functional import cached_property


class User(AbstractUser):
    """Project user; roles are modelled as Django groups."""

    email_confirmed = models.BooleanField(default=False)

    @cached_property
    def role_claims(self) -> frozenset[str]:
        if self.pk is None:
            return frozenset()
        return frozenset(self.groups.values_list("name", flat=True))

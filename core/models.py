from __future__ import annotations

"""
Core data models shared across the project.

This module provides:
- `OwnedQuerySet` and `OwnedModel`: a consistent per-user ownership pattern
  with convenience filtering and audit fields.

Ownership
---------
- Every owned row has exactly one `owner`, assigned at creation time.
- The owner is immutable: saving a persisted row whose `owner_id` differs from
  the value loaded from the database raises `ValidationError`.
- Views must set `owner` from `request.user`; serializers/forms never accept it.
"""

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


class OwnedQuerySet(models.QuerySet):
    """
    Query helpers for user-owned rows.

    Notes:
        - Anonymous or unauthenticated users receive `none()` (no rows).
    """

    def for_user(self, user):
        """Return rows owned by `user` or an empty queryset when unauthenticated."""
        if user is None or not getattr(user, "is_authenticated", False):
            return self.none()
        return self.filter(owner=user)


class OwnedModel(models.Model):
    """
    Abstract base for per-user ownership + audit fields.

    Fields:
        owner: FK to the owning user (CASCADE on delete).
        created_at / updated_at: standard audit timestamps.

    Invariants:
        - `owner` must be set (see `clean()`).
        - `owner` cannot change once the row is persisted (see `save()`).
    """

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="%(app_label)s_%(class)ss",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = OwnedQuerySet.as_manager()

    class Meta:
        abstract = True
        ordering = ("-created_at",)

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        # Remember the persisted owner so save() can refuse reassignment.
        instance._loaded_owner_id = instance.__dict__.get("owner_id")
        return instance

    def clean(self):
        """Validate invariants for owned records (must have an owner)."""
        super().clean()
        if self.owner_id is None:
            raise ValidationError({"owner": "Owner must be set for owned records."})

    def save(self, *args, **kwargs):
        loaded = getattr(self, "_loaded_owner_id", None)
        if loaded is not None and self.owner_id != loaded:
            raise ValidationError({"owner": "Owner cannot be changed once set."})
        super().save(*args, **kwargs)
        self._loaded_owner_id = self.owner_id

    def is_owned_by(self, user) -> bool:
        """Return True if the instance is owned by the given authenticated `user`."""
        return bool(
            user
            and getattr(user, "is_authenticated", False)
            and self.owner_id == user.id
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={getattr(self, 'id', None)} owner_id={self.owner_id}>"

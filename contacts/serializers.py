"""
DRF serializers for contacts.

- `owner` and `status` are read-only: ownership comes from `request.user` on
  create and status only changes through the approve/reject actions (or the
  edit-resets-review rule in `contacts.services`).
"""

from __future__ import annotations

from rest_framework import serializers

from .models import Contact


class ContactSerializer(serializers.ModelSerializer):
    owner_username = serializers.CharField(source="owner.get_username", read_only=True)

    class Meta:
        model = Contact
        fields = [
            "id",
            "name",
            "address",
            "city",
            "state",
            "zip",
            "email",
            "status",
            "owner",
            "owner_username",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "status", "owner", "created_at", "updated_at"]

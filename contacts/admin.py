"""Django admin registration for contacts (back-office only)."""

from __future__ import annotations

from django.contrib import admin

from .models import Contact


@admin.register(Contact)
class ContactAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "city", "email", "status", "owner", "created_at")
    list_filter = ("status", "state")
    search_fields = ("name", "email", "city", "owner__username")
    # Owner is fixed at creation; see core.models.OwnedModel.save().
    readonly_fields = ("created_at", "updated_at")

    def get_readonly_fields(self, request, obj=None):
        fields = super().get_readonly_fields(request, obj)
        if obj is not None:
            fields = (*fields, "owner")
        return fields

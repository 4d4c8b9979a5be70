"""Admin registrations for the accounts app (back-office only)."""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    """Django's UserAdmin plus the email-confirmation flag; roles are edited as groups."""
    list_display = ("username", "email", "email_confirmed", "is_staff", "is_active")
    list_filter = DjangoUserAdmin.list_filter + ("email_confirmed",)
    fieldsets = DjangoUserAdmin.fieldsets + (
        ("Confirmation", {"fields": ("email_confirmed",)}),
    )

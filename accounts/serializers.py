"""
Serializers behind the session auth API (`accounts.views`).

Login failures are reported with a flat `{"detail": ..., "code": ...}` body so
clients can branch on `code` (`invalid_credentials`, `email_unconfirmed`).
"""

from __future__ import annotations

from django.contrib.auth import authenticate, get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.utils.encoding import force_str
from django.utils.http import urlsafe_base64_decode
from django.utils.translation import gettext_lazy as _
from rest_framework import exceptions, serializers, status
from rest_framework.validators import UniqueValidator

from .forms import email_confirmation_required
from .tokens import email_confirmation_token

User = get_user_model()


class LoginRejected(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = _("Invalid username or password.")
    default_code = "invalid_credentials"

    def __init__(self, detail=None, code=None):
        super().__init__(detail, code)
        self.detail = {"detail": self.detail, "code": self.detail.code}


class AccountSerializer(serializers.ModelSerializer):
    """Public shape of a user account, including its role claims."""

    roles = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "username", "email", "roles"]
        read_only_fields = fields

    def get_roles(self, user) -> list[str]:
        return sorted(user.role_claims)


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate(self, attrs):
        user = authenticate(
            self.context.get("request"),
            username=attrs["username"],
            password=attrs["password"],
        )
        if user is None or not user.is_active:
            raise LoginRejected()
        if email_confirmation_required(user):
            raise LoginRejected(_("Confirm your email address before signing in."), "email_unconfirmed")
        attrs["user"] = user
        return attrs


class RegistrationSerializer(serializers.ModelSerializer):
    """New account: unique username and email, two matching strong passwords."""

    password1 = serializers.CharField(write_only=True, trim_whitespace=False)
    password2 = serializers.CharField(write_only=True, trim_whitespace=False)

    class Meta:
        model = User
        fields = ["username", "email", "password1", "password2"]
        extra_kwargs = {
            "email": {
                "required": True,
                "allow_blank": False,
                "validators": [
                    UniqueValidator(
                        queryset=User.objects.all(),
                        message=_("A user with that email already exists."),
                    )
                ],
            },
        }

    def validate(self, attrs):
        if attrs["password1"] != attrs["password2"]:
            raise serializers.ValidationError({"password2": _("Passwords do not match.")})
        candidate = User(username=attrs["username"], email=attrs["email"])
        try:
            validate_password(attrs["password1"], user=candidate)
        except DjangoValidationError as exc:
            raise serializers.ValidationError({"password1": list(exc.messages)})
        return attrs

    def create(self, validated_data):
        return User.objects.create_user(
            username=validated_data["username"],
            email=validated_data["email"],
            password=validated_data["password1"],
        )


class EmailConfirmationSerializer(serializers.Serializer):
    uid = serializers.CharField()
    token = serializers.CharField()

    def validate(self, attrs):
        try:
            user = User.objects.get(pk=force_str(urlsafe_base64_decode(attrs["uid"])))
        except (TypeError, ValueError, OverflowError, User.DoesNotExist):
            user = None
        if user is None or not email_confirmation_token.check_token(user, attrs["token"]):
            raise serializers.ValidationError(
                {"token": _("Invalid or expired confirmation link.")}, code="invalid_token"
            )
        attrs["user"] = user
        return attrs

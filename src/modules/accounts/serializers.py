"""Account DRF serializers."""

from __future__ import annotations

from rest_framework import serializers

from modules.accounts.models import User


class RegisterSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(write_only=True, min_length=8)
    email = serializers.EmailField(required=False, default="", allow_blank=True)
    first_name = serializers.CharField(required=False, default="", allow_blank=True)
    last_name = serializers.CharField(required=False, default="", allow_blank=True)
    phone = serializers.CharField(
        required=False, default="", allow_blank=True, max_length=20
    )


class UserSerializer(serializers.ModelSerializer):
    """Read serializer exposing the projected role next to the raw code."""

    role = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "first_name",
            "last_name",
            "phone",
            "role",
            "role_id",
            "is_active",
        ]
        read_only_fields = fields


class RoleUpdateSerializer(serializers.Serializer):
    """Role name; matched case-insensitively by the service."""

    role = serializers.CharField(max_length=20)

import logging

from django.db import IntegrityError, transaction
from rest_framework import serializers

from main.exceptions import BadRequest, Conflict
from .models import User
from .validators import (
    validate_name, validate_address, validate_email, validate_password,
    collect_validation_errors
)

logger = logging.getLogger(__name__)


class UserSerializer(serializers.ModelSerializer):
    """Public profile"""

    class Meta:
        model = User
        fields = ['id', 'name', 'email', 'address', 'role']
        read_only_fields = fields


class AdminUserSerializer(UserSerializer):
    """Profile plus the owner average for store owners.

    Expects `owner_averages` ({user id: average}) in the serializer context.
    """
    ownerAverageRating = serializers.SerializerMethodField()

    class Meta(UserSerializer.Meta):
        fields = UserSerializer.Meta.fields + ['ownerAverageRating']
        read_only_fields = UserSerializer.Meta.fields

    def get_ownerAverageRating(self, obj):
        if not obj.is_store_owner:
            return None
        return self.context.get('owner_averages', {}).get(obj.id)


class SignupSerializer(serializers.Serializer):
    """Self-service account creation. Always creates a USER-role account."""
    name = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, trim_whitespace=False
    )
    email = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, trim_whitespace=False
    )
    address = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, trim_whitespace=False
    )
    password = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, write_only=True, trim_whitespace=False
    )

    duplicate_email_message = 'Email is already registered'

    def validate(self, attrs):
        errors = collect_validation_errors({
            'name': lambda: validate_name(attrs.get('name')),
            'email': lambda: validate_email(attrs.get('email')),
            'address': lambda: validate_address(attrs.get('address')),
            'password': lambda: validate_password(attrs.get('password')),
        })
        if errors:
            raise serializers.ValidationError(errors)
        return attrs

    def get_role(self, validated_data):
        return User.Role.USER

    def create(self, validated_data):
        role = self.get_role(validated_data)
        email = User.objects.normalize_email(validated_data['email'])

        if User.objects.filter(email=email).exists():
            raise Conflict(self.duplicate_email_message)

        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    email=email,
                    password=validated_data['password'],
                    name=validated_data['name'],
                    address=validated_data['address'],
                    role=role,
                )
        except IntegrityError:
            raise Conflict(self.duplicate_email_message)

        logger.info(f"Created {user.role} account {user.email}")
        return user


class UserCreateSerializer(SignupSerializer):
    """Admin account creation with an explicit role."""
    role = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    duplicate_email_message = 'Email already exists'

    def get_role(self, validated_data):
        role = validated_data.get('role')
        if role not in User.Role.values:
            raise BadRequest('Invalid role')
        return User.Role(role)


class ChangePasswordSerializer(serializers.Serializer):
    """Serializer for password change"""
    oldPassword = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    newPassword = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)


class LoginSerializer(serializers.Serializer):
    email = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, trim_whitespace=False
    )
    password = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, trim_whitespace=False
    )

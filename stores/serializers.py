import logging

from django.db import IntegrityError, transaction
from rest_framework import serializers

from main.exceptions import BadRequest, Conflict
from users.models import User
from users.validators import (
    validate_store_name, validate_email, validate_address, collect_validation_errors
)
from .models import Store

logger = logging.getLogger(__name__)


class StoreSerializer(serializers.ModelSerializer):
    ownerId = serializers.IntegerField(source='owner_id', read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Store
        fields = ['id', 'name', 'email', 'address', 'ownerId', 'createdAt', 'updatedAt']
        read_only_fields = ['id', 'name', 'email', 'address']


class StoreCreateSerializer(serializers.Serializer):
    name = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, trim_whitespace=False
    )
    email = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, trim_whitespace=False
    )
    address = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, trim_whitespace=False
    )
    ownerId = serializers.IntegerField(required=False, allow_null=True)

    def validate(self, attrs):
        errors = collect_validation_errors({
            'name': lambda: validate_store_name(attrs.get('name')),
            'email': lambda: validate_email(attrs.get('email')),
            'address': lambda: validate_address(attrs.get('address')),
        })
        if errors:
            raise serializers.ValidationError(errors)
        return attrs

    def create(self, validated_data):
        owner = None
        owner_id = validated_data.get('ownerId')
        if owner_id:
            owner = User.objects.filter(pk=owner_id).first()
            if owner is None or not owner.is_store_owner:
                raise BadRequest('Invalid store owner')

        if Store.objects.filter(email=validated_data['email']).exists():
            raise Conflict('Email already exists')

        try:
            with transaction.atomic():
                store = Store.objects.create(
                    name=validated_data['name'],
                    email=validated_data['email'],
                    address=validated_data['address'],
                    owner=owner,
                )
        except IntegrityError:
            raise Conflict('Email already exists')

        logger.info(f"Created store {store.id} ({store.email}), owner={owner_id}")
        return store


class AdminStoreSerializer(serializers.Serializer):
    """Admin listing row, built from a `ratings.queries.StoreRatings`."""
    id = serializers.IntegerField(source='store.id')
    name = serializers.CharField(source='store.name')
    email = serializers.CharField(source='store.email')
    address = serializers.CharField(source='store.address')
    ownerId = serializers.IntegerField(source='store.owner_id', allow_null=True)
    rating = serializers.FloatField(source='average', allow_null=True)
    ratingCount = serializers.IntegerField(source='count')


class StoreListingSerializer(serializers.Serializer):
    """Store browsing row with the viewer's own rating."""
    id = serializers.IntegerField(source='store.id')
    name = serializers.CharField(source='store.name')
    address = serializers.CharField(source='store.address')
    overallRating = serializers.FloatField(source='average', allow_null=True)
    ratingCount = serializers.IntegerField(source='count')
    userRating = serializers.IntegerField(source='user_rating', allow_null=True)

from rest_framework import serializers

from .models import Rating, RATING_MIN, RATING_MAX

RATING_RANGE_MESSAGE = f'Rating must be an integer between {RATING_MIN} and {RATING_MAX}'


class RatingValueField(serializers.Field):
    """Strict integer field: rejects strings, booleans and fractional numbers."""

    default_error_messages = {
        'invalid': RATING_RANGE_MESSAGE,
    }

    def to_internal_value(self, data):
        if isinstance(data, bool):
            self.fail('invalid')
        if isinstance(data, float) and data.is_integer():
            data = int(data)
        if not isinstance(data, int) or not RATING_MIN <= data <= RATING_MAX:
            self.fail('invalid')
        return data

    def to_representation(self, value):
        return value


class RatingInputSerializer(serializers.Serializer):
    rating = RatingValueField()


class RatingSerializer(serializers.ModelSerializer):
    userId = serializers.IntegerField(source='user_id', read_only=True)
    storeId = serializers.IntegerField(source='store_id', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Rating
        fields = ['id', 'rating', 'userId', 'storeId', 'createdAt', 'updatedAt']
        read_only_fields = ['id', 'rating']


class RaterSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    email = serializers.CharField()
    address = serializers.CharField()


class OwnerRatingSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    rating = serializers.IntegerField()
    user = RaterSerializer()


class OwnerStoreSerializer(serializers.Serializer):
    """Store owner dashboard row, built from a `ratings.queries.StoreRatings`."""
    id = serializers.IntegerField(source='store.id')
    name = serializers.CharField(source='store.name')
    address = serializers.CharField(source='store.address')
    averageRating = serializers.FloatField(source='average', allow_null=True)
    ratingCount = serializers.IntegerField(source='count')
    ratings = OwnerRatingSerializer(many=True)

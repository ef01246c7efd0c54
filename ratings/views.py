import logging

from django.db import IntegrityError, transaction
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from main.exceptions import Conflict
from stores.models import Store
from users.models import User
from users.permissions import IsNormalUser
from .models import Rating
from .serializers import RatingInputSerializer, RatingSerializer, RATING_RANGE_MESSAGE

logger = logging.getLogger(__name__)

RATING_EXISTS_MESSAGE = 'Rating already exists. Use PUT to update.'
RATING_MISSING_MESSAGE = 'Rating does not exist. Use POST to create.'


def create_rating(user_id, store, value):
    """First rating of `store` by `user_id`. Fails if one already exists."""
    if Rating.objects.filter(user_id=user_id, store=store).exists():
        raise Conflict(RATING_EXISTS_MESSAGE)

    # Two concurrent creates can both pass the check above; the unique
    # constraint rejects the second insert.
    try:
        with transaction.atomic():
            rating = Rating.objects.create(user_id=user_id, store=store, rating=value)
    except IntegrityError:
        raise Conflict(RATING_EXISTS_MESSAGE)

    logger.info(f"User {user_id} rated store {store.id}: {value}")
    return rating


def update_rating(user_id, store, value):
    """Overwrite an existing rating. Fails if there is none yet."""
    rating = Rating.objects.filter(user_id=user_id, store=store).first()
    if rating is None:
        raise NotFound(RATING_MISSING_MESSAGE)

    rating.rating = value
    rating.save(update_fields=['rating', 'updated_at'])
    logger.info(f"User {user_id} changed rating of store {store.id} to {value}")
    return rating


@api_view(['POST', 'PUT'])
@permission_classes([IsAuthenticated, IsNormalUser])
def store_rating_view(request, pk):
    """
    Submit (POST) or change (PUT) the caller's rating of a store.
    POST only works for a store the caller has not rated yet, PUT only for one they have.
    """
    serializer = RatingInputSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'message': RATING_RANGE_MESSAGE}, status=status.HTTP_400_BAD_REQUEST)
    value = serializer.validated_data['rating']

    store = Store.objects.filter(pk=pk).first()
    if store is None:
        raise NotFound('Store not found')

    # The token can outlive the account it was issued for.
    if not User.objects.filter(pk=request.user.id).exists():
        raise NotFound('User not found')

    if request.method == 'POST':
        rating = create_rating(request.user.id, store, value)
        return Response(RatingSerializer(rating).data, status=status.HTTP_201_CREATED)

    rating = update_rating(request.user.id, store, value)
    return Response(RatingSerializer(rating).data)

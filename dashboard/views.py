# Dashboard views for administrators and store owners
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ratings.models import Rating
from ratings.queries import load_store_ratings
from ratings.serializers import OwnerStoreSerializer
from stores.models import Store
from users.models import User
from users.permissions import IsAdmin, IsStoreOwner


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdmin])
def admin_dashboard_stats(request):
    """
    Platform totals for the admin dashboard
    """
    return Response({
        'totalUsers': User.objects.count(),
        'totalStores': Store.objects.count(),
        'totalRatings': Rating.objects.count(),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStoreOwner])
def owner_dashboard(request):
    """
    Every store the caller owns with its average, rating count and the
    users who rated it.
    """
    stores = Store.objects.filter(owner_id=request.user.id)
    summaries = load_store_ratings(stores, with_users=True)
    return Response(OwnerStoreSerializer(summaries, many=True).data)

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ratings.queries import load_store_ratings
from users.filters import SortByFilter
from users.permissions import IsAdmin
from .filters import StoreFilter, StoreListingFilter
from .models import Store
from .serializers import (
    StoreSerializer, StoreCreateSerializer, AdminStoreSerializer, StoreListingSerializer
)


class AdminStoreListCreateView(generics.ListCreateAPIView):
    """List stores with their rating summary, or create a store (Admin only)"""
    queryset = Store.objects.all()
    permission_classes = [IsAuthenticated, IsAdmin]
    pagination_class = None
    filter_backends = [DjangoFilterBackend, SortByFilter]
    filterset_class = StoreFilter
    sort_fields = {
        'name': 'name',
        'email': 'email',
        'address': 'address',
        'createdAt': 'created_at',
    }

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return StoreCreateSerializer
        return AdminStoreSerializer

    def list(self, request, *args, **kwargs):
        summaries = load_store_ratings(self.filter_queryset(self.get_queryset()))
        return Response(AdminStoreSerializer(summaries, many=True).data)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        store = serializer.save()
        return Response(StoreSerializer(store).data, status=status.HTTP_201_CREATED)


class StoreListView(generics.ListAPIView):
    """Browse stores with overall rating and the caller's own rating"""
    queryset = Store.objects.all()
    serializer_class = StoreListingSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = None
    filter_backends = [DjangoFilterBackend, SortByFilter]
    filterset_class = StoreListingFilter
    sort_fields = {
        'name': 'name',
        'address': 'address',
        'createdAt': 'created_at',
    }

    def list(self, request, *args, **kwargs):
        summaries = load_store_ratings(
            self.filter_queryset(self.get_queryset()),
            viewer_id=request.user.id
        )
        return Response(self.get_serializer(summaries, many=True).data)

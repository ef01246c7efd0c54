"""
URL configuration for main project.

All REST endpoints live under /api/. The Django admin site is mounted at
/admin/ and is separate from the /api/admin/ endpoints.
"""
from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response


# Simple health check view - no database required
@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def health_check(request):
    """Health check endpoint for container orchestration."""
    return Response({'status': 'ok'})


urlpatterns = [
    # Health check endpoint (no auth required, no DB queries)
    path('api/health', health_check, name='health-check'),

    path('admin/', admin.site.urls),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),

    # API endpoints
    path('api/', include('users.urls')),
    path('api/', include('stores.urls')),
    path('api/', include('ratings.urls')),
    path('api/', include('dashboard.urls')),
]

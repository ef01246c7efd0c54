from django.urls import path
from . import views

app_name = 'dashboard'

urlpatterns = [
    path('admin/dashboard-stats', views.admin_dashboard_stats, name='admin-stats'),
    path('owner/dashboard', views.owner_dashboard, name='owner-dashboard'),
]

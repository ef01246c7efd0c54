from django.urls import path
from . import views

urlpatterns = [
    # Auth endpoints
    path('auth/signup', views.signup_view, name='signup'),
    path('auth/login', views.login_view, name='login'),
    path('auth/change-password', views.change_password_view, name='change-password'),
    path('me', views.current_user_view, name='current-user'),

    # User management (Admin only)
    path('admin/users', views.AdminUserListCreateView.as_view(), name='admin-user-list-create'),
    path('admin/users/<int:pk>', views.AdminUserDetailView.as_view(), name='admin-user-detail'),
]

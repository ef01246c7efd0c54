from django.urls import path
from . import views

urlpatterns = [
    path('stores/<int:pk>/ratings', views.store_rating_view, name='store-rating'),
]

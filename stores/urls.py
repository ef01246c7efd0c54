from django.urls import path
from . import views

app_name = 'stores'

urlpatterns = [
    path('admin/stores', views.AdminStoreListCreateView.as_view(), name='admin-store-list-create'),
    path('stores', views.StoreListView.as_view(), name='store-list'),
]

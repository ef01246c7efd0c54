import django_filters

from .models import Store


class StoreFilter(django_filters.FilterSet):
    """Admin store search: substring match on name, email and address."""
    name = django_filters.CharFilter(lookup_expr='icontains')
    email = django_filters.CharFilter(lookup_expr='icontains')
    address = django_filters.CharFilter(lookup_expr='icontains')

    class Meta:
        model = Store
        fields = ['name', 'email', 'address']


class StoreListingFilter(django_filters.FilterSet):
    """Store browsing for any signed-in user. Email is not exposed here."""
    name = django_filters.CharFilter(lookup_expr='icontains')
    address = django_filters.CharFilter(lookup_expr='icontains')

    class Meta:
        model = Store
        fields = ['name', 'address']

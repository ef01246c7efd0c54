"""
Query-string filtering and sorting for list endpoints.

Lists accept case-insensitive substring filters plus `sortBy` / `sortOrder`.
Only fields on a view's `sort_fields` allow-list can be sorted on; anything
else leaves the natural (primary key) order untouched.
"""
import django_filters
from rest_framework.filters import BaseFilterBackend

from .models import User


class SortByFilter(BaseFilterBackend):
    """
    Sort by an allow-listed field.

    Usage:
        class StoreListView(generics.ListAPIView):
            filter_backends = [DjangoFilterBackend, SortByFilter]
            sort_fields = {'name': 'name', 'createdAt': 'created_at'}
    """
    sort_param = 'sortBy'
    order_param = 'sortOrder'

    def get_sort_field(self, request, view):
        sort_fields = getattr(view, 'sort_fields', {})
        return sort_fields.get(request.query_params.get(self.sort_param))

    def filter_queryset(self, request, queryset, view):
        field = self.get_sort_field(request, view)
        if field is None:
            return queryset

        sort_order = request.query_params.get(self.order_param, '')
        if sort_order.lower() == 'desc':
            field = f'-{field}'
        return queryset.order_by(field, 'id')

    def get_schema_operation_parameters(self, view):
        sort_fields = list(getattr(view, 'sort_fields', {}))
        return [
            {
                'name': self.sort_param,
                'required': False,
                'in': 'query',
                'description': 'Field to sort by',
                'schema': {'type': 'string', 'enum': sort_fields},
            },
            {
                'name': self.order_param,
                'required': False,
                'in': 'query',
                'description': 'Sort direction',
                'schema': {'type': 'string', 'enum': ['asc', 'desc']},
            },
        ]


class UserFilter(django_filters.FilterSet):
    name = django_filters.CharFilter(lookup_expr='icontains')
    email = django_filters.CharFilter(lookup_expr='icontains')
    address = django_filters.CharFilter(lookup_expr='icontains')
    role = django_filters.CharFilter(field_name='role')

    class Meta:
        model = User
        fields = ['name', 'email', 'address', 'role']

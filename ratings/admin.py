from django.contrib import admin
from .models import Rating


@admin.register(Rating)
class RatingAdmin(admin.ModelAdmin):
    list_display = ['store', 'user', 'rating', 'created_at', 'updated_at']
    list_filter = ['rating', 'created_at']
    search_fields = ['store__name', 'user__email', 'user__name']
    readonly_fields = ['created_at', 'updated_at']
    raw_id_fields = ['user', 'store']

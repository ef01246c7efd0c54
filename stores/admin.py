from django.contrib import admin
from .models import Store


@admin.register(Store)
class StoreAdmin(admin.ModelAdmin):
    list_display = ['name', 'email', 'owner', 'created_at']
    list_filter = ['created_at']
    search_fields = ['name', 'email', 'address']
    readonly_fields = ['created_at', 'updated_at']
    raw_id_fields = ['owner']

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


class Store(models.Model):
    name = models.CharField(max_length=100)
    email = models.EmailField(max_length=120, unique=True)
    address = models.CharField(max_length=400)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='owned_stores',
        limit_choices_to={'role': 'STORE_OWNER'},
        help_text='Store owner account; must have the STORE_OWNER role'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'stores'
        ordering = ['id']
        indexes = [
            models.Index(fields=['owner'], name='stores_owner_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.email})"

    def clean(self):
        if self.owner is not None and not self.owner.is_store_owner:
            raise ValidationError({'owner': 'Invalid store owner'})

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models


class UserManager(BaseUserManager):
    """Manager for the email-keyed User model."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')
        user = self.model(email=self.normalize_email(email), **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('role', User.Role.ADMIN)
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        return self.create_user(email, password, **extra_fields)


class User(AbstractUser):
    """
    Platform account with role-based access control.
    Roles: ADMIN, USER, STORE_OWNER

    - ADMIN: manages users and stores
    - USER: browses stores and submits ratings
    - STORE_OWNER: views ratings of the stores they own
    """

    class Role(models.TextChoices):
        ADMIN = 'ADMIN', 'Admin'
        USER = 'USER', 'Normal User'
        STORE_OWNER = 'STORE_OWNER', 'Store Owner'

    username = None
    first_name = None
    last_name = None

    name = models.CharField(max_length=60)
    email = models.EmailField(max_length=120, unique=True)
    address = models.CharField(max_length=400)
    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.USER,
        help_text='User role for permission management'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    class Meta:
        db_table = 'users'
        ordering = ['id']

    def __str__(self):
        return f"{self.email} ({self.get_role_display()})"

    @property
    def is_admin(self):
        return self.role == self.Role.ADMIN

    @property
    def is_normal_user(self):
        return self.role == self.Role.USER

    @property
    def is_store_owner(self):
        return self.role == self.Role.STORE_OWNER

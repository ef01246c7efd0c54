"""
JWT bearer authentication.

Tokens carry the caller's identity ({id, role, name, email}) so that
requests can be authorized from the claims alone.
"""
from datetime import timedelta

from django.conf import settings
from django.utils import timezone
from jose import jwt, JWTError
from rest_framework import authentication, exceptions

from .models import User


INVALID_TOKEN_MESSAGE = 'Invalid or expired token'


def _token_lifetime():
    return timedelta(days=settings.JWT_EXPIRES_DAYS)


def issue_token(user):
    """Sign a token for a persisted user."""
    now = timezone.now()
    claims = {
        'id': user.id,
        'role': user.role,
        'name': user.name,
        'email': user.email,
        'iat': now,
        'exp': now + _token_lifetime(),
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token):
    """Verify signature and expiry and return the claims."""
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise exceptions.AuthenticationFailed(INVALID_TOKEN_MESSAGE)


class TokenUser:
    """Request identity rebuilt from token claims."""

    is_authenticated = True
    is_anonymous = False

    def __init__(self, claims):
        try:
            self.id = int(claims['id'])
            self.role = User.Role(claims['role'])
        except (KeyError, TypeError, ValueError):
            raise exceptions.AuthenticationFailed(INVALID_TOKEN_MESSAGE)
        self.name = claims.get('name')
        self.email = claims.get('email')

    @property
    def pk(self):
        return self.id

    @property
    def is_admin(self):
        return self.role == User.Role.ADMIN

    @property
    def is_normal_user(self):
        return self.role == User.Role.USER

    @property
    def is_store_owner(self):
        return self.role == User.Role.STORE_OWNER

    def __str__(self):
        return f"{self.email} ({self.role})"


class JWTAuthentication(authentication.BaseAuthentication):
    keyword = 'Bearer'

    def authenticate(self, request):
        auth_header = request.META.get('HTTP_AUTHORIZATION', '')
        if not auth_header.startswith(f'{self.keyword} '):
            return None

        token = auth_header.split(' ')[1]
        if not token:
            raise exceptions.AuthenticationFailed(INVALID_TOKEN_MESSAGE)

        claims = decode_token(token)
        return TokenUser(claims), claims

    def authenticate_header(self, request):
        return self.keyword

"""
Tests for project-level plumbing: health check, error body shapes and the
demo data command.
"""
import pytest
from django.core.management import call_command
from rest_framework import exceptions, status

from main.exceptions import BadRequest, Conflict, api_exception_handler, flatten_errors


class TestHealthCheck:

    def test_health_needs_no_auth(self, api_client):
        response = api_client.get('/api/health')

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'status': 'ok'}

    def test_bad_token_is_ignored_on_health(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')
        assert api_client.get('/api/health').status_code == status.HTTP_200_OK


class TestExceptionHandler:

    def test_field_errors_flattened(self):
        exc = exceptions.ValidationError({'email': ['Email is invalid', 'ignored'], 'name': 'Name is required'})
        response = api_exception_handler(exc, {})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'errors': {'email': 'Email is invalid', 'name': 'Name is required'}}

    def test_message_errors(self):
        assert api_exception_handler(Conflict('Email already exists'), {}).data == \
            {'message': 'Email already exists'}
        response = api_exception_handler(BadRequest('Invalid role'), {})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'message': 'Invalid role'}

    def test_not_found(self):
        response = api_exception_handler(exceptions.NotFound('Store not found'), {})

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {'message': 'Store not found'}

    def test_not_authenticated(self):
        response = api_exception_handler(exceptions.NotAuthenticated(), {})
        assert response.data == {'message': 'Unauthorized'}

    def test_unhandled_error_is_500(self, caplog):
        response = api_exception_handler(RuntimeError('boom'), {'view': None})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data == {'message': 'Internal server error'}
        assert 'boom' in caplog.text

    def test_flatten_errors_nested(self):
        assert flatten_errors({'rating': [['too big']]}) == {'rating': 'too big'}


@pytest.mark.django_db
class TestLoadDemoData:

    def test_loads_and_is_idempotent(self):
        from ratings.models import Rating
        from stores.models import Store
        from users.models import User

        call_command('load_demo_data', verbosity=0)
        call_command('load_demo_data', verbosity=0)

        assert User.objects.count() == 6
        assert User.objects.get(email='admin@example.com').role == User.Role.ADMIN
        assert User.objects.filter(role=User.Role.STORE_OWNER).count() == 2
        assert Store.objects.count() == 4
        assert Store.objects.filter(owner__isnull=True).count() == 1
        assert Rating.objects.count() == 7

    def test_demo_accounts_can_log_in(self, api_client):
        call_command('load_demo_data', '--admin-password', 'Override1!', verbosity=0)

        response = api_client.post('/api/auth/login', {
            'email': 'admin@example.com', 'password': 'Override1!'
        }, format='json')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['user']['role'] == 'ADMIN'

    def test_clear_removes_stores_and_ratings(self, store, normal_user):
        from ratings.models import Rating
        from stores.models import Store
        Rating.objects.create(user=normal_user, store=store, rating=3)

        call_command('load_demo_data', '--clear', verbosity=0)

        assert not Store.objects.filter(pk=store.pk).exists()
        assert Store.objects.count() == 4
        assert Rating.objects.count() == 7

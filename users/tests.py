"""
Tests for Users Module.
Tests for: validators, User model, JWT authentication, role permissions,
signup/login/change-password, and the admin user endpoints.
"""
from datetime import timedelta

import pytest
from django.conf import settings
from django.utils import timezone
from jose import jwt
from rest_framework import status

from users.authentication import issue_token, decode_token, TokenUser
from users.models import User
from users.validators import (
    validate_name, validate_address, validate_email, validate_password,
    validate_store_name, collect_validation_errors
)


PASSWORD = 'Testpass1!'

VALID_SIGNUP = {
    'name': 'Signup Person With Long Name',
    'email': 'newuser@test.com',
    'address': '42 Signup Avenue',
    'password': 'Newpass1!',
}


# ============== Validator Tests ==============

class TestValidators:
    """Pure field validators"""

    @pytest.mark.parametrize('password', ['Abcdef1!', 'ABCDEFG@', 'Aaaaaaa-aaaaaaaa'])
    def test_valid_passwords(self, password):
        assert validate_password(password) is None

    @pytest.mark.parametrize('password', [
        'abcdefgh',           # no uppercase, no special
        'abcdefg!',           # no uppercase
        'Abcdefgh',           # no special
        'Ab1!',               # too short
        'Abcdefghijklmno1!',  # 17 chars
        '',
        None,
    ])
    def test_invalid_passwords(self, password):
        assert validate_password(password) is not None

    def test_password_messages(self):
        assert validate_password(None) == 'Password is required'
        assert validate_password('Ab!') == 'Password must be 8-16 characters long'
        assert validate_password('abcdefg!') == 'Password must include at least one uppercase letter'
        assert validate_password('Abcdefgh') == 'Password must include at least one special character'

    def test_name_length_bounds(self):
        assert validate_name('a' * 19) == 'Name must be at least 20 characters'
        assert validate_name('a' * 20) is None
        assert validate_name('a' * 60) is None
        assert validate_name('a' * 61) == 'Name must be at most 60 characters'
        assert validate_name('') == 'Name is required'

    def test_address_length(self):
        assert validate_address('x' * 400) is None
        assert validate_address('x' * 401) == 'Address must be at most 400 characters'
        assert validate_address(None) == 'Address is required'

    @pytest.mark.parametrize('email,valid', [
        ('someone@example.com', True),
        ('a.b+c@sub.domain.org', True),
        ('no-at-sign.com', False),
        ('no@tld', False),
        ('spaces in@example.com', False),
        ('', False),
    ])
    def test_email_shape(self, email, valid):
        assert (validate_email(email) is None) == valid

    def test_store_name_is_not_bound_by_user_name_rule(self):
        assert validate_store_name('Deli') is None
        assert validate_store_name('') == 'Name is required'
        assert validate_store_name('s' * 101) is not None

    def test_collect_validation_errors_omits_passing_fields(self):
        errors = collect_validation_errors({
            'name': lambda: validate_name('short'),
            'email': lambda: validate_email('fine@example.com'),
        })
        assert errors == {'name': 'Name must be at least 20 characters'}

    def test_collect_validation_errors_returns_none_when_clean(self):
        assert collect_validation_errors({'email': lambda: None}) is None


# ============== User Model Tests ==============

@pytest.mark.django_db
class TestUserModel:
    """Test cases for User model"""

    def test_create_user_hashes_password(self):
        user = User.objects.create_user(
            email='hash@test.com',
            password='Secret12!',
            name='Hashed Password Person',
            address='1 Hash Road'
        )

        assert user.role == User.Role.USER
        assert user.password != 'Secret12!'
        assert user.check_password('Secret12!')

    def test_role_properties(self, admin_user, normal_user, store_owner):
        assert admin_user.is_admin and not admin_user.is_store_owner
        assert normal_user.is_normal_user and not normal_user.is_admin
        assert store_owner.is_store_owner and not store_owner.is_normal_user

    def test_create_superuser_is_admin(self):
        user = User.objects.create_superuser(
            email='root@test.com', password='Rootpass1!', name='Super User Root Account'
        )
        assert user.role == User.Role.ADMIN
        assert user.is_staff and user.is_superuser

    def test_user_str_representation(self, store_owner):
        assert str(store_owner) == 'owner@test.com (Store Owner)'


# ============== Token Tests ==============

@pytest.mark.django_db
class TestTokens:
    """JWT issue / verify"""

    def test_token_round_trips_identity(self, store_owner):
        claims = decode_token(issue_token(store_owner))

        assert claims['id'] == store_owner.id
        assert claims['role'] == 'STORE_OWNER'
        assert claims['email'] == store_owner.email
        assert claims['name'] == store_owner.name

    def test_token_expires_in_seven_days(self, normal_user):
        claims = decode_token(issue_token(normal_user))
        assert claims['exp'] - claims['iat'] == 7 * 24 * 3600

    def test_token_user_from_claims(self, normal_user):
        identity = TokenUser(decode_token(issue_token(normal_user)))

        assert identity.id == normal_user.id
        assert identity.role == User.Role.USER
        assert identity.is_authenticated
        assert identity.is_normal_user

    def test_missing_header_is_401(self, api_client):
        response = api_client.get('/api/me')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data == {'message': 'Unauthorized'}

    def test_malformed_token_is_401(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION='Bearer not-a-jwt')
        response = api_client.get('/api/me')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data == {'message': 'Invalid or expired token'}

    def test_expired_token_is_401(self, api_client, normal_user):
        past = timezone.now() - timedelta(days=1)
        token = jwt.encode(
            {'id': normal_user.id, 'role': 'USER', 'iat': past - timedelta(days=7), 'exp': past},
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM
        )
        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        response = api_client.get('/api/me')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_wrong_signature_is_401(self, api_client, normal_user):
        token = jwt.encode(
            {'id': normal_user.id, 'role': 'USER'}, 'some-other-secret', algorithm='HS256'
        )
        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        response = api_client.get('/api/me')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_unknown_role_claim_is_401(self, api_client, normal_user):
        token = jwt.encode(
            {'id': normal_user.id, 'role': 'SUPERHERO'},
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM
        )
        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        response = api_client.get('/api/me')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# ============== Signup Tests ==============

@pytest.mark.django_db
class TestSignup:
    """POST /api/auth/signup"""

    def test_signup_creates_normal_user(self, api_client):
        response = api_client.post('/api/auth/signup', VALID_SIGNUP, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['user']['role'] == 'USER'
        assert response.data['user']['email'] == VALID_SIGNUP['email']
        assert 'password' not in response.data['user']

        user = User.objects.get(email=VALID_SIGNUP['email'])
        assert user.check_password(VALID_SIGNUP['password'])
        assert decode_token(response.data['token'])['id'] == user.id

    def test_signup_ignores_requested_role(self, api_client):
        response = api_client.post(
            '/api/auth/signup', {**VALID_SIGNUP, 'role': 'ADMIN'}, format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert User.objects.get(email=VALID_SIGNUP['email']).role == User.Role.USER

    def test_signup_reports_every_invalid_field(self, api_client):
        response = api_client.post('/api/auth/signup', {
            'name': 'Too short',
            'email': 'bad-email',
            'address': '',
            'password': 'weakpass',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert set(response.data['errors']) == {'name', 'email', 'address', 'password'}
        assert response.data['errors']['name'] == 'Name must be at least 20 characters'

    def test_signup_missing_fields(self, api_client):
        response = api_client.post('/api/auth/signup', {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['errors']['email'] == 'Email is required'
        assert response.data['errors']['password'] == 'Password is required'

    def test_signup_checks_fields_as_sent(self, api_client):
        padded_name = 'Nineteen char name!' + ' '
        assert len(padded_name) == 20

        response = api_client.post(
            '/api/auth/signup', {**VALID_SIGNUP, 'name': padded_name}, format='json'
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert User.objects.get(email=VALID_SIGNUP['email']).name == padded_name

    def test_signup_rejects_padded_email(self, api_client):
        response = api_client.post(
            '/api/auth/signup', {**VALID_SIGNUP, 'email': ' ' + VALID_SIGNUP['email']}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['errors'] == {'email': 'Email is invalid'}

    def test_signup_duplicate_email(self, api_client, normal_user):
        response = api_client.post(
            '/api/auth/signup', {**VALID_SIGNUP, 'email': normal_user.email}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'message': 'Email is already registered'}


# ============== Login Tests ==============

@pytest.mark.django_db
class TestLogin:
    """POST /api/auth/login"""

    def test_login_success(self, api_client, store_owner):
        response = api_client.post('/api/auth/login', {
            'email': store_owner.email,
            'password': PASSWORD,
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        claims = decode_token(response.data['token'])
        assert claims['id'] == store_owner.id
        assert claims['role'] == 'STORE_OWNER'
        assert response.data['user'] == {
            'id': store_owner.id,
            'name': store_owner.name,
            'email': store_owner.email,
            'address': store_owner.address,
            'role': 'STORE_OWNER',
        }

    def test_wrong_password_and_unknown_email_look_the_same(self, api_client, normal_user):
        wrong_password = api_client.post('/api/auth/login', {
            'email': normal_user.email,
            'password': 'Wrongpass1!',
        }, format='json')
        unknown_email = api_client.post('/api/auth/login', {
            'email': 'nobody@test.com',
            'password': 'Wrongpass1!',
        }, format='json')

        assert wrong_password.status_code == status.HTTP_401_UNAUTHORIZED
        assert unknown_email.status_code == status.HTTP_401_UNAUTHORIZED
        assert wrong_password.data == unknown_email.data == {'message': 'Invalid credentials'}

    def test_login_requires_both_fields(self, api_client):
        response = api_client.post('/api/auth/login', {'email': 'a@b.com'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'message': 'Email and password are required'}

    @pytest.mark.parametrize('body', [[1, 2], 'user@test.com', 42])
    def test_login_body_must_be_an_object(self, api_client, body):
        response = api_client.post('/api/auth/login', body, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'message': 'Email and password are required'}

    def test_login_ignores_stale_token(self, api_client, normal_user):
        api_client.credentials(HTTP_AUTHORIZATION='Bearer expired-or-garbage')
        response = api_client.post('/api/auth/login', {
            'email': normal_user.email,
            'password': PASSWORD,
        }, format='json')

        assert response.status_code == status.HTTP_200_OK


# ============== Change Password Tests ==============

@pytest.mark.django_db
class TestChangePassword:
    """POST /api/auth/change-password"""

    def test_change_password_success(self, user_client, normal_user):
        response = user_client.post('/api/auth/change-password', {
            'oldPassword': PASSWORD,
            'newPassword': 'Brandnew1!',
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'message': 'Password updated successfully'}
        normal_user.refresh_from_db()
        assert normal_user.check_password('Brandnew1!')

    def test_wrong_old_password(self, user_client, normal_user):
        response = user_client.post('/api/auth/change-password', {
            'oldPassword': 'Notmine1!',
            'newPassword': 'Brandnew1!',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'message': 'Old password is incorrect'}

    def test_new_password_must_follow_rules(self, user_client):
        response = user_client.post('/api/auth/change-password', {
            'oldPassword': PASSWORD,
            'newPassword': 'weakpass',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'message': 'Password must include at least one uppercase letter'}

    def test_list_body_treated_as_missing_passwords(self, user_client):
        response = user_client.post('/api/auth/change-password', [PASSWORD], format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'message': 'Old and new passwords are required'}

    def test_both_passwords_required(self, user_client):
        response = user_client.post('/api/auth/change-password', {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'message': 'Old and new passwords are required'}

    def test_requires_authentication(self, api_client):
        response = api_client.post('/api/auth/change-password', {}, format='json')
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_account_missing_is_404(self, api_client):
        ghost = User(id=999999, name='Ghost Account Long Name', email='ghost@test.com',
                     role=User.Role.USER)
        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {issue_token(ghost)}')
        response = api_client.post('/api/auth/change-password', {
            'oldPassword': 'Whatever1!',
            'newPassword': 'Brandnew1!',
        }, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND


# ============== Current User Tests ==============

@pytest.mark.django_db
class TestCurrentUser:
    """GET /api/me"""

    def test_me_returns_own_profile(self, owner_client, store_owner):
        response = owner_client.get('/api/me')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['id'] == store_owner.id
        assert response.data['role'] == 'STORE_OWNER'


# ============== Admin User Management Tests ==============

@pytest.mark.django_db
class TestAdminUserCreate:
    """POST /api/admin/users"""

    def test_admin_creates_store_owner(self, admin_client):
        response = admin_client.post('/api/admin/users', {
            **VALID_SIGNUP,
            'email': 'newowner@test.com',
            'role': 'STORE_OWNER',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['role'] == 'STORE_OWNER'
        assert User.objects.get(email='newowner@test.com').is_store_owner

    def test_invalid_role_rejected(self, admin_client):
        response = admin_client.post('/api/admin/users', {
            **VALID_SIGNUP, 'role': 'EMPEROR'
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'message': 'Invalid role'}

    def test_field_errors_come_first(self, admin_client):
        response = admin_client.post('/api/admin/users', {
            **VALID_SIGNUP, 'name': 'short', 'role': 'EMPEROR'
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'errors': {'name': 'Name must be at least 20 characters'}}

    def test_duplicate_email_rejected(self, admin_client, normal_user):
        response = admin_client.post('/api/admin/users', {
            **VALID_SIGNUP, 'email': normal_user.email, 'role': 'USER'
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'message': 'Email already exists'}

    def test_non_admin_forbidden(self, user_client):
        response = user_client.post('/api/admin/users', {
            **VALID_SIGNUP, 'role': 'ADMIN'
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data == {'message': 'Forbidden'}


@pytest.mark.django_db
class TestAdminUserList:
    """GET /api/admin/users"""

    def test_list_includes_owner_average(self, admin_client, store_owner, store, second_store,
                                         normal_user, second_user):
        from ratings.models import Rating
        Rating.objects.create(user=normal_user, store=store, rating=5)
        Rating.objects.create(user=second_user, store=store, rating=3)
        Rating.objects.create(user=normal_user, store=second_store, rating=1)

        response = admin_client.get('/api/admin/users')

        assert response.status_code == status.HTTP_200_OK
        by_email = {u['email']: u for u in response.data}
        assert by_email[store_owner.email]['ownerAverageRating'] == 3.0
        assert by_email[normal_user.email]['ownerAverageRating'] is None

    def test_owner_without_ratings_has_null_average(self, admin_client, store_owner, store):
        response = admin_client.get('/api/admin/users', {'role': 'STORE_OWNER'})

        assert [u['ownerAverageRating'] for u in response.data] == [None]

    def test_filters(self, admin_client, admin_user, normal_user, store_owner):
        by_role = admin_client.get('/api/admin/users', {'role': 'STORE_OWNER'})
        assert [u['id'] for u in by_role.data] == [store_owner.id]

        by_name = admin_client.get('/api/admin/users', {'name': 'normal user'})
        assert [u['id'] for u in by_name.data] == [normal_user.id]

        by_email = admin_client.get('/api/admin/users', {'email': 'OWNER@'})
        assert [u['id'] for u in by_email.data] == [store_owner.id]

        by_address = admin_client.get('/api/admin/users', {'address': 'admin street'})
        assert [u['id'] for u in by_address.data] == [admin_user.id]

    def test_sort_by_name_desc(self, admin_client, admin_user, normal_user, store_owner):
        response = admin_client.get('/api/admin/users', {'sortBy': 'name', 'sortOrder': 'desc'})

        names = [u['name'] for u in response.data]
        assert names == sorted(names, reverse=True)

    def test_unknown_sort_field_keeps_natural_order(self, admin_client, admin_user, normal_user,
                                                    store_owner):
        natural = admin_client.get('/api/admin/users')
        unknown = admin_client.get('/api/admin/users', {'sortBy': 'password', 'sortOrder': 'desc'})

        assert [u['id'] for u in unknown.data] == [u['id'] for u in natural.data]
        assert [u['id'] for u in natural.data] == [admin_user.id, normal_user.id, store_owner.id]

    def test_store_owner_forbidden(self, owner_client):
        response = owner_client.get('/api/admin/users')
        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestAdminUserDetail:
    """GET /api/admin/users/<id>"""

    def test_owner_detail_with_average(self, admin_client, store_owner, store, normal_user):
        from ratings.models import Rating
        Rating.objects.create(user=normal_user, store=store, rating=4)

        response = admin_client.get(f'/api/admin/users/{store_owner.id}')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['ownerAverageRating'] == 4.0
        assert response.data['role'] == 'STORE_OWNER'

    def test_normal_user_detail(self, admin_client, normal_user):
        response = admin_client.get(f'/api/admin/users/{normal_user.id}')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['ownerAverageRating'] is None

    def test_missing_user_is_404(self, admin_client):
        response = admin_client.get('/api/admin/users/424242')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {'message': 'User not found'}

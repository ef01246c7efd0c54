"""
Pytest fixtures for the store ratings API tests.
Provides users for every role, stores, tokens and authenticated clients.
"""
import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from users.authentication import issue_token

User = get_user_model()

TEST_PASSWORD = 'Testpass1!'


# ============== User Fixtures ==============

@pytest.fixture
def admin_user(db):
    """Create an admin user"""
    return User.objects.create_user(
        email='admin@test.com',
        password=TEST_PASSWORD,
        name='Administrator Test Account',
        address='1 Admin Street',
        role=User.Role.ADMIN
    )


@pytest.fixture
def normal_user(db):
    """Create a normal (rating) user"""
    return User.objects.create_user(
        email='user@test.com',
        password=TEST_PASSWORD,
        name='Normal User Test Account',
        address='2 User Street',
        role=User.Role.USER
    )


@pytest.fixture
def second_user(db):
    """Create a second normal user"""
    return User.objects.create_user(
        email='user2@test.com',
        password=TEST_PASSWORD,
        name='Second Normal User Account',
        address='3 User Street',
        role=User.Role.USER
    )


@pytest.fixture
def store_owner(db):
    """Create a store owner"""
    return User.objects.create_user(
        email='owner@test.com',
        password=TEST_PASSWORD,
        name='Store Owner Test Account',
        address='4 Owner Street',
        role=User.Role.STORE_OWNER
    )


@pytest.fixture
def second_owner(db):
    """Create a second store owner for isolation tests"""
    return User.objects.create_user(
        email='owner2@test.com',
        password=TEST_PASSWORD,
        name='Second Store Owner Account',
        address='5 Owner Street',
        role=User.Role.STORE_OWNER
    )


# ============== Store Fixtures ==============

@pytest.fixture
def store(db, store_owner):
    """Create a store owned by store_owner"""
    from stores.models import Store
    return Store.objects.create(
        name='Corner Grocery',
        email='grocery@test.com',
        address='10 Market Street',
        owner=store_owner
    )


@pytest.fixture
def second_store(db, store_owner):
    """Create a second store owned by store_owner"""
    from stores.models import Store
    return Store.objects.create(
        name='Book Nook',
        email='books@test.com',
        address='20 High Street',
        owner=store_owner
    )


@pytest.fixture
def unowned_store(db):
    """Create a store with no owner"""
    from stores.models import Store
    return Store.objects.create(
        name='Antique Emporium',
        email='antiques@test.com',
        address='30 Old Road'
    )


# ============== Token Fixtures ==============

@pytest.fixture
def admin_token(admin_user):
    return issue_token(admin_user)


@pytest.fixture
def user_token(normal_user):
    return issue_token(normal_user)


@pytest.fixture
def owner_token(store_owner):
    return issue_token(store_owner)


# ============== API Client Fixtures ==============

@pytest.fixture
def api_client():
    """Create API test client"""
    return APIClient()


@pytest.fixture
def admin_client(api_client, admin_token):
    """API client authenticated as admin"""
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {admin_token}')
    return api_client


@pytest.fixture
def user_client(api_client, user_token):
    """API client authenticated as a normal user"""
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {user_token}')
    return api_client


@pytest.fixture
def owner_client(api_client, owner_token):
    """API client authenticated as store owner"""
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {owner_token}')
    return api_client


@pytest.fixture
def client_for():
    """Factory for fresh API clients authenticated as a given user"""
    def make_client(user):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {issue_token(user)}')
        return client
    return make_client

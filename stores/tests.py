"""
Tests for Stores Module.
Tests for: Store model, admin store creation/listing, store browsing with
filters, sorting and the caller's own rating.
"""
import pytest
from django.core.exceptions import ValidationError
from rest_framework import status

from ratings.models import Rating
from stores.models import Store


NEW_STORE = {
    'name': 'Fresh Fish Counter',
    'email': 'fish@test.com',
    'address': '99 Wharf Road',
}


# ============== Store Model Tests ==============

@pytest.mark.django_db
class TestStoreModel:
    """Test Store model"""

    def test_store_str_representation(self, store):
        assert str(store) == 'Corner Grocery (grocery@test.com)'

    def test_owner_must_be_store_owner(self, normal_user):
        store = Store(name='Bad Owner', email='bad@test.com', address='1 Road', owner=normal_user)

        with pytest.raises(ValidationError):
            store.full_clean()

    def test_store_without_owner_is_valid(self):
        store = Store(name='Nobody Owns Me', email='free@test.com', address='1 Road')
        store.full_clean()


# ============== Admin Store API Tests ==============

@pytest.mark.django_db
class TestAdminStoreCreateAPI:
    """POST /api/admin/stores"""

    def test_create_store_with_owner(self, admin_client, store_owner):
        response = admin_client.post('/api/admin/stores', {
            **NEW_STORE, 'ownerId': store_owner.id
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['ownerId'] == store_owner.id
        assert response.data['name'] == NEW_STORE['name']
        assert Store.objects.get(email=NEW_STORE['email']).owner == store_owner

    def test_create_store_without_owner(self, admin_client):
        response = admin_client.post('/api/admin/stores', NEW_STORE, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['ownerId'] is None

    def test_owner_with_user_role_rejected(self, admin_client, normal_user):
        response = admin_client.post('/api/admin/stores', {
            **NEW_STORE, 'ownerId': normal_user.id
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'message': 'Invalid store owner'}
        assert not Store.objects.filter(email=NEW_STORE['email']).exists()

    def test_unknown_owner_rejected(self, admin_client):
        response = admin_client.post('/api/admin/stores', {
            **NEW_STORE, 'ownerId': 987654
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'message': 'Invalid store owner'}

    def test_field_errors(self, admin_client):
        response = admin_client.post('/api/admin/stores', {
            'name': '',
            'email': 'not-an-email',
            'address': 'a' * 401,
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['errors'] == {
            'name': 'Name is required',
            'email': 'Email is invalid',
            'address': 'Address must be at most 400 characters',
        }

    def test_duplicate_email_rejected(self, admin_client, store):
        response = admin_client.post('/api/admin/stores', {
            **NEW_STORE, 'email': store.email
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'message': 'Email already exists'}

    def test_store_owner_cannot_create(self, owner_client):
        response = owner_client.post('/api/admin/stores', NEW_STORE, format='json')
        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestAdminStoreListAPI:
    """GET /api/admin/stores"""

    def test_list_with_rating_summary(self, admin_client, store, second_store, normal_user,
                                      second_user):
        Rating.objects.create(user=normal_user, store=store, rating=5)
        Rating.objects.create(user=second_user, store=store, rating=2)

        response = admin_client.get('/api/admin/stores')

        assert response.status_code == status.HTTP_200_OK
        rows = {row['id']: row for row in response.data}
        assert rows[store.id]['rating'] == 3.5
        assert rows[store.id]['ratingCount'] == 2
        assert rows[second_store.id]['rating'] is None
        assert rows[second_store.id]['ratingCount'] == 0
        assert rows[store.id]['email'] == store.email

    def test_filter_by_email(self, admin_client, store, second_store):
        response = admin_client.get('/api/admin/stores', {'email': 'BOOKS'})
        assert [row['id'] for row in response.data] == [second_store.id]

    def test_sort_by_email(self, admin_client, store, second_store, unowned_store):
        response = admin_client.get('/api/admin/stores', {'sortBy': 'email'})

        emails = [row['email'] for row in response.data]
        assert emails == sorted(emails)

    def test_normal_user_forbidden(self, user_client):
        response = user_client.get('/api/admin/stores')
        assert response.status_code == status.HTTP_403_FORBIDDEN


# ============== Store Browsing API Tests ==============

@pytest.mark.django_db
class TestStoreListAPI:
    """GET /api/stores"""

    def test_list_includes_overall_and_own_rating(self, user_client, normal_user, second_user,
                                                   store, second_store):
        Rating.objects.create(user=normal_user, store=store, rating=4)
        Rating.objects.create(user=second_user, store=store, rating=2)
        Rating.objects.create(user=second_user, store=second_store, rating=5)

        response = user_client.get('/api/stores')

        assert response.status_code == status.HTTP_200_OK
        rows = {row['id']: row for row in response.data}
        assert rows[store.id]['overallRating'] == 3.0
        assert rows[store.id]['ratingCount'] == 2
        assert rows[store.id]['userRating'] == 4
        assert rows[second_store.id]['overallRating'] == 5.0
        assert rows[second_store.id]['userRating'] is None
        assert 'email' not in rows[store.id]

    def test_unrated_store(self, user_client, unowned_store):
        response = user_client.get('/api/stores')

        assert response.data == [{
            'id': unowned_store.id,
            'name': unowned_store.name,
            'address': unowned_store.address,
            'overallRating': None,
            'ratingCount': 0,
            'userRating': None,
        }]

    def test_any_role_can_browse(self, owner_client, admin_user, client_for, store):
        assert owner_client.get('/api/stores').status_code == status.HTTP_200_OK
        assert client_for(admin_user).get('/api/stores').status_code == status.HTTP_200_OK

    def test_requires_authentication(self, api_client):
        response = api_client.get('/api/stores')
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_filter_by_name_and_address(self, user_client, store, second_store, unowned_store):
        by_name = user_client.get('/api/stores', {'name': 'grocery'})
        assert [row['id'] for row in by_name.data] == [store.id]

        by_address = user_client.get('/api/stores', {'address': 'HIGH street'})
        assert [row['id'] for row in by_address.data] == [second_store.id]

    def test_email_filter_not_available_to_viewers(self, user_client, store, second_store):
        response = user_client.get('/api/stores', {'email': 'books'})
        assert len(response.data) == 2

    def test_sort_by_name_desc(self, user_client, store, second_store, unowned_store):
        response = user_client.get('/api/stores', {'sortBy': 'name', 'sortOrder': 'desc'})

        assert [row['name'] for row in response.data] == [
            'Corner Grocery', 'Book Nook', 'Antique Emporium'
        ]

    def test_sort_by_name_asc_is_default_direction(self, user_client, store, second_store,
                                                   unowned_store):
        response = user_client.get('/api/stores', {'sortBy': 'name', 'sortOrder': 'sideways'})

        assert [row['name'] for row in response.data] == [
            'Antique Emporium', 'Book Nook', 'Corner Grocery'
        ]

    def test_unknown_sort_field_keeps_natural_order(self, user_client, store, second_store,
                                                    unowned_store):
        response = user_client.get('/api/stores', {'sortBy': 'email', 'sortOrder': 'desc'})

        assert [row['id'] for row in response.data] == [store.id, second_store.id, unowned_store.id]

"""
Tests for Ratings Module.
Tests for: rating arithmetic, summary queries, the create/update rating
endpoints and the one-rating-per-user-and-store rule.
"""
from unittest import mock

import pytest
from django.db import IntegrityError, transaction
from django.db.models import QuerySet
from rest_framework import status

from main.exceptions import Conflict
from ratings.aggregation import average_rating, owner_average_rating, user_rating
from ratings.models import Rating
from ratings.queries import load_store_ratings, owner_averages, owner_average
from ratings.views import create_rating


# ============== Aggregation Tests ==============

class TestAggregation:
    """Pure rating arithmetic"""

    def test_average_rating(self):
        assert average_rating([4]) == 4.0
        assert average_rating([5, 3, 4]) == 4.0
        assert average_rating([1, 2]) == 1.5

    def test_average_of_nothing_is_none(self):
        assert average_rating([]) is None

    def test_owner_average_weights_every_rating(self):
        # store A [5, 3], store B [1]: (5 + 3 + 1) / 3, not mean of store means
        assert owner_average_rating([[5, 3], [1]]) == 3.0

    def test_owner_average_skips_unrated_stores(self):
        assert owner_average_rating([[], [2, 4], []]) == 3.0
        assert owner_average_rating([[], []]) is None
        assert owner_average_rating([]) is None

    @pytest.mark.parametrize('bad', [0, 6, -1, True, 2.5, '3'])
    def test_out_of_range_values_rejected(self, bad):
        with pytest.raises(ValueError):
            average_rating([3, bad])
        with pytest.raises(ValueError):
            owner_average_rating([[3], [bad]])

    def test_user_rating_lookup(self):
        rows = [mock.Mock(user_id=1, rating=2), mock.Mock(user_id=7, rating=5)]

        assert user_rating(rows, 7) == 5
        assert user_rating(rows, 3) is None
        assert user_rating([], 1) is None


# ============== Rating Model Tests ==============

@pytest.mark.django_db
class TestRatingModel:
    """Test Rating model constraints"""

    def test_one_rating_per_user_and_store(self, normal_user, store):
        Rating.objects.create(user=normal_user, store=store, rating=3)

        with pytest.raises(IntegrityError):
            with transaction.atomic():
                Rating.objects.create(user=normal_user, store=store, rating=4)

    def test_value_range_enforced_by_database(self, normal_user, store):
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                Rating.objects.create(user=normal_user, store=store, rating=6)

    def test_same_user_can_rate_different_stores(self, normal_user, store, second_store):
        Rating.objects.create(user=normal_user, store=store, rating=3)
        Rating.objects.create(user=normal_user, store=second_store, rating=5)

        assert normal_user.ratings.count() == 2


# ============== Query Tests ==============

@pytest.mark.django_db
class TestQueries:
    """Summary loading"""

    def test_load_store_ratings_preserves_order(self, store, second_store, unowned_store,
                                                normal_user):
        Rating.objects.create(user=normal_user, store=second_store, rating=2)

        summaries = load_store_ratings([unowned_store, store, second_store], viewer_id=normal_user.id)

        assert [s.store.id for s in summaries] == [unowned_store.id, store.id, second_store.id]
        assert [s.count for s in summaries] == [0, 0, 1]
        assert summaries[2].average == 2.0
        assert summaries[2].user_rating == 2
        assert summaries[0].average is None

    def test_user_rating_needs_viewer(self, store, normal_user):
        Rating.objects.create(user=normal_user, store=store, rating=4)

        summary = load_store_ratings([store])[0]
        assert summary.user_rating is None

    def test_owner_averages_across_owned_stores(self, store_owner, second_owner, store,
                                                second_store, normal_user, second_user):
        from stores.models import Store
        other = Store.objects.create(
            name='Other Owner Shop', email='other@test.com', address='8 Side St', owner=second_owner
        )
        Rating.objects.create(user=normal_user, store=store, rating=5)
        Rating.objects.create(user=second_user, store=store, rating=3)
        Rating.objects.create(user=normal_user, store=second_store, rating=1)
        Rating.objects.create(user=normal_user, store=other, rating=2)

        averages = owner_averages([store_owner.id, second_owner.id])

        assert averages == {store_owner.id: 3.0, second_owner.id: 2.0}
        assert owner_average(store_owner.id) == 3.0

    def test_owner_without_ratings(self, store_owner, store):
        assert owner_average(store_owner.id) is None


# ============== Rating Submission API Tests ==============

@pytest.mark.django_db
class TestSubmitRatingAPI:
    """POST / PUT /api/stores/<id>/ratings"""

    def url(self, store):
        return f'/api/stores/{store.id}/ratings'

    def test_create_then_update(self, user_client, normal_user, store):
        created = user_client.post(self.url(store), {'rating': 4}, format='json')

        assert created.status_code == status.HTTP_201_CREATED
        assert created.data['rating'] == 4
        assert created.data['userId'] == normal_user.id
        assert created.data['storeId'] == store.id

        listing = {row['id']: row for row in user_client.get('/api/stores').data}
        assert listing[store.id]['overallRating'] == 4.0
        assert listing[store.id]['ratingCount'] == 1

        duplicate = user_client.post(self.url(store), {'rating': 5}, format='json')
        assert duplicate.status_code == status.HTTP_400_BAD_REQUEST
        assert duplicate.data == {'message': 'Rating already exists. Use PUT to update.'}

        updated = user_client.put(self.url(store), {'rating': 2}, format='json')
        assert updated.status_code == status.HTTP_200_OK
        assert updated.data['id'] == created.data['id']
        assert updated.data['rating'] == 2

        listing = {row['id']: row for row in user_client.get('/api/stores').data}
        assert listing[store.id]['overallRating'] == 2.0
        assert listing[store.id]['ratingCount'] == 1
        assert listing[store.id]['userRating'] == 2

    def test_update_without_rating_is_404(self, user_client, store):
        response = user_client.put(self.url(store), {'rating': 3}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {'message': 'Rating does not exist. Use POST to create.'}
        assert not Rating.objects.exists()

    def test_unknown_store_is_404(self, user_client):
        response = user_client.post('/api/stores/31337/ratings', {'rating': 3}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {'message': 'Store not found'}

    @pytest.mark.parametrize('value', [0, 6, -2, 3.5, '4', True, None])
    def test_invalid_values_rejected(self, user_client, store, value):
        response = user_client.post(self.url(store), {'rating': value}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'message': 'Rating must be an integer between 1 and 5'}
        assert not Rating.objects.exists()

    def test_missing_value_rejected(self, user_client, store):
        response = user_client.post(self.url(store), {}, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_whole_float_accepted(self, user_client, store):
        response = user_client.post(self.url(store), {'rating': 5.0}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['rating'] == 5

    def test_only_normal_users_can_rate(self, owner_client, admin_user, client_for, store):
        assert owner_client.post(self.url(store), {'rating': 3}, format='json').status_code == \
            status.HTTP_403_FORBIDDEN
        assert client_for(admin_user).put(self.url(store), {'rating': 3}, format='json').status_code == \
            status.HTTP_403_FORBIDDEN

    def test_requires_authentication(self, api_client, store):
        response = api_client.post(self.url(store), {'rating': 3}, format='json')
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_ratings_are_per_user(self, user_client, client_for, second_user, store):
        user_client.post(self.url(store), {'rating': 5}, format='json')
        response = client_for(second_user).post(self.url(store), {'rating': 1}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert Rating.objects.filter(store=store).count() == 2

    def test_deleted_account_is_404(self, client_for, normal_user, store):
        client = client_for(normal_user)
        normal_user.delete()

        for method in (client.post, client.put):
            response = method(self.url(store), {'rating': 3}, format='json')
            assert response.status_code == status.HTTP_404_NOT_FOUND
            assert response.data == {'message': 'User not found'}
        assert not Rating.objects.exists()

    def test_racing_create_surfaces_as_conflict(self, normal_user, store):
        # Both requests passed the existence check; the second insert hits the
        # unique constraint.
        Rating.objects.create(user=normal_user, store=store, rating=4)

        with mock.patch.object(QuerySet, 'exists', return_value=False):
            with pytest.raises(Conflict):
                create_rating(normal_user.id, store, 2)

        assert Rating.objects.get(user=normal_user, store=store).rating == 4

"""
Unit Tests for Dashboard Module
Tests for: admin dashboard stats and the store owner dashboard
"""
from rest_framework.test import APITestCase, APIClient
from rest_framework import status

from users.models import User
from stores.models import Store
from ratings.models import Rating


def make_user(email, role, name='Dashboard Test Person Name'):
    return User.objects.create_user(
        email=email,
        password='Testpass1!',
        name=name,
        address='1 Dashboard Lane',
        role=role
    )


class AdminDashboardStatsAPITest(APITestCase):
    """Test cases for the admin dashboard stats endpoint"""

    def setUp(self):
        self.admin = make_user('admin@test.com', User.Role.ADMIN)
        self.owner = make_user('owner@test.com', User.Role.STORE_OWNER)
        self.rater = make_user('rater@test.com', User.Role.USER)
        self.store = Store.objects.create(
            name='Stats Store', email='stats@test.com', address='2 Stats Road', owner=self.owner
        )
        Store.objects.create(name='Second Stats Store', email='stats2@test.com', address='3 Stats Road')
        Rating.objects.create(user=self.rater, store=self.store, rating=4)
        self.client = APIClient()

    def test_dashboard_stats_totals(self):
        """Totals count every user, store and rating"""
        self.client.force_authenticate(user=self.admin)
        response = self.client.get('/api/admin/dashboard-stats')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.assertEqual(response.data, {
            'totalUsers': 3,
            'totalStores': 2,
            'totalRatings': 1,
        })

    def test_dashboard_stats_forbidden_for_non_admin(self):
        """Only admins see platform totals"""
        for user in (self.owner, self.rater):
            self.client.force_authenticate(user=user)
            response = self.client.get('/api/admin/dashboard-stats')
            self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_dashboard_stats_unauthenticated(self):
        """Test unauthenticated access is denied"""
        response = self.client.get('/api/admin/dashboard-stats')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class OwnerDashboardAPITest(APITestCase):
    """Test cases for the store owner dashboard"""

    def setUp(self):
        self.owner = make_user('owner@test.com', User.Role.STORE_OWNER)
        self.other_owner = make_user('other@test.com', User.Role.STORE_OWNER)
        self.alice = make_user('alice@test.com', User.Role.USER, name='Alice Rater Long Name')
        self.bob = make_user('bob@test.com', User.Role.USER, name='Bob Rater Longer Name')

        self.store_a = Store.objects.create(
            name='Store A', email='a@test.com', address='A Street', owner=self.owner
        )
        self.store_b = Store.objects.create(
            name='Store B', email='b@test.com', address='B Street', owner=self.owner
        )
        self.foreign = Store.objects.create(
            name='Foreign Store', email='f@test.com', address='F Street', owner=self.other_owner
        )

        Rating.objects.create(user=self.alice, store=self.store_a, rating=5)
        Rating.objects.create(user=self.bob, store=self.store_a, rating=3)
        Rating.objects.create(user=self.alice, store=self.store_b, rating=1)
        Rating.objects.create(user=self.bob, store=self.foreign, rating=2)
        self.client = APIClient()

    def test_owner_sees_own_stores_only(self):
        self.client.force_authenticate(user=self.owner)
        response = self.client.get('/api/owner/dashboard')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.assertEqual([row['id'] for row in response.data], [self.store_a.id, self.store_b.id])

    def test_store_averages_and_raters(self):
        self.client.force_authenticate(user=self.owner)
        response = self.client.get('/api/owner/dashboard')

        store_a = response.data[0]
        self.assertEqual(store_a['averageRating'], 4.0)
        self.assertEqual(store_a['ratingCount'], 2)
        self.assertEqual(
            [(r['user']['email'], r['rating']) for r in store_a['ratings']],
            [('alice@test.com', 5), ('bob@test.com', 3)]
        )
        self.assertEqual(
            set(store_a['ratings'][0]['user']),
            {'id', 'name', 'email', 'address'}
        )

        store_b = response.data[1]
        self.assertEqual(store_b['averageRating'], 1.0)
        self.assertEqual(store_b['ratingCount'], 1)

    def test_owner_with_no_stores(self):
        lonely = make_user('lonely@test.com', User.Role.STORE_OWNER)
        self.client.force_authenticate(user=lonely)
        response = self.client.get('/api/owner/dashboard')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [])

    def test_unrated_store_has_null_average(self):
        Store.objects.create(name='Store C', email='c@test.com', address='C Street', owner=self.owner)
        self.client.force_authenticate(user=self.owner)
        response = self.client.get('/api/owner/dashboard')

        store_c = response.data[2]
        self.assertIsNone(store_c['averageRating'])
        self.assertEqual(store_c['ratingCount'], 0)
        self.assertEqual(store_c['ratings'], [])

    def test_normal_user_forbidden(self):
        self.client.force_authenticate(user=self.alice)
        response = self.client.get('/api/owner/dashboard')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

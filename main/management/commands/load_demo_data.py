"""
Django management command to load demo data for the store ratings platform.
Creates an administrator, store owners, normal users, stores and ratings.
"""

from django.core.management.base import BaseCommand
from django.db import transaction


DEMO_PASSWORD = 'Demo1234@'

OWNERS = [
    ('Margaret Owner Hutchinson', 'owner.margaret@example.com', '12 Harbour Road, Seaview'),
    ('Rajesh Owner Venkataraman', 'owner.rajesh@example.com', '88 Station Street, Hillside'),
]

USERS = [
    ('Alexandra Customer Benson', 'alex@example.com', '4 Elm Close, Seaview'),
    ('Jonathan Customer Whitaker', 'jon@example.com', '19 Mill Lane, Hillside'),
    ('Priyanka Customer Ramaswamy', 'priya@example.com', '7 Orchard Row, Riverside'),
]

STORES = [
    # name, email, address, owner index (or None)
    ('Seaview Fresh Market', 'fresh@seaview.example.com', '1 Promenade, Seaview', 0),
    ('Seaview Hardware', 'hardware@seaview.example.com', '3 Promenade, Seaview', 0),
    ('Hillside Books', 'books@hillside.example.com', '22 Station Street, Hillside', 1),
    ('Riverside Bakery', 'bakery@riverside.example.com', '5 Quay Street, Riverside', None),
]

RATINGS = [
    # user index, store index, value
    (0, 0, 5), (1, 0, 3), (2, 0, 4),
    (0, 1, 2),
    (1, 2, 5), (2, 2, 4),
    (0, 3, 3),
]


class Command(BaseCommand):
    help = 'Load demo data (admin, store owners, users, stores, ratings)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing stores and ratings before loading demo data',
        )
        parser.add_argument(
            '--admin-email',
            type=str,
            default='admin@example.com',
            help='Administrator email (default: admin@example.com)',
        )
        parser.add_argument(
            '--admin-password',
            type=str,
            default=DEMO_PASSWORD,
            help=f'Administrator password (default: {DEMO_PASSWORD})',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        from users.models import User
        from stores.models import Store
        from ratings.models import Rating

        self.stdout.write(self.style.NOTICE('Loading demo data...'))

        if options['clear']:
            Rating.objects.all().delete()
            Store.objects.all().delete()
            self.stdout.write(self.style.WARNING('Cleared stores and ratings'))

        admin = self._get_or_create_user(
            User,
            email=options['admin_email'],
            name='Platform Administrator Account',
            address='Head Office, 1 Admin Way',
            role=User.Role.ADMIN,
            password=options['admin_password'],
            is_staff=True,
            is_superuser=True,
        )

        owners = [
            self._get_or_create_user(
                User, email=email, name=name, address=address,
                role=User.Role.STORE_OWNER, password=DEMO_PASSWORD,
            )
            for name, email, address in OWNERS
        ]

        users = [
            self._get_or_create_user(
                User, email=email, name=name, address=address,
                role=User.Role.USER, password=DEMO_PASSWORD,
            )
            for name, email, address in USERS
        ]

        stores = []
        for name, email, address, owner_index in STORES:
            store, created = Store.objects.get_or_create(
                email=email,
                defaults={
                    'name': name,
                    'address': address,
                    'owner': owners[owner_index] if owner_index is not None else None,
                }
            )
            if created:
                self.stdout.write(self.style.SUCCESS(f'Created store: {store.name}'))
            stores.append(store)

        rating_count = 0
        for user_index, store_index, value in RATINGS:
            _, created = Rating.objects.get_or_create(
                user=users[user_index],
                store=stores[store_index],
                defaults={'rating': value},
            )
            rating_count += int(created)

        self.stdout.write(self.style.SUCCESS(f'Created {rating_count} ratings'))
        self.stdout.write(self.style.SUCCESS(
            f'Demo data ready. Admin login: {admin.email}; other accounts use {DEMO_PASSWORD}'
        ))

    def _get_or_create_user(self, User, email, password, **fields):
        user = User.objects.filter(email=email).first()
        if user is not None:
            self.stdout.write(f'User already exists: {email}')
            return user

        user = User.objects.create_user(email=email, password=password, **fields)
        self.stdout.write(self.style.SUCCESS(f'Created {user.role} user: {email}'))
        return user

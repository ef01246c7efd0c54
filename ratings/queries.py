"""
Explicit data access for rating summaries.

Each function issues a fixed number of queries and hands back plain
objects, so the arithmetic in `ratings.aggregation` only ever sees lists.
"""
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from .aggregation import average_rating, owner_average_rating, user_rating
from .models import Rating


class StoreRatings:
    """A store together with all of its Rating rows."""

    def __init__(self, store, ratings: List[Rating], viewer_id: Optional[int] = None):
        self.store = store
        self.ratings = ratings
        self.viewer_id = viewer_id

    @property
    def values(self) -> List[int]:
        return [r.rating for r in self.ratings]

    @property
    def average(self) -> Optional[float]:
        return average_rating(self.values)

    @property
    def count(self) -> int:
        return len(self.ratings)

    @property
    def user_rating(self) -> Optional[int]:
        if self.viewer_id is None:
            return None
        return user_rating(self.ratings, self.viewer_id)


def load_store_ratings(stores, viewer_id=None, with_users=False) -> List[StoreRatings]:
    """
    Pair every store with its ratings using one extra query.

    Args:
        stores: iterable of Store (queryset order is preserved)
        viewer_id: id of the caller, to resolve their own rating per store
        with_users: also load each rating's user
    """
    stores = list(stores)
    ratings_qs = Rating.objects.filter(store_id__in=[s.id for s in stores])
    if with_users:
        ratings_qs = ratings_qs.select_related('user')

    by_store = defaultdict(list)
    for rating in ratings_qs:
        by_store[rating.store_id].append(rating)

    return [StoreRatings(store, by_store[store.id], viewer_id) for store in stores]


def owner_averages(owner_ids: Iterable[int]) -> Dict[int, Optional[float]]:
    """Owner average for each id in `owner_ids`; None for owners with no ratings."""
    owner_ids = list(owner_ids)
    rows = Rating.objects.filter(
        store__owner_id__in=owner_ids
    ).values_list('store__owner_id', 'store_id', 'rating')

    per_owner = defaultdict(lambda: defaultdict(list))
    for owner_id, store_id, value in rows:
        per_owner[owner_id][store_id].append(value)

    return {
        owner_id: owner_average_rating(per_owner[owner_id].values())
        for owner_id in owner_ids
    }


def owner_average(owner_id: int) -> Optional[float]:
    return owner_averages([owner_id])[owner_id]

"""
Rating arithmetic over plain in-memory values.

Averages are None when there is nothing to average. Values outside the
1-5 range are rejected outright; callers never see them as "no rating".
"""
from typing import Iterable, Optional, Sequence

from .models import RATING_MAX, RATING_MIN


def _check_value(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not RATING_MIN <= value <= RATING_MAX:
        raise ValueError(f"Rating value out of range: {value!r}")
    return value


def average_rating(values: Iterable[int]) -> Optional[float]:
    """Mean of one store's rating values, or None when unrated."""
    values = [_check_value(v) for v in values]
    if not values:
        return None
    return sum(values) / len(values)


def owner_average_rating(groups: Iterable[Sequence[int]]) -> Optional[float]:
    """
    Mean across every rating of every store an owner holds.

    Each store contributes its ratings individually, so a store with many
    ratings weighs more than one with few.
    """
    total = 0
    count = 0
    for values in groups:
        for value in values:
            total += _check_value(value)
            count += 1
    if not count:
        return None
    return total / count


def user_rating(ratings, user_id) -> Optional[int]:
    """The value `user_id` gave, from a store's Rating rows, or None if not rated."""
    for rating in ratings:
        if rating.user_id == user_id:
            return _check_value(rating.rating)
    return None

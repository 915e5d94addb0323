"""Cache keys for read endpoints and their invalidation.

Only projections without time-derived fields are cached; session payloads
carry is_upcoming/is_full and are always built fresh.
"""

from django.conf import settings
from django.core.cache import cache

TRAININGS_LIST_KEY = "trainings:list"
PERSONS_LIST_KEY = "persons:list"
TRAINERS_LIST_KEY = "persons:trainers"


def cache_timeout() -> int:
    return settings.TRAININGS["CACHE_TIMEOUT"]


def invalidate_trainings() -> None:
    cache.delete(TRAININGS_LIST_KEY)


def invalidate_persons() -> None:
    cache.delete_many([PERSONS_LIST_KEY, TRAINERS_LIST_KEY])

"""Django signals for cache invalidation.

ORM writes made through the admin arrive as post_save/post_delete. Store
writes update the training row with a version-checked queryset update, which
sends no model signal, so the store sends ``training_saved`` after commit.
"""

import logging

from django.db.models.signals import post_delete, post_save
from django.dispatch import Signal, receiver

from trainings.cache import invalidate_persons, invalidate_trainings
from trainings.models import Person, Training

logger = logging.getLogger(__name__)

# Sent with ``training_id`` once a training aggregate save has committed.
training_saved = Signal()


@receiver(training_saved)
def invalidate_on_aggregate_save(sender, training_id, **kwargs):
    """Invalidate caches when a training aggregate is saved by a store."""
    logger.debug("Invalidating training caches after save of %s", training_id)
    invalidate_trainings()


@receiver([post_save, post_delete], sender=Training)
def invalidate_training_cache(sender, instance, **kwargs):
    """Invalidate caches when a training row is saved or deleted."""
    invalidate_trainings()


@receiver([post_save, post_delete], sender=Person)
def invalidate_person_cache(sender, instance, **kwargs):
    """Invalidate caches when a person is saved or deleted."""
    invalidate_persons()

"""Load-mutate-save cycle for the Training aggregate.

Every change to a training or one of its sessions goes through
``mutate_training``: the training is locked, loaded with all its sessions,
handed to the mutation, and saved as a whole. A save that finds the stored
version moved on is retried from a fresh load.
"""

import logging
from collections.abc import Callable
from typing import TypeVar

from trainings.domain import Training, TrainingId
from trainings.domain.errors import (
    ConcurrentModificationError,
    DomainError,
    TrainingNotFoundError,
)
from trainings.stores.interfaces import StaleAggregateError, TrainingStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


def mutate_training(
    store: TrainingStore,
    training_id: TrainingId,
    mutation: Callable[[Training], T],
    save_retries: int,
) -> T:
    """Apply ``mutation`` to the latest committed state of a training.

    Raises:
        TrainingNotFoundError: If the training does not exist.
        ConcurrentModificationError: If every attempt lost a save race.
        DomainError: Whatever the mutation raises, unchanged.
    """
    attempts = save_retries + 1
    for attempt in range(1, attempts + 1):
        try:
            with store.lock_training(training_id):
                training = store.get_training_with_sessions(training_id)
                if training is None:
                    raise TrainingNotFoundError(str(training_id))
                result = mutation(training)
                store.save_training(training)
                return result
        except StaleAggregateError:
            logger.warning(
                "Training %s changed during save (attempt %d/%d), reloading",
                training_id,
                attempt,
                attempts,
            )
        except DomainError as exc:
            logger.info("Rejected change to training %s: %s", training_id, exc.code.value)
            raise
    raise ConcurrentModificationError(str(training_id), attempts)

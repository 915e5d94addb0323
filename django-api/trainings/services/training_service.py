"""Training service - use cases on the Training aggregate root.

Services:
- Depend only on interfaces (stores)
- Leave business rules to the domain entities
- Perform orchestration and error mapping
- Return projections or raise domain errors
"""

import logging

from django.conf import settings

from trainings.domain import Training, TrainingId, UserId
from trainings.domain.errors import TrainingNotFoundError
from trainings.services.aggregate import mutate_training
from trainings.services.dtos import (
    CreateTrainingRequest,
    TrainingDTO,
    TrainingWithSessionsDTO,
    UpdateTrainingRequest,
)
from trainings.stores.interfaces import TrainingStore

logger = logging.getLogger(__name__)


class TrainingService:
    """Service for creating, reading and editing trainings."""

    def __init__(self, store: TrainingStore, save_retries: int | None = None) -> None:
        self._store = store
        self._save_retries = (
            settings.TRAININGS["SAVE_RETRIES"] if save_retries is None else save_retries
        )

    def create_training(self, request: CreateTrainingRequest, actor_id: UserId) -> TrainingDTO:
        """Create a training owned by the authenticated actor.

        Raises:
            ValidationError: If the topic is empty or too long.
        """
        training = Training(request.topic, request.description, actor_id)
        self._store.save_training(training)
        logger.info("Training %s created by %s", training.id, actor_id)
        return TrainingDTO.from_domain(training)

    def get_training(self, training_id: str) -> TrainingWithSessionsDTO:
        """Return a training with its sessions.

        Raises:
            InvalidIdError: If the training_id is not a valid UUID.
            TrainingNotFoundError: If the training does not exist.
        """
        parsed = TrainingId.from_string(training_id)
        training = self._store.get_training_with_sessions(parsed)
        if training is None:
            raise TrainingNotFoundError(training_id)
        return TrainingWithSessionsDTO.from_domain(training)

    def list_trainings(self) -> list[TrainingDTO]:
        return [TrainingDTO.from_domain(t) for t in self._store.list_trainings()]

    def list_user_trainings(self, actor_id: UserId) -> list[TrainingDTO]:
        return [TrainingDTO.from_domain(t) for t in self._store.list_trainings_for_user(actor_id)]

    def update_training(self, training_id: str, request: UpdateTrainingRequest) -> TrainingDTO:
        """Change topic and description.

        Raises:
            InvalidIdError: If the training_id is not a valid UUID.
            TrainingNotFoundError: If the training does not exist.
            ValidationError: If the topic is empty or too long.
        """
        parsed = TrainingId.from_string(training_id)

        def update(training: Training) -> Training:
            training.update_details(request.topic, request.description)
            return training

        training = mutate_training(self._store, parsed, update, self._save_retries)
        logger.info("Training %s details updated", parsed)
        return TrainingDTO.from_domain(training)

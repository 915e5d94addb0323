"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.

A Training is stored and loaded as a whole: the root plus every session it
owns, including each session's roster. ``save_training`` atomically replaces
whatever was stored for that training before.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime

from trainings.domain import (
    Person,
    PersonId,
    SessionId,
    Training,
    TrainingId,
    TrainingSession,
    UserId,
)


class StaleAggregateError(Exception):
    """The stored training changed since it was loaded.

    Raised by ``save_training`` when the aggregate's version no longer matches
    the stored version. Callers reload and retry.
    """

    def __init__(self, training_id: TrainingId, expected_version: int) -> None:
        super().__init__(
            f"Training {training_id} is no longer at version {expected_version}"
        )
        self.training_id = training_id
        self.expected_version = expected_version


class TrainingStore(ABC):
    """Interface for training aggregate persistence."""

    @abstractmethod
    def get_training(self, training_id: TrainingId) -> Training | None:
        """Return the training root without its sessions, or None if not found.

        Meant for read-only use; never save an aggregate loaded this way.
        """
        ...

    @abstractmethod
    def get_training_with_sessions(self, training_id: TrainingId) -> Training | None:
        """Return the fully materialized aggregate, or None if not found."""
        ...

    @abstractmethod
    def list_trainings(self) -> list[Training]:
        """Return all trainings with sessions, ordered by created_at descending."""
        ...

    @abstractmethod
    def list_trainings_for_user(self, user_id: UserId) -> list[Training]:
        """Return trainings created by a user, ordered by created_at descending."""
        ...

    @abstractmethod
    def find_training_id_for_session(self, session_id: SessionId) -> TrainingId | None:
        """Return the id of the training owning a session, or None."""
        ...

    @abstractmethod
    def list_sessions_for_training(self, training_id: TrainingId) -> list[TrainingSession]:
        """Return the sessions of a training in insertion order."""
        ...

    @abstractmethod
    def list_upcoming_sessions(self, now: datetime) -> list[TrainingSession]:
        """Return sessions dated strictly after ``now``, soonest first."""
        ...

    @abstractmethod
    def save_training(self, training: Training) -> None:
        """Persist the whole aggregate and advance ``training.version``.

        Raises:
            StaleAggregateError: If the stored version differs from the
                aggregate's version.
        """
        ...

    @abstractmethod
    def lock_training(self, training_id: TrainingId) -> AbstractContextManager[None]:
        """Hold an exclusive lock on one training for a load-mutate-save cycle."""
        ...


class PersonStore(ABC):
    """Interface for person persistence operations."""

    @abstractmethod
    def get_person(self, person_id: PersonId) -> Person | None:
        """Return a person by ID, or None if not found."""
        ...

    @abstractmethod
    def list_persons(self) -> list[Person]:
        """Return all persons ordered by full name."""
        ...

    @abstractmethod
    def list_trainers(self) -> list[Person]:
        """Return persons flagged as trainers, ordered by full name."""
        ...

    @abstractmethod
    def save_person(self, person: Person) -> None:
        """Insert or replace a person."""
        ...

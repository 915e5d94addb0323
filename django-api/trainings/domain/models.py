"""Domain models for trainings, their sessions and the people attending them.

These are pure domain objects with no API input rules and no persistence
concerns. Django ORM models are in trainings/models.py (persistence layer).

Every entity has two ways in:
- the public constructor, which validates and is what application code uses;
- ``rehydrate``, which stores call to rebuild state that was already
  validated when it was first created.

A Training owns its sessions. Sessions are only ever created through
``Training.add_session`` and are only reachable through their Training.
"""

from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Self

from trainings.domain.errors import (
    CapacityExceededError,
    CapacityReductionError,
    DuplicateRegistrationError,
    NotRegisteredError,
    ValidationError,
)
from trainings.domain.value_objects import (
    Email,
    MembershipId,
    PersonId,
    SessionId,
    TrainingId,
    UserId,
)

TOPIC_MAX_LENGTH = 500
DESCRIPTION_MAX_LENGTH = 2000
TITLE_MAX_LENGTH = 500
FULL_NAME_MAX_LENGTH = 200


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _require_text(value: str | None, field: str, max_length: int) -> str:
    if value is None or not value.strip():
        raise ValidationError(
            f"{field.replace('_', ' ').capitalize()} cannot be empty", field=field
        )
    if len(value) > max_length:
        raise ValidationError(
            f"{field.replace('_', ' ').capitalize()} cannot exceed {max_length} characters",
            field=field,
        )
    return value


def _optional_text(value: str | None, field: str, max_length: int) -> str | None:
    if value is not None and len(value) > max_length:
        raise ValidationError(
            f"{field.replace('_', ' ').capitalize()} cannot exceed {max_length} characters",
            field=field,
        )
    return value


def _require_aware(value: datetime, field: str) -> datetime:
    if not isinstance(value, datetime):
        raise ValidationError(f"{field.capitalize()} must be a datetime", field=field)
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValidationError(f"{field.capitalize()} must be timezone-aware", field=field)
    return value


def _require_capacity(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("Max attendees must be an integer", field="max_attendees")
    if value <= 0:
        raise ValidationError(
            "Max attendees must be greater than zero", field="max_attendees"
        )
    return value


class Person:
    """Someone who can attend sessions and, if flagged, run them."""

    def __init__(
        self,
        full_name: str,
        email: Email,
        membership_id: MembershipId | None = None,
        is_trainer: bool = False,
    ) -> None:
        if not isinstance(email, Email):
            raise ValidationError("Email cannot be empty", field="email")
        self.id = PersonId.new()
        self.full_name = _require_text(full_name, "full_name", FULL_NAME_MAX_LENGTH)
        self.email = email
        self.membership_id = membership_id
        self.is_trainer = bool(is_trainer)

    @classmethod
    def rehydrate(
        cls,
        id: PersonId,
        full_name: str,
        email: Email,
        membership_id: MembershipId | None,
        is_trainer: bool,
    ) -> Self:
        person = cls.__new__(cls)
        person.id = id
        person.full_name = full_name
        person.email = email
        person.membership_id = membership_id
        person.is_trainer = is_trainer
        return person

    @property
    def is_member(self) -> bool:
        return self.membership_id is not None

    @property
    def is_guest(self) -> bool:
        return self.membership_id is None

    def set_trainer_status(self, is_trainer: bool) -> None:
        self.is_trainer = bool(is_trainer)

    def assign_membership(self, membership_id: MembershipId) -> None:
        self.membership_id = membership_id

    def __repr__(self) -> str:
        return f"Person(id={self.id}, full_name={self.full_name!r})"


class TrainingSession:
    """A dated occurrence of a Training with a bounded attendee roster.

    Invariants, held after every mutation:
    - max_attendees > 0
    - len(attendee_ids) <= max_attendees
    - no person appears twice on the roster
    """

    def __init__(
        self,
        training_id: TrainingId,
        title: str,
        date: datetime,
        trainer_id: PersonId,
        max_attendees: int,
    ) -> None:
        self.id = SessionId.new()
        self.training_id = training_id
        self.title = _require_text(title, "title", TITLE_MAX_LENGTH)
        self.date = _require_aware(date, "date")
        self.trainer_id = trainer_id
        self.max_attendees = _require_capacity(max_attendees)
        self._attendee_ids: list[PersonId] = []

    @classmethod
    def rehydrate(
        cls,
        id: SessionId,
        training_id: TrainingId,
        title: str,
        date: datetime,
        trainer_id: PersonId,
        max_attendees: int,
        attendee_ids: Iterable[PersonId] = (),
    ) -> Self:
        session = cls.__new__(cls)
        session.id = id
        session.training_id = training_id
        session.title = title
        session.date = date
        session.trainer_id = trainer_id
        session.max_attendees = max_attendees
        session._attendee_ids = list(attendee_ids)
        return session

    @property
    def attendee_ids(self) -> tuple[PersonId, ...]:
        """Roster in registration order."""
        return tuple(self._attendee_ids)

    @property
    def attendee_count(self) -> int:
        return len(self._attendee_ids)

    @property
    def is_full(self) -> bool:
        return len(self._attendee_ids) >= self.max_attendees

    @property
    def available_spots(self) -> int:
        return self.max_attendees - len(self._attendee_ids)

    @property
    def is_upcoming(self) -> bool:
        return self.is_upcoming_at(utcnow())

    def is_upcoming_at(self, now: datetime) -> bool:
        return self.date > now

    def register_attendee(self, person_id: PersonId) -> None:
        if self.is_full:
            raise CapacityExceededError(str(self.id))
        if person_id in self._attendee_ids:
            raise DuplicateRegistrationError(str(self.id), str(person_id))
        self._attendee_ids.append(person_id)

    def unregister_attendee(self, person_id: PersonId) -> None:
        if person_id not in self._attendee_ids:
            raise NotRegisteredError(str(self.id), str(person_id))
        self._attendee_ids.remove(person_id)

    def update_details(self, title: str, date: datetime, max_attendees: int) -> None:
        # Validate everything first so a failure leaves the session untouched.
        title = _require_text(title, "title", TITLE_MAX_LENGTH)
        date = _require_aware(date, "date")
        max_attendees = _require_capacity(max_attendees)
        if max_attendees < len(self._attendee_ids):
            raise CapacityReductionError(max_attendees, len(self._attendee_ids))

        self.title = title
        self.date = date
        self.max_attendees = max_attendees

    def __repr__(self) -> str:
        return (
            f"TrainingSession(id={self.id}, title={self.title!r}, "
            f"attendees={len(self._attendee_ids)}/{self.max_attendees})"
        )


class Training:
    """Aggregate root: a topic plus the sessions scheduled for it.

    ``version`` is the optimistic-concurrency token. It is 0 for a training
    that was never saved and is advanced by stores on every successful save.
    """

    def __init__(
        self,
        topic: str,
        description: str | None,
        created_by_user_id: UserId,
    ) -> None:
        self.id = TrainingId.new()
        self.topic = _require_text(topic, "topic", TOPIC_MAX_LENGTH)
        self.description = _optional_text(description, "description", DESCRIPTION_MAX_LENGTH)
        self.created_by_user_id = created_by_user_id
        self.created_at = utcnow()
        self.version = 0
        self._sessions: list[TrainingSession] = []

    @classmethod
    def rehydrate(
        cls,
        id: TrainingId,
        topic: str,
        description: str | None,
        created_by_user_id: UserId,
        created_at: datetime,
        sessions: Iterable[TrainingSession] = (),
        version: int = 0,
    ) -> Self:
        training = cls.__new__(cls)
        training.id = id
        training.topic = topic
        training.description = description
        training.created_by_user_id = created_by_user_id
        training.created_at = created_at
        training.version = version
        training._sessions = list(sessions)
        return training

    @property
    def sessions(self) -> tuple[TrainingSession, ...]:
        """Owned sessions in the order they were added."""
        return tuple(self._sessions)

    def get_session(self, session_id: SessionId) -> TrainingSession | None:
        for session in self._sessions:
            if session.id == session_id:
                return session
        return None

    def add_session(
        self,
        title: str,
        date: datetime,
        trainer_id: PersonId,
        max_attendees: int,
    ) -> TrainingSession:
        session = TrainingSession(self.id, title, date, trainer_id, max_attendees)
        self._sessions.append(session)
        return session

    def update_details(self, topic: str, description: str | None) -> None:
        topic = _require_text(topic, "topic", TOPIC_MAX_LENGTH)
        description = _optional_text(description, "description", DESCRIPTION_MAX_LENGTH)
        self.topic = topic
        self.description = description

    def __repr__(self) -> str:
        return f"Training(id={self.id}, topic={self.topic!r}, sessions={len(self._sessions)})"

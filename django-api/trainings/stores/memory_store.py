"""In-memory stores.

Used by the service and concurrency tests, which run the services without a
database. The views always wire in the Django stores.
Aggregates are kept as plain snapshots and rebuilt on every load, so callers
never share live domain objects with each other or with the store.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
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
from trainings.stores.interfaces import PersonStore, StaleAggregateError, TrainingStore


@dataclass(frozen=True)
class _SessionSnapshot:
    id: SessionId
    title: str
    date: datetime
    trainer_id: PersonId
    max_attendees: int
    attendee_ids: tuple[PersonId, ...]


@dataclass(frozen=True)
class _TrainingSnapshot:
    id: TrainingId
    topic: str
    description: str | None
    created_by_user_id: UserId
    created_at: datetime
    version: int
    sessions: tuple[_SessionSnapshot, ...]


def _snapshot(training: Training, version: int) -> _TrainingSnapshot:
    return _TrainingSnapshot(
        id=training.id,
        topic=training.topic,
        description=training.description,
        created_by_user_id=training.created_by_user_id,
        created_at=training.created_at,
        version=version,
        sessions=tuple(
            _SessionSnapshot(
                id=s.id,
                title=s.title,
                date=s.date,
                trainer_id=s.trainer_id,
                max_attendees=s.max_attendees,
                attendee_ids=s.attendee_ids,
            )
            for s in training.sessions
        ),
    )


def _session_from(snapshot: _SessionSnapshot, training_id: TrainingId) -> TrainingSession:
    return TrainingSession.rehydrate(
        id=snapshot.id,
        training_id=training_id,
        title=snapshot.title,
        date=snapshot.date,
        trainer_id=snapshot.trainer_id,
        max_attendees=snapshot.max_attendees,
        attendee_ids=snapshot.attendee_ids,
    )


def _training_from(snapshot: _TrainingSnapshot, with_sessions: bool = True) -> Training:
    sessions = (
        [_session_from(s, snapshot.id) for s in snapshot.sessions] if with_sessions else []
    )
    return Training.rehydrate(
        id=snapshot.id,
        topic=snapshot.topic,
        description=snapshot.description,
        created_by_user_id=snapshot.created_by_user_id,
        created_at=snapshot.created_at,
        sessions=sessions,
        version=snapshot.version,
    )


class InMemoryTrainingStore(TrainingStore):
    """Thread-safe training store backed by a dict of snapshots."""

    def __init__(self) -> None:
        self._trainings: dict[TrainingId, _TrainingSnapshot] = {}
        self._guard = threading.Lock()
        self._locks: dict[TrainingId, threading.Lock] = {}

    def get_training(self, training_id: TrainingId) -> Training | None:
        snapshot = self._trainings.get(training_id)
        return _training_from(snapshot, with_sessions=False) if snapshot else None

    def get_training_with_sessions(self, training_id: TrainingId) -> Training | None:
        snapshot = self._trainings.get(training_id)
        return _training_from(snapshot) if snapshot else None

    def list_trainings(self) -> list[Training]:
        snapshots = sorted(self._trainings.values(), key=lambda s: s.created_at, reverse=True)
        return [_training_from(s) for s in snapshots]

    def list_trainings_for_user(self, user_id: UserId) -> list[Training]:
        return [t for t in self.list_trainings() if t.created_by_user_id == user_id]

    def find_training_id_for_session(self, session_id: SessionId) -> TrainingId | None:
        for snapshot in list(self._trainings.values()):
            if any(s.id == session_id for s in snapshot.sessions):
                return snapshot.id
        return None

    def list_sessions_for_training(self, training_id: TrainingId) -> list[TrainingSession]:
        snapshot = self._trainings.get(training_id)
        if snapshot is None:
            return []
        return [_session_from(s, snapshot.id) for s in snapshot.sessions]

    def list_upcoming_sessions(self, now: datetime) -> list[TrainingSession]:
        sessions = [
            _session_from(s, snapshot.id)
            for snapshot in list(self._trainings.values())
            for s in snapshot.sessions
            if s.date > now
        ]
        return sorted(sessions, key=lambda s: s.date)

    @contextmanager
    def lock_training(self, training_id: TrainingId) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(training_id, threading.Lock())
        with lock:
            yield

    def save_training(self, training: Training) -> None:
        with self._guard:
            current = self._trainings.get(training.id)
            stored_version = current.version if current else 0
            if stored_version != training.version:
                raise StaleAggregateError(training.id, training.version)
            self._trainings[training.id] = _snapshot(training, training.version + 1)
        training.version += 1


class InMemoryPersonStore(PersonStore):
    """Dict-backed person store."""

    def __init__(self) -> None:
        self._persons: dict[PersonId, Person] = {}

    def get_person(self, person_id: PersonId) -> Person | None:
        person = self._persons.get(person_id)
        return self._copy(person) if person else None

    def list_persons(self) -> list[Person]:
        return [self._copy(p) for p in sorted(self._persons.values(), key=lambda p: p.full_name)]

    def list_trainers(self) -> list[Person]:
        return [p for p in self.list_persons() if p.is_trainer]

    def save_person(self, person: Person) -> None:
        self._persons[person.id] = self._copy(person)

    @staticmethod
    def _copy(person: Person) -> Person:
        return Person.rehydrate(
            id=person.id,
            full_name=person.full_name,
            email=person.email,
            membership_id=person.membership_id,
            is_trainer=person.is_trainer,
        )

"""Django ORM implementation of the stores.

Concurrency: ``lock_training`` takes a row lock (SELECT ... FOR UPDATE) on
the training inside a transaction, and ``save_training`` only writes when the
stored version still equals the version the aggregate was loaded at.

SQLite ignores FOR UPDATE. There the settings open every transaction with
BEGIN IMMEDIATE, which takes the database write lock up front, so
``lock_training`` still serializes writers and later ones wait for the lock.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

from django.db import transaction
from django.db.models import F, Prefetch

from trainings import models as orm
from trainings.domain import (
    Email,
    MembershipId,
    Person,
    PersonId,
    SessionId,
    Training,
    TrainingId,
    TrainingSession,
    UserId,
)
from trainings.signals import training_saved
from trainings.stores.interfaces import PersonStore, StaleAggregateError, TrainingStore

logger = logging.getLogger(__name__)


def _attendees() -> Prefetch:
    return Prefetch("attendees", queryset=orm.SessionAttendee.objects.order_by("position"))


def _sessions() -> Prefetch:
    return Prefetch(
        "sessions",
        queryset=orm.TrainingSession.objects.order_by("position").prefetch_related(_attendees()),
    )


def _session_to_domain(record: orm.TrainingSession) -> TrainingSession:
    return TrainingSession.rehydrate(
        id=SessionId(record.id),
        training_id=TrainingId(record.training_id),
        title=record.title,
        date=record.date,
        trainer_id=PersonId(record.trainer_id),
        max_attendees=record.max_attendees,
        attendee_ids=[PersonId(a.person_id) for a in record.attendees.all()],
    )


def _training_to_domain(record: orm.Training, with_sessions: bool) -> Training:
    sessions = [_session_to_domain(s) for s in record.sessions.all()] if with_sessions else []
    return Training.rehydrate(
        id=TrainingId(record.id),
        topic=record.topic,
        description=record.description,
        created_by_user_id=UserId(record.created_by_user_id),
        created_at=record.created_at,
        sessions=sessions,
        version=record.version,
    )


def _person_to_domain(record: orm.Person) -> Person:
    return Person.rehydrate(
        id=PersonId(record.id),
        full_name=record.full_name,
        email=Email(record.email),
        membership_id=MembershipId(record.membership_id) if record.membership_id else None,
        is_trainer=record.is_trainer,
    )


class DjangoTrainingStore(TrainingStore):
    """Relational training store using Django ORM."""

    def get_training(self, training_id: TrainingId) -> Training | None:
        record = orm.Training.objects.filter(pk=training_id.value).first()
        if record is None:
            return None
        return _training_to_domain(record, with_sessions=False)

    def get_training_with_sessions(self, training_id: TrainingId) -> Training | None:
        record = (
            orm.Training.objects.filter(pk=training_id.value)
            .prefetch_related(_sessions())
            .first()
        )
        if record is None:
            return None
        return _training_to_domain(record, with_sessions=True)

    def list_trainings(self) -> list[Training]:
        records = orm.Training.objects.order_by("-created_at").prefetch_related(_sessions())
        return [_training_to_domain(r, with_sessions=True) for r in records]

    def list_trainings_for_user(self, user_id: UserId) -> list[Training]:
        records = (
            orm.Training.objects.filter(created_by_user_id=user_id.value)
            .order_by("-created_at")
            .prefetch_related(_sessions())
        )
        return [_training_to_domain(r, with_sessions=True) for r in records]

    def find_training_id_for_session(self, session_id: SessionId) -> TrainingId | None:
        training_id = (
            orm.TrainingSession.objects.filter(pk=session_id.value)
            .values_list("training_id", flat=True)
            .first()
        )
        return TrainingId(training_id) if training_id is not None else None

    def list_sessions_for_training(self, training_id: TrainingId) -> list[TrainingSession]:
        records = (
            orm.TrainingSession.objects.filter(training_id=training_id.value)
            .order_by("position")
            .prefetch_related(_attendees())
        )
        return [_session_to_domain(r) for r in records]

    def list_upcoming_sessions(self, now: datetime) -> list[TrainingSession]:
        records = (
            orm.TrainingSession.objects.filter(date__gt=now)
            .order_by("date")
            .prefetch_related(_attendees())
        )
        return [_session_to_domain(r) for r in records]

    @contextmanager
    def lock_training(self, training_id: TrainingId) -> Iterator[None]:
        with transaction.atomic():
            orm.Training.objects.select_for_update().filter(pk=training_id.value).first()
            yield

    def save_training(self, training: Training) -> None:
        with transaction.atomic():
            if training.version == 0:
                orm.Training.objects.create(
                    id=training.id.value,
                    topic=training.topic,
                    description=training.description,
                    created_by_user_id=training.created_by_user_id.value,
                    created_at=training.created_at,
                    version=1,
                )
            else:
                updated = orm.Training.objects.filter(
                    pk=training.id.value, version=training.version
                ).update(
                    topic=training.topic,
                    description=training.description,
                    version=F("version") + 1,
                )
                if updated == 0:
                    logger.warning(
                        "Stale save rejected for training %s at version %d",
                        training.id,
                        training.version,
                    )
                    raise StaleAggregateError(training.id, training.version)
            self._replace_sessions(training)
            transaction.on_commit(
                lambda: training_saved.send(sender=type(self), training_id=training.id)
            )
        training.version += 1

    def _replace_sessions(self, training: Training) -> None:
        session_ids = [s.id.value for s in training.sessions]
        orm.TrainingSession.objects.filter(training_id=training.id.value).exclude(
            pk__in=session_ids
        ).delete()
        orm.SessionAttendee.objects.filter(session__training_id=training.id.value).delete()

        attendees = []
        for position, session in enumerate(training.sessions):
            orm.TrainingSession.objects.update_or_create(
                id=session.id.value,
                defaults={
                    "training_id": training.id.value,
                    "title": session.title,
                    "date": session.date,
                    "trainer_id": session.trainer_id.value,
                    "max_attendees": session.max_attendees,
                    "position": position,
                },
            )
            attendees.extend(
                orm.SessionAttendee(session_id=session.id.value, person_id=p.value, position=i)
                for i, p in enumerate(session.attendee_ids)
            )
        orm.SessionAttendee.objects.bulk_create(attendees)


class DjangoPersonStore(PersonStore):
    """Relational person store using Django ORM."""

    def get_person(self, person_id: PersonId) -> Person | None:
        record = orm.Person.objects.filter(pk=person_id.value).first()
        return _person_to_domain(record) if record is not None else None

    def list_persons(self) -> list[Person]:
        return [_person_to_domain(r) for r in orm.Person.objects.order_by("full_name")]

    def list_trainers(self) -> list[Person]:
        records = orm.Person.objects.filter(is_trainer=True).order_by("full_name")
        return [_person_to_domain(r) for r in records]

    def save_person(self, person: Person) -> None:
        orm.Person.objects.update_or_create(
            id=person.id.value,
            defaults={
                "full_name": person.full_name,
                "email": person.email.value,
                "membership_id": person.membership_id.value if person.membership_id else None,
                "is_trainer": person.is_trainer,
            },
        )

"""Transfer shapes exchanged with the presentation layer.

Requests carry raw identifiers as strings; services parse them. Projections
are read-only snapshots of domain entities, with derived fields evaluated at
the moment the projection is built.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Self

from trainings.domain import Person, Training, TrainingSession


@dataclass(frozen=True)
class CreateTrainingRequest:
    topic: str
    description: str | None = None


@dataclass(frozen=True)
class UpdateTrainingRequest:
    topic: str
    description: str | None = None


@dataclass(frozen=True)
class CreateSessionRequest:
    training_id: str
    title: str
    date: datetime
    trainer_id: str
    max_attendees: int


@dataclass(frozen=True)
class UpdateSessionRequest:
    title: str
    date: datetime
    max_attendees: int


@dataclass(frozen=True)
class RegisterAttendeeRequest:
    session_id: str
    person_id: str


@dataclass(frozen=True)
class CreatePersonRequest:
    full_name: str
    email: str
    membership_id: str | None = None
    is_trainer: bool = False


@dataclass(frozen=True)
class TrainingDTO:
    id: str
    topic: str
    description: str | None
    created_by_user_id: str
    created_at: datetime

    @classmethod
    def from_domain(cls, training: Training) -> Self:
        return cls(
            id=str(training.id),
            topic=training.topic,
            description=training.description,
            created_by_user_id=str(training.created_by_user_id),
            created_at=training.created_at,
        )


@dataclass(frozen=True)
class TrainingSessionDTO:
    id: str
    training_id: str
    title: str
    date: datetime
    trainer_id: str
    max_attendees: int
    current_attendees: int
    available_spots: int
    is_full: bool
    is_upcoming: bool
    attendee_ids: tuple[str, ...] = ()

    @classmethod
    def from_domain(cls, session: TrainingSession) -> Self:
        return cls(
            id=str(session.id),
            training_id=str(session.training_id),
            title=session.title,
            date=session.date,
            trainer_id=str(session.trainer_id),
            max_attendees=session.max_attendees,
            current_attendees=session.attendee_count,
            available_spots=session.available_spots,
            is_full=session.is_full,
            is_upcoming=session.is_upcoming,
            attendee_ids=tuple(str(p) for p in session.attendee_ids),
        )


@dataclass(frozen=True)
class TrainingWithSessionsDTO:
    id: str
    topic: str
    description: str | None
    created_by_user_id: str
    created_at: datetime
    sessions: tuple[TrainingSessionDTO, ...]

    @classmethod
    def from_domain(cls, training: Training) -> Self:
        return cls(
            id=str(training.id),
            topic=training.topic,
            description=training.description,
            created_by_user_id=str(training.created_by_user_id),
            created_at=training.created_at,
            sessions=tuple(TrainingSessionDTO.from_domain(s) for s in training.sessions),
        )


@dataclass(frozen=True)
class PersonDTO:
    id: str
    full_name: str
    email: str
    membership_id: str | None
    is_member: bool
    is_trainer: bool

    @classmethod
    def from_domain(cls, person: Person) -> Self:
        return cls(
            id=str(person.id),
            full_name=person.full_name,
            email=person.email.value,
            membership_id=str(person.membership_id) if person.membership_id else None,
            is_member=person.is_member,
            is_trainer=person.is_trainer,
        )

"""Unit tests for the application services.

Services run against the in-memory stores; no database involved.
Run with: pytest tests/test_services.py -v
"""

import threading
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone

import pytest

from trainings.domain import TrainingId, UserId
from trainings.domain.errors import (
    CapacityExceededError,
    CapacityReductionError,
    ConcurrentModificationError,
    DuplicateRegistrationError,
    InvalidIdError,
    NotRegisteredError,
    PersonNotFoundError,
    SessionNotFoundError,
    TrainingNotFoundError,
    ValidationError,
)
from trainings.services import PersonService, TrainingService, TrainingSessionService
from trainings.services.dtos import (
    CreatePersonRequest,
    CreateSessionRequest,
    CreateTrainingRequest,
    RegisterAttendeeRequest,
    UpdateSessionRequest,
    UpdateTrainingRequest,
)
from trainings.stores.interfaces import StaleAggregateError
from trainings.stores.memory_store import InMemoryPersonStore, InMemoryTrainingStore

ACTOR = UserId("7")
MISSING_ID = "00000000-0000-0000-0000-000000000000"


def create_person(person_service: PersonService, name: str, trainer: bool = False) -> str:
    email = f"{name.lower()}@example.com"
    return person_service.create_person(
        CreatePersonRequest(full_name=name, email=email, is_trainer=trainer)
    ).id


@pytest.fixture
def trainer_id(person_service) -> str:
    return create_person(person_service, "Trainer", trainer=True)


@pytest.fixture
def training_id(training_service) -> str:
    return training_service.create_training(CreateTrainingRequest(topic="Knots"), ACTOR).id


def add_session(session_service, training_id, trainer_id, date, max_attendees=2, title="Basics"):
    return session_service.create_session(
        CreateSessionRequest(
            training_id=training_id,
            title=title,
            date=date,
            trainer_id=trainer_id,
            max_attendees=max_attendees,
        )
    )


class TestTrainingService:
    """Tests for TrainingService."""

    def test_create_training_persists_and_projects(self, training_service, training_store):
        """create_training saves the aggregate and returns a projection."""
        dto = training_service.create_training(
            CreateTrainingRequest(topic="Knots", description="Ropes"), ACTOR
        )
        assert dto.topic == "Knots"
        assert dto.created_by_user_id == "7"
        stored = training_store.get_training_with_sessions(TrainingId.from_string(dto.id))
        assert stored is not None
        assert stored.version == 1

    def test_create_training_empty_topic_raises_error(self, training_service, training_store):
        """create_training raises ValidationError and saves nothing."""
        with pytest.raises(ValidationError):
            training_service.create_training(CreateTrainingRequest(topic=""), ACTOR)
        assert training_store.list_trainings() == []

    def test_get_training_invalid_id_raises_error(self, training_service):
        """get_training raises InvalidIdError for malformed UUID."""
        with pytest.raises(InvalidIdError):
            training_service.get_training("nope")

    def test_get_training_not_found_raises_error(self, training_service):
        """get_training raises TrainingNotFoundError when store returns None."""
        with pytest.raises(TrainingNotFoundError):
            training_service.get_training(MISSING_ID)

    def test_get_training_includes_sessions(
        self, training_service, session_service, training_id, trainer_id, future_date
    ):
        """get_training returns the sessions in insertion order."""
        first = add_session(session_service, training_id, trainer_id, future_date, title="A")
        second = add_session(session_service, training_id, trainer_id, future_date, title="B")
        detail = training_service.get_training(training_id)
        assert [s.id for s in detail.sessions] == [first.id, second.id]

    def test_list_user_trainings_filters_by_actor(self, training_service):
        """Only trainings created by the actor are returned."""
        mine = training_service.create_training(CreateTrainingRequest(topic="Mine"), ACTOR)
        training_service.create_training(CreateTrainingRequest(topic="Theirs"), UserId("8"))
        assert [t.id for t in training_service.list_user_trainings(ACTOR)] == [mine.id]
        assert len(training_service.list_trainings()) == 2

    def test_update_training_changes_details(self, training_service, training_id):
        """update_training re-validates and persists topic and description."""
        dto = training_service.update_training(
            training_id, UpdateTrainingRequest(topic="Splices", description="Eye splice")
        )
        assert dto.topic == "Splices"
        assert training_service.get_training(training_id).description == "Eye splice"

    def test_update_training_not_found(self, training_service):
        """update_training raises TrainingNotFoundError for an unknown id."""
        with pytest.raises(TrainingNotFoundError):
            training_service.update_training(MISSING_ID, UpdateTrainingRequest(topic="x"))


class TestTrainingSessionService:
    """Tests for TrainingSessionService."""

    def test_create_session_saves_whole_aggregate(
        self, session_service, training_store, training_id, trainer_id, future_date
    ):
        """The new session is stored as part of its training."""
        dto = add_session(session_service, training_id, trainer_id, future_date)
        stored = training_store.get_training_with_sessions(TrainingId.from_string(training_id))
        assert [str(s.id) for s in stored.sessions] == [dto.id]
        assert dto.training_id == training_id
        assert dto.available_spots == 2
        assert dto.is_upcoming

    def test_create_session_unknown_training(self, session_service, trainer_id, future_date):
        """create_session raises TrainingNotFoundError for a missing training."""
        with pytest.raises(TrainingNotFoundError):
            add_session(session_service, MISSING_ID, trainer_id, future_date)

    def test_create_session_unknown_trainer(self, session_service, training_id, future_date):
        """create_session raises PersonNotFoundError for a missing trainer."""
        with pytest.raises(PersonNotFoundError):
            add_session(session_service, training_id, MISSING_ID, future_date)

    def test_create_session_invalid_capacity(
        self, session_service, training_id, trainer_id, future_date
    ):
        """create_session surfaces the domain ValidationError."""
        with pytest.raises(ValidationError):
            add_session(session_service, training_id, trainer_id, future_date, max_attendees=0)

    def test_registration_fills_session(
        self, session_service, person_service, training_id, trainer_id, future_date
    ):
        """Two registrations fill a 2-spot session; the third is rejected."""
        session = add_session(session_service, training_id, trainer_id, future_date)
        a, b, c = (create_person(person_service, n) for n in ("Ann", "Bob", "Cid"))

        dto = session_service.register_attendee(RegisterAttendeeRequest(session.id, a))
        assert dto.available_spots == 1
        dto = session_service.register_attendee(RegisterAttendeeRequest(session.id, b))
        assert dto.is_full

        with pytest.raises(CapacityExceededError):
            session_service.register_attendee(RegisterAttendeeRequest(session.id, c))
        assert session_service.get_session(session.id).attendee_ids == (a, b)

    def test_duplicate_registration(
        self, session_service, person_service, training_id, trainer_id, future_date
    ):
        """Registering twice raises DuplicateRegistrationError."""
        session = add_session(session_service, training_id, trainer_id, future_date)
        ann = create_person(person_service, "Ann")
        session_service.register_attendee(RegisterAttendeeRequest(session.id, ann))
        with pytest.raises(DuplicateRegistrationError):
            session_service.register_attendee(RegisterAttendeeRequest(session.id, ann))

    def test_register_unknown_person(self, session_service, training_id, trainer_id, future_date):
        """register_attendee raises PersonNotFoundError for a missing person."""
        session = add_session(session_service, training_id, trainer_id, future_date)
        with pytest.raises(PersonNotFoundError):
            session_service.register_attendee(RegisterAttendeeRequest(session.id, MISSING_ID))

    def test_register_unknown_session(self, session_service, trainer_id):
        """register_attendee raises SessionNotFoundError for a missing session."""
        with pytest.raises(SessionNotFoundError):
            session_service.register_attendee(RegisterAttendeeRequest(MISSING_ID, trainer_id))

    def test_unregister_round_trip(
        self, session_service, person_service, training_id, trainer_id, future_date
    ):
        """Unregistering frees the spot; a second unregister fails."""
        session = add_session(session_service, training_id, trainer_id, future_date)
        ann = create_person(person_service, "Ann")
        session_service.register_attendee(RegisterAttendeeRequest(session.id, ann))

        dto = session_service.unregister_attendee(RegisterAttendeeRequest(session.id, ann))
        assert dto.current_attendees == 0
        assert dto.available_spots == 2

        with pytest.raises(NotRegisteredError):
            session_service.unregister_attendee(RegisterAttendeeRequest(session.id, ann))

    def test_update_session_capacity_rules(
        self, session_service, person_service, training_id, trainer_id, future_date
    ):
        """Shrinking below headcount fails; growing succeeds."""
        session = add_session(session_service, training_id, trainer_id, future_date)
        for name in ("Ann", "Bob"):
            person = create_person(person_service, name)
            session_service.register_attendee(RegisterAttendeeRequest(session.id, person))

        with pytest.raises(CapacityReductionError):
            session_service.update_session(
                session.id, UpdateSessionRequest("Basics", future_date, 1)
            )

        dto = session_service.update_session(
            session.id, UpdateSessionRequest("Basics II", future_date, 5)
        )
        assert dto.available_spots == 3
        assert dto.title == "Basics II"

    def test_list_upcoming_sessions_skips_past(
        self, session_service, training_id, trainer_id, future_date
    ):
        """Only future sessions are listed, soonest first."""
        past = datetime.now(timezone.utc) - timedelta(days=1)
        add_session(session_service, training_id, trainer_id, past, title="Past")
        later = add_session(
            session_service,
            training_id,
            trainer_id,
            future_date + timedelta(days=1),
            title="Later",
        )
        sooner = add_session(session_service, training_id, trainer_id, future_date, title="Sooner")

        upcoming = session_service.list_upcoming_sessions()

        assert [s.id for s in upcoming] == [sooner.id, later.id]

    def test_list_sessions_for_unknown_training(self, session_service):
        """list_sessions_for_training raises TrainingNotFoundError."""
        with pytest.raises(TrainingNotFoundError):
            session_service.list_sessions_for_training(MISSING_ID)


class RacingTrainingStore(InMemoryTrainingStore):
    """Store without a per-training lock that holds the first loads at a barrier.

    Forces concurrent callers to read the same version before any of them
    saves, so only the version check stands between them and a double booking.
    """

    def __init__(self, parties: int) -> None:
        super().__init__()
        self._barrier = threading.Barrier(parties)
        self._parties = parties
        self._loads = 0
        self._loads_lock = threading.Lock()
        self.racing = False

    @contextmanager
    def lock_training(self, training_id):
        yield

    def get_training_with_sessions(self, training_id):
        training = super().get_training_with_sessions(training_id)
        if self.racing:
            with self._loads_lock:
                self._loads += 1
                first_round = self._loads <= self._parties
            if first_round:
                self._barrier.wait(timeout=5)
        return training


class AlwaysStaleTrainingStore(InMemoryTrainingStore):
    """Store whose saves always lose the version check once armed."""

    armed = False

    def save_training(self, training):
        if self.armed:
            raise StaleAggregateError(training.id, training.version)
        super().save_training(training)


def race_for_last_spot(session_service, session_id: str, people: list[str]):
    outcomes = []
    outcomes_lock = threading.Lock()
    start = threading.Barrier(len(people))

    def register(person_id):
        start.wait(timeout=5)
        try:
            session_service.register_attendee(RegisterAttendeeRequest(session_id, person_id))
            result = "ok"
        except CapacityExceededError:
            result = "full"
        with outcomes_lock:
            outcomes.append(result)

    threads = [threading.Thread(target=register, args=(p,)) for p in people]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)
    return sorted(outcomes)


class TestConcurrentRegistration:
    """Two requests racing for the last spot never both succeed."""

    def test_locked_store_serializes_registrations(
        self, session_service, person_service, training_id, trainer_id, future_date
    ):
        """With the per-training lock, exactly one of two racers gets the spot."""
        session = add_session(
            session_service, training_id, trainer_id, future_date, max_attendees=1
        )
        people = [create_person(person_service, n) for n in ("Ann", "Bob")]

        outcomes = race_for_last_spot(session_service, session.id, people)

        assert outcomes == ["full", "ok"]
        assert session_service.get_session(session.id).current_attendees == 1

    def test_version_check_rejects_stale_save(self, future_date):
        """Without a lock, the loser's save is stale and the retry sees a full session."""
        store = RacingTrainingStore(parties=2)
        person_store = InMemoryPersonStore()
        persons = PersonService(person_store)
        sessions = TrainingSessionService(store, person_store, save_retries=3)
        trainings = TrainingService(store, save_retries=3)

        training_id = trainings.create_training(CreateTrainingRequest(topic="Knots"), ACTOR).id
        trainer = create_person(persons, "Trainer", trainer=True)
        session = add_session(sessions, training_id, trainer, future_date, max_attendees=1)
        people = [create_person(persons, n) for n in ("Ann", "Bob")]

        store.racing = True
        outcomes = race_for_last_spot(sessions, session.id, people)
        store.racing = False

        assert outcomes == ["full", "ok"]
        assert sessions.get_session(session.id).current_attendees == 1

    def test_exhausted_retries_raise_conflict(self, future_date):
        """A save that keeps losing surfaces ConcurrentModificationError."""
        store = AlwaysStaleTrainingStore()
        person_store = InMemoryPersonStore()
        persons = PersonService(person_store)
        sessions = TrainingSessionService(store, person_store, save_retries=2)
        trainings = TrainingService(store, save_retries=2)

        training_id = trainings.create_training(CreateTrainingRequest(topic="Knots"), ACTOR).id
        trainer = create_person(persons, "Trainer", trainer=True)
        session = add_session(sessions, training_id, trainer, future_date)
        ann = create_person(persons, "Ann")

        store.armed = True
        with pytest.raises(ConcurrentModificationError) as exc_info:
            sessions.register_attendee(RegisterAttendeeRequest(session.id, ann))
        assert exc_info.value.attempts == 3
        store.armed = False

        assert sessions.get_session(session.id).current_attendees == 0


class TestPersonService:
    """Tests for PersonService."""

    def test_create_person_normalizes_email(self, person_service):
        """Emails are stored lower-cased; persons start as guests."""
        dto = person_service.create_person(
            CreatePersonRequest(full_name="Ann", email="Ann@Example.COM")
        )
        assert dto.email == "ann@example.com"
        assert dto.is_member is False
        assert dto.is_trainer is False

    def test_create_person_invalid_email(self, person_service):
        """A malformed email raises ValidationError."""
        with pytest.raises(ValidationError):
            person_service.create_person(CreatePersonRequest(full_name="Ann", email="ann"))

    def test_create_member(self, person_service):
        """A membership id makes the person a member."""
        dto = person_service.create_person(
            CreatePersonRequest(
                full_name="Ann",
                email="ann@example.com",
                membership_id="12345678-1234-5678-1234-567812345678",
            )
        )
        assert dto.is_member

    def test_trainer_status_and_listing(self, person_service):
        """list_trainers follows set_trainer_status."""
        ann = create_person(person_service, "Ann")
        assert person_service.list_trainers() == []

        person_service.set_trainer_status(ann, True)
        assert [p.id for p in person_service.list_trainers()] == [ann]

        person_service.set_trainer_status(ann, False)
        assert person_service.list_trainers() == []

    def test_assign_membership(self, person_service):
        """assign_membership turns a guest into a member."""
        ann = create_person(person_service, "Ann")
        dto = person_service.assign_membership(ann, "12345678-1234-5678-1234-567812345678")
        assert dto.is_member
        assert person_service.get_person(ann).membership_id == (
            "12345678-1234-5678-1234-567812345678"
        )

    def test_get_person_not_found(self, person_service):
        """get_person raises PersonNotFoundError."""
        with pytest.raises(PersonNotFoundError):
            person_service.get_person(MISSING_ID)

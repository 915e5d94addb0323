"""Training session service - scheduling sessions and managing rosters.

Sessions are never loaded or saved on their own. Each operation resolves the
owning training and runs through ``mutate_training``, so the capacity check
in ``TrainingSession.register_attendee`` always sees the latest committed
roster and two requests racing for the last spot cannot both win.
"""

import logging

from django.conf import settings

from trainings.domain import PersonId, SessionId, Training, TrainingId, TrainingSession
from trainings.domain.errors import (
    PersonNotFoundError,
    SessionNotFoundError,
    TrainingNotFoundError,
)
from trainings.domain.models import utcnow
from trainings.services.aggregate import mutate_training
from trainings.services.dtos import (
    CreateSessionRequest,
    RegisterAttendeeRequest,
    TrainingSessionDTO,
    UpdateSessionRequest,
)
from trainings.stores.interfaces import PersonStore, TrainingStore

logger = logging.getLogger(__name__)


class TrainingSessionService:
    """Service for session scheduling and attendee registration."""

    def __init__(
        self,
        store: TrainingStore,
        person_store: PersonStore,
        save_retries: int | None = None,
    ) -> None:
        self._store = store
        self._person_store = person_store
        self._save_retries = (
            settings.TRAININGS["SAVE_RETRIES"] if save_retries is None else save_retries
        )

    def create_session(self, request: CreateSessionRequest) -> TrainingSessionDTO:
        """Schedule a new session under an existing training.

        Raises:
            InvalidIdError: If an identifier is not a valid UUID.
            TrainingNotFoundError: If the training does not exist.
            PersonNotFoundError: If the trainer does not exist.
            ValidationError: If title, date or capacity are invalid.
        """
        training_id = TrainingId.from_string(request.training_id)
        trainer_id = PersonId.from_string(request.trainer_id)
        if self._person_store.get_person(trainer_id) is None:
            raise PersonNotFoundError(request.trainer_id)

        def add(training: Training) -> TrainingSession:
            return training.add_session(
                request.title, request.date, trainer_id, request.max_attendees
            )

        session = mutate_training(self._store, training_id, add, self._save_retries)
        logger.info("Session %s added to training %s", session.id, training_id)
        return TrainingSessionDTO.from_domain(session)

    def get_session(self, session_id: str) -> TrainingSessionDTO:
        """Return one session.

        Raises:
            InvalidIdError: If the session_id is not a valid UUID.
            SessionNotFoundError: If the session does not exist.
        """
        parsed = SessionId.from_string(session_id)
        training_id = self._resolve_training_id(parsed)
        training = self._store.get_training_with_sessions(training_id)
        session = training.get_session(parsed) if training else None
        if session is None:
            raise SessionNotFoundError(session_id)
        return TrainingSessionDTO.from_domain(session)

    def list_sessions_for_training(self, training_id: str) -> list[TrainingSessionDTO]:
        """Return the sessions of a training in the order they were added.

        Raises:
            InvalidIdError: If the training_id is not a valid UUID.
            TrainingNotFoundError: If the training does not exist.
        """
        parsed = TrainingId.from_string(training_id)
        if self._store.get_training(parsed) is None:
            raise TrainingNotFoundError(training_id)
        return [
            TrainingSessionDTO.from_domain(s)
            for s in self._store.list_sessions_for_training(parsed)
        ]

    def list_upcoming_sessions(self) -> list[TrainingSessionDTO]:
        return [
            TrainingSessionDTO.from_domain(s)
            for s in self._store.list_upcoming_sessions(utcnow())
        ]

    def register_attendee(self, request: RegisterAttendeeRequest) -> TrainingSessionDTO:
        """Add a person to a session roster.

        Raises:
            InvalidIdError: If an identifier is not a valid UUID.
            SessionNotFoundError: If the session does not exist.
            PersonNotFoundError: If the person does not exist.
            CapacityExceededError: If the session is full.
            DuplicateRegistrationError: If the person is already registered.
        """
        session_id = SessionId.from_string(request.session_id)
        person_id = PersonId.from_string(request.person_id)
        if self._person_store.get_person(person_id) is None:
            raise PersonNotFoundError(request.person_id)
        training_id = self._resolve_training_id(session_id)

        def register(training: Training) -> TrainingSession:
            session = self._owned_session(training, session_id)
            session.register_attendee(person_id)
            return session

        session = mutate_training(self._store, training_id, register, self._save_retries)
        logger.info(
            "Person %s registered for session %s (%d spots left)",
            person_id,
            session_id,
            session.available_spots,
        )
        return TrainingSessionDTO.from_domain(session)

    def unregister_attendee(self, request: RegisterAttendeeRequest) -> TrainingSessionDTO:
        """Remove a person from a session roster.

        Raises:
            InvalidIdError: If an identifier is not a valid UUID.
            SessionNotFoundError: If the session does not exist.
            NotRegisteredError: If the person is not on the roster.
        """
        session_id = SessionId.from_string(request.session_id)
        person_id = PersonId.from_string(request.person_id)
        training_id = self._resolve_training_id(session_id)

        def unregister(training: Training) -> TrainingSession:
            session = self._owned_session(training, session_id)
            session.unregister_attendee(person_id)
            return session

        session = mutate_training(self._store, training_id, unregister, self._save_retries)
        logger.info("Person %s unregistered from session %s", person_id, session_id)
        return TrainingSessionDTO.from_domain(session)

    def update_session(self, session_id: str, request: UpdateSessionRequest) -> TrainingSessionDTO:
        """Change title, date and capacity together.

        Raises:
            InvalidIdError: If the session_id is not a valid UUID.
            SessionNotFoundError: If the session does not exist.
            ValidationError: If title, date or capacity are invalid.
            CapacityReductionError: If capacity would drop below the headcount.
        """
        parsed = SessionId.from_string(session_id)
        training_id = self._resolve_training_id(parsed)

        def update(training: Training) -> TrainingSession:
            session = self._owned_session(training, parsed)
            session.update_details(request.title, request.date, request.max_attendees)
            return session

        session = mutate_training(self._store, training_id, update, self._save_retries)
        logger.info("Session %s details updated", parsed)
        return TrainingSessionDTO.from_domain(session)

    def _resolve_training_id(self, session_id: SessionId) -> TrainingId:
        training_id = self._store.find_training_id_for_session(session_id)
        if training_id is None:
            raise SessionNotFoundError(str(session_id))
        return training_id

    @staticmethod
    def _owned_session(training: Training, session_id: SessionId) -> TrainingSession:
        session = training.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(str(session_id))
        return session

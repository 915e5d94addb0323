"""Person service - the people who attend and run sessions."""

import logging

from trainings.domain import Email, MembershipId, Person, PersonId
from trainings.domain.errors import PersonNotFoundError
from trainings.services.dtos import CreatePersonRequest, PersonDTO
from trainings.stores.interfaces import PersonStore

logger = logging.getLogger(__name__)


class PersonService:
    """Service for person records and their trainer/membership status."""

    def __init__(self, store: PersonStore) -> None:
        self._store = store

    def create_person(self, request: CreatePersonRequest) -> PersonDTO:
        """Create a person.

        Raises:
            ValidationError: If the name or email is missing or malformed.
            InvalidIdError: If the membership_id is not a valid UUID.
        """
        email = Email.create(request.email)
        membership_id = (
            MembershipId.from_string(request.membership_id) if request.membership_id else None
        )
        person = Person(request.full_name, email, membership_id, request.is_trainer)
        self._store.save_person(person)
        logger.info("Person %s created (trainer=%s)", person.id, person.is_trainer)
        return PersonDTO.from_domain(person)

    def get_person(self, person_id: str) -> PersonDTO:
        return PersonDTO.from_domain(self._load(person_id))

    def list_persons(self) -> list[PersonDTO]:
        return [PersonDTO.from_domain(p) for p in self._store.list_persons()]

    def list_trainers(self) -> list[PersonDTO]:
        return [PersonDTO.from_domain(p) for p in self._store.list_trainers()]

    def set_trainer_status(self, person_id: str, is_trainer: bool) -> PersonDTO:
        person = self._load(person_id)
        person.set_trainer_status(is_trainer)
        self._store.save_person(person)
        logger.info("Person %s trainer status set to %s", person.id, person.is_trainer)
        return PersonDTO.from_domain(person)

    def assign_membership(self, person_id: str, membership_id: str) -> PersonDTO:
        person = self._load(person_id)
        person.assign_membership(MembershipId.from_string(membership_id))
        self._store.save_person(person)
        logger.info("Person %s assigned membership %s", person.id, person.membership_id)
        return PersonDTO.from_domain(person)

    def _load(self, person_id: str) -> Person:
        person = self._store.get_person(PersonId.from_string(person_id))
        if person is None:
            raise PersonNotFoundError(person_id)
        return person

"""Domain error codes for the trainings module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_ID = "INVALID_ID"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    DUPLICATE_REGISTRATION = "DUPLICATE_REGISTRATION"
    NOT_REGISTERED = "NOT_REGISTERED"
    CAPACITY_REDUCTION = "CAPACITY_REDUCTION"
    TRAINING_NOT_FOUND = "TRAINING_NOT_FOUND"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    PERSON_NOT_FOUND = "PERSON_NOT_FOUND"
    CONCURRENT_MODIFICATION = "CONCURRENT_MODIFICATION"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(DomainError):
    """Raised when input to a constructor or operation is malformed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(code=ErrorCode.VALIDATION_ERROR, message=message)
        self.field = field


class InvalidIdError(DomainError):
    """Raised when an identifier is not a valid UUID."""

    def __init__(self, kind: str = "resource") -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message=f"Invalid {kind} ID format",
        )


class CapacityExceededError(DomainError):
    """Raised when registering against a full session."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            code=ErrorCode.CAPACITY_EXCEEDED,
            message="Training session is full",
        )
        self.session_id = session_id


class DuplicateRegistrationError(DomainError):
    """Raised when a person is already on the session roster."""

    def __init__(self, session_id: str, person_id: str) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_REGISTRATION,
            message="Person is already registered",
        )
        self.session_id = session_id
        self.person_id = person_id


class NotRegisteredError(DomainError):
    """Raised when unregistering a person who is not on the roster."""

    def __init__(self, session_id: str, person_id: str) -> None:
        super().__init__(
            code=ErrorCode.NOT_REGISTERED,
            message="Person is not registered",
        )
        self.session_id = session_id
        self.person_id = person_id


class CapacityReductionError(DomainError):
    """Raised when max attendees would drop below the current headcount."""

    def __init__(self, requested: int, registered: int) -> None:
        super().__init__(
            code=ErrorCode.CAPACITY_REDUCTION,
            message="Cannot reduce max attendees below current registration count",
        )
        self.requested = requested
        self.registered = registered


class NotFoundError(DomainError):
    """Base for lookups that found nothing in storage."""


class TrainingNotFoundError(NotFoundError):
    """Raised when a training is not found."""

    def __init__(self, training_id: str) -> None:
        super().__init__(
            code=ErrorCode.TRAINING_NOT_FOUND,
            message="Training not found",
        )
        self.training_id = training_id


class SessionNotFoundError(NotFoundError):
    """Raised when a training session is not found."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            code=ErrorCode.SESSION_NOT_FOUND,
            message="Training session not found",
        )
        self.session_id = session_id


class PersonNotFoundError(NotFoundError):
    """Raised when a person is not found."""

    def __init__(self, person_id: str) -> None:
        super().__init__(
            code=ErrorCode.PERSON_NOT_FOUND,
            message="Person not found",
        )
        self.person_id = person_id


class ConcurrentModificationError(DomainError):
    """Raised when a training kept changing underneath every save attempt."""

    def __init__(self, training_id: str, attempts: int) -> None:
        super().__init__(
            code=ErrorCode.CONCURRENT_MODIFICATION,
            message="Training was modified concurrently, please retry",
        )
        self.training_id = training_id
        self.attempts = attempts

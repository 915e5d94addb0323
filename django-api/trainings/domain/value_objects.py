"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from typing import Self
from uuid import UUID, uuid4

from trainings.domain.errors import InvalidIdError, ValidationError

EMAIL_MAX_LENGTH = 255


def _parse_uuid(value: str, kind: str) -> UUID:
    try:
        return UUID(str(value))
    except (TypeError, ValueError, AttributeError) as exc:
        raise InvalidIdError(kind) from exc


@dataclass(frozen=True)
class TrainingId:
    """Unique identifier for a Training."""

    value: UUID

    @classmethod
    def new(cls) -> Self:
        return cls(value=uuid4())

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=_parse_uuid(value, "training"))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class SessionId:
    """Unique identifier for a TrainingSession."""

    value: UUID

    @classmethod
    def new(cls) -> Self:
        return cls(value=uuid4())

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=_parse_uuid(value, "session"))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class PersonId:
    """Unique identifier for a Person."""

    value: UUID

    @classmethod
    def new(cls) -> Self:
        return cls(value=uuid4())

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=_parse_uuid(value, "person"))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class MembershipId:
    """Identifier of a club membership held by a Person."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=_parse_uuid(value, "membership"))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class UserId:
    """Authenticated actor, as handed over by the identity provider."""

    value: str

    def __post_init__(self) -> None:
        if not str(self.value).strip():
            raise ValidationError("User ID cannot be empty", field="user_id")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Email:
    """Lower-cased email address.

    Only the presence of '@' is checked; deliverability is not our concern.
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValidationError("Email cannot be empty", field="email")
        if "@" not in self.value:
            raise ValidationError("Invalid email format", field="email")
        if len(self.value) > EMAIL_MAX_LENGTH:
            raise ValidationError(
                f"Email cannot exceed {EMAIL_MAX_LENGTH} characters", field="email"
            )

    @classmethod
    def create(cls, raw: str | None) -> Self:
        if raw is None:
            raise ValidationError("Email cannot be empty", field="email")
        return cls(value=raw.strip().lower())

    def __str__(self) -> str:
        return self.value

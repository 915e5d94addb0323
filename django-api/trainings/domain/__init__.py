from trainings.domain.models import Person, Training, TrainingSession
from trainings.domain.value_objects import (
    Email,
    MembershipId,
    PersonId,
    SessionId,
    TrainingId,
    UserId,
)

__all__ = [
    "Training",
    "TrainingSession",
    "Person",
    "TrainingId",
    "SessionId",
    "PersonId",
    "MembershipId",
    "UserId",
    "Email",
]

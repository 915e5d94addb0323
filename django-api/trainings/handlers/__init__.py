from trainings.handlers.views import (
    MyTrainingListView,
    PersonDetailView,
    PersonListView,
    PersonMembershipView,
    PersonTrainerStatusView,
    SessionAttendeeView,
    SessionDetailView,
    TrainerListView,
    TrainingDetailView,
    TrainingListView,
    TrainingSessionListView,
    UpcomingSessionListView,
)

__all__ = [
    "TrainingListView",
    "MyTrainingListView",
    "TrainingDetailView",
    "TrainingSessionListView",
    "UpcomingSessionListView",
    "SessionDetailView",
    "SessionAttendeeView",
    "PersonListView",
    "TrainerListView",
    "PersonDetailView",
    "PersonTrainerStatusView",
    "PersonMembershipView",
]

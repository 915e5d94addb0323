from django.urls import path

from trainings.handlers import (
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

urlpatterns = [
    path("trainings", TrainingListView.as_view(), name="training-list"),
    path("trainings/mine", MyTrainingListView.as_view(), name="training-mine"),
    path(
        "trainings/<str:training_id>",
        TrainingDetailView.as_view(),
        name="training-detail",
    ),
    path(
        "trainings/<str:training_id>/sessions",
        TrainingSessionListView.as_view(),
        name="training-session-list",
    ),
    path("sessions/upcoming", UpcomingSessionListView.as_view(), name="session-upcoming"),
    path("sessions/<str:session_id>", SessionDetailView.as_view(), name="session-detail"),
    path(
        "sessions/<str:session_id>/attendees",
        SessionAttendeeView.as_view(),
        name="session-attendees",
    ),
    path("persons", PersonListView.as_view(), name="person-list"),
    path("persons/trainers", TrainerListView.as_view(), name="person-trainers"),
    path("persons/<str:person_id>", PersonDetailView.as_view(), name="person-detail"),
    path(
        "persons/<str:person_id>/trainer-status",
        PersonTrainerStatusView.as_view(),
        name="person-trainer-status",
    ),
    path(
        "persons/<str:person_id>/membership",
        PersonMembershipView.as_view(),
        name="person-membership",
    ),
]

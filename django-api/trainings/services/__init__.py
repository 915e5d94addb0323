from trainings.services.person_service import PersonService
from trainings.services.training_service import TrainingService
from trainings.services.training_session_service import TrainingSessionService

__all__ = ["TrainingService", "TrainingSessionService", "PersonService"]

from trainings.stores.interfaces import PersonStore, StaleAggregateError, TrainingStore

__all__ = ["TrainingStore", "PersonStore", "StaleAggregateError"]

"""
Repository layer for database access.
"""
from app.repositories.base import BaseRepository
from app.repositories.user import UserRepository
from app.repositories.preferences import PreferencesRepository
from app.repositories.schedule import ScheduleRepository, ScheduleItemRepository
from app.repositories.schedule_template import ScheduleTemplateRepository
from app.repositories.workout_template import WorkoutTemplateRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "PreferencesRepository",
    "ScheduleRepository",
    "ScheduleItemRepository",
    "ScheduleTemplateRepository",
    "WorkoutTemplateRepository",
]

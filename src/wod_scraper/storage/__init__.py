"""
Storage module for the WOD scraper.

Provides SQLite-based persistence for:
- Structured workouts
- Programming tracks and their day-numbered workouts
- Team schedules
"""

from wod_scraper.storage.database import Database
from wod_scraper.storage.models import (
    ProgrammingTrack,
    ScheduledWorkoutInstance,
    TrackType,
    TrackWorkout,
    WorkoutRecord,
)
from wod_scraper.storage.repositories import (
    ScheduleRepository,
    TrackRepository,
    WorkoutRepository,
)
from wod_scraper.storage.schema import SCHEMA_VERSION, SchemaManager
from wod_scraper.storage.service import ProgrammingService, generate_id

__all__ = [
    # Database
    "Database",
    "SchemaManager",
    "SCHEMA_VERSION",
    # Models
    "WorkoutRecord",
    "ProgrammingTrack",
    "TrackType",
    "TrackWorkout",
    "ScheduledWorkoutInstance",
    # Repositories
    "WorkoutRepository",
    "TrackRepository",
    "ScheduleRepository",
    # Service
    "ProgrammingService",
    "generate_id",
]

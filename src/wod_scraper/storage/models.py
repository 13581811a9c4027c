"""
Data models for storage layer.

Dataclasses mirroring the rows of the workouts, programming track and
scheduling tables. Timestamps are unix seconds, as stored.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from wod_scraper.llm.models import Workout


class TrackType(str, Enum):
    """Kind of programming track."""

    OFFICIAL_3RD_PARTY = "official_3rd_party"
    TEAM_OWNED = "team_owned"
    SELF_PROGRAMMED = "self_programmed"


@dataclass
class WorkoutRecord:
    """A stored workout."""

    id: str
    name: str
    description: str
    scheme: str
    scope: str = "private"
    reps_per_round: int | None = None
    rounds_to_score: int = 1
    user_id: str | None = None
    sugar_id: str | None = None
    tiebreak_scheme: str | None = None
    secondary_scheme: str | None = None
    source_track_id: str | None = None
    created_at: int | None = None
    updated_at: int | None = None
    update_counter: int = 0

    @classmethod
    def from_workout(
        cls,
        workout: Workout,
        workout_id: str,
        user_id: str | None = None,
        source_track_id: str | None = None,
    ) -> "WorkoutRecord":
        """Build a record from a structured workout."""
        return cls(
            id=workout_id,
            name=workout.name,
            description=workout.description,
            scheme=workout.scheme,
            scope=workout.scope or "private",
            reps_per_round=workout.reps_per_round,
            rounds_to_score=workout.rounds_to_score or 1,
            user_id=user_id,
            tiebreak_scheme=workout.tiebreak_scheme,
            secondary_scheme=workout.secondary_scheme,
            source_track_id=source_track_id,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "scope": self.scope,
            "scheme": self.scheme,
            "reps_per_round": self.reps_per_round,
            "rounds_to_score": self.rounds_to_score,
            "user_id": self.user_id,
            "sugar_id": self.sugar_id,
            "tiebreak_scheme": self.tiebreak_scheme,
            "secondary_scheme": self.secondary_scheme,
            "source_track_id": self.source_track_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "update_counter": self.update_counter,
        }

    @classmethod
    def from_row(cls, row: dict) -> "WorkoutRecord":
        """Create from database row."""
        return cls(
            id=row["id"],
            name=row.get("name", ""),
            description=row.get("description", ""),
            scheme=row.get("scheme", "time"),
            scope=row.get("scope", "private"),
            reps_per_round=row.get("reps_per_round"),
            rounds_to_score=row.get("rounds_to_score") or 1,
            user_id=row.get("user_id"),
            sugar_id=row.get("sugar_id"),
            tiebreak_scheme=row.get("tiebreak_scheme"),
            secondary_scheme=row.get("secondary_scheme"),
            source_track_id=row.get("source_track_id"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
            update_counter=row.get("update_counter") or 0,
        )


@dataclass
class ProgrammingTrack:
    """A programming track grouping workouts by day number."""

    id: str
    name: str
    type: TrackType = TrackType.OFFICIAL_3RD_PARTY
    description: str | None = None
    owner_team_id: str | None = None
    is_public: bool = False
    created_at: int | None = None
    updated_at: int | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "type": self.type.value,
            "owner_team_id": self.owner_team_id,
            "is_public": int(self.is_public),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_row(cls, row: dict) -> "ProgrammingTrack":
        """Create from database row."""
        return cls(
            id=row["id"],
            name=row.get("name", ""),
            type=TrackType(row.get("type", TrackType.OFFICIAL_3RD_PARTY.value)),
            description=row.get("description"),
            owner_team_id=row.get("owner_team_id"),
            is_public=bool(row.get("is_public", 0)),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


@dataclass
class TrackWorkout:
    """A workout placed on a track at a day number."""

    id: str
    track_id: str
    workout_id: str
    day_number: int
    week_number: int | None = None
    notes: str | None = None
    created_at: int | None = None
    updated_at: int | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "track_id": self.track_id,
            "workout_id": self.workout_id,
            "day_number": self.day_number,
            "week_number": self.week_number,
            "notes": self.notes,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_row(cls, row: dict) -> "TrackWorkout":
        """Create from database row."""
        return cls(
            id=row["id"],
            track_id=row["track_id"],
            workout_id=row["workout_id"],
            day_number=row["day_number"],
            week_number=row.get("week_number"),
            notes=row.get("notes"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


@dataclass
class ScheduledWorkoutInstance:
    """A track workout scheduled for a team on a day."""

    id: str
    team_id: str
    track_workout_id: str
    scheduled_date: int
    team_specific_notes: str | None = None
    scaling_guidance_for_day: str | None = None
    class_times: str | None = None
    created_at: int | None = None
    updated_at: int | None = None
    extra: dict = field(default_factory=dict)

    @property
    def scheduled_datetime(self) -> datetime:
        """Scheduled moment as an aware UTC datetime."""
        return datetime.fromtimestamp(self.scheduled_date, tz=timezone.utc)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "team_id": self.team_id,
            "track_workout_id": self.track_workout_id,
            "scheduled_date": self.scheduled_date,
            "team_specific_notes": self.team_specific_notes,
            "scaling_guidance_for_day": self.scaling_guidance_for_day,
            "class_times": self.class_times,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_row(cls, row: dict) -> "ScheduledWorkoutInstance":
        """
        Create from database row.

        Columns joined in from the track workout and workout (workout
        name, day number and so on) land in `extra`.
        """
        own = {
            "id", "team_id", "track_workout_id", "scheduled_date",
            "team_specific_notes", "scaling_guidance_for_day", "class_times",
            "created_at", "updated_at", "update_counter",
        }
        return cls(
            id=row["id"],
            team_id=row["team_id"],
            track_workout_id=row["track_workout_id"],
            scheduled_date=row["scheduled_date"],
            team_specific_notes=row.get("team_specific_notes"),
            scaling_guidance_for_day=row.get("scaling_guidance_for_day"),
            class_times=row.get("class_times"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
            extra={k: v for k, v in row.items() if k not in own},
        )

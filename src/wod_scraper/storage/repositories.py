"""
Repository classes for data access.

Provides typed interfaces for database operations on workouts,
programming tracks and scheduled instances.
"""

from wod_scraper.storage.database import Database
from wod_scraper.storage.models import (
    ProgrammingTrack,
    ScheduledWorkoutInstance,
    TrackWorkout,
    WorkoutRecord,
)
from wod_scraper.utils.dates import now_timestamp
from wod_scraper.utils.logging import get_logger

logger = get_logger(__name__)


class WorkoutRepository:
    """
    Repository for workout records.

    Example:
        >>> repo = WorkoutRepository(database)
        >>> repo.insert(WorkoutRecord(id="fran", name="Fran", ...))
        >>> workout = repo.get_by_id("fran")
    """

    def __init__(self, db: Database) -> None:
        """Initialize repository with database."""
        self.db = db

    def insert(self, workout: WorkoutRecord) -> str:
        """
        Insert a new workout.

        Args:
            workout: WorkoutRecord to insert; timestamps default to now

        Returns:
            Inserted workout ID
        """
        now = now_timestamp()
        data = workout.to_dict()
        data["created_at"] = workout.created_at or now
        data["updated_at"] = workout.updated_at or now

        self.db.insert("workouts", data)
        logger.debug(f"Inserted workout {workout.id}")
        return workout.id

    def update(self, workout: WorkoutRecord) -> bool:
        """
        Update an existing workout's content.

        Returns:
            True if updated, False if not found
        """
        affected = self.db.update(
            "workouts",
            {
                "name": workout.name,
                "description": workout.description,
                "scope": workout.scope,
                "scheme": workout.scheme,
                "reps_per_round": workout.reps_per_round,
                "rounds_to_score": workout.rounds_to_score,
                "tiebreak_scheme": workout.tiebreak_scheme,
                "secondary_scheme": workout.secondary_scheme,
                "updated_at": now_timestamp(),
                "update_counter": workout.update_counter + 1,
            },
            "id = ?",
            (workout.id,),
        )
        return affected > 0

    def get_by_id(self, workout_id: str) -> WorkoutRecord | None:
        """Get workout by ID."""
        row = self.db.fetch_one(
            "SELECT * FROM workouts WHERE id = ?", (workout_id,))
        return WorkoutRecord.from_row(row) if row else None

    def exists(self, workout_id: str) -> bool:
        """Check if workout exists."""
        result = self.db.fetch_one(
            "SELECT 1 FROM workouts WHERE id = ?", (workout_id,))
        return result is not None

    def count(self) -> int:
        """Count stored workouts."""
        result = self.db.fetch_one("SELECT COUNT(*) as count FROM workouts")
        return result["count"] if result else 0


class TrackRepository:
    """
    Repository for programming tracks and the workouts placed on them.
    """

    def __init__(self, db: Database) -> None:
        """Initialize repository with database."""
        self.db = db

    def insert(self, track: ProgrammingTrack) -> str:
        """Insert a programming track."""
        now = now_timestamp()
        data = track.to_dict()
        data["created_at"] = track.created_at or now
        data["updated_at"] = track.updated_at or now

        self.db.insert("programming_track", data)
        logger.debug(f"Inserted programming track {track.id}")
        return track.id

    def get_by_id(self, track_id: str) -> ProgrammingTrack | None:
        """Get track by ID."""
        row = self.db.fetch_one(
            "SELECT * FROM programming_track WHERE id = ?", (track_id,))
        return ProgrammingTrack.from_row(row) if row else None

    def exists(self, track_id: str) -> bool:
        """Check if track exists."""
        result = self.db.fetch_one(
            "SELECT 1 FROM programming_track WHERE id = ?", (track_id,))
        return result is not None

    def insert_track_workout(self, track_workout: TrackWorkout) -> str:
        """Place a workout on a track."""
        now = now_timestamp()
        data = track_workout.to_dict()
        data["created_at"] = track_workout.created_at or now
        data["updated_at"] = track_workout.updated_at or now

        self.db.insert("track_workout", data)
        return track_workout.id

    def get_track_workout(self, track_workout_id: str) -> TrackWorkout | None:
        """Get track workout by ID."""
        row = self.db.fetch_one(
            "SELECT * FROM track_workout WHERE id = ?", (track_workout_id,))
        return TrackWorkout.from_row(row) if row else None

    def next_day_number(self, track_id: str) -> int:
        """One past the highest day number on the track, 1 if empty."""
        result = self.db.fetch_one(
            """
            SELECT COALESCE(MAX(day_number), 0) + 1 as next_day_number
            FROM track_workout
            WHERE track_id = ?
            """,
            (track_id,),
        )
        return result["next_day_number"] if result else 1

    def list_workouts(self, track_id: str) -> list[dict]:
        """
        Workouts on a track ordered by day number.

        Rows carry the track workout columns plus `workout_name` and
        `workout_description`.
        """
        return self.db.fetch_all(
            """
            SELECT tw.*, w.name as workout_name, w.description as workout_description
            FROM track_workout tw
            JOIN workouts w ON tw.workout_id = w.id
            WHERE tw.track_id = ?
            ORDER BY tw.day_number ASC
            """,
            (track_id,),
        )

    def add_team_track(
        self,
        team_id: str,
        track_id: str,
        is_active: bool = True,
    ) -> None:
        """Subscribe a team to a track; re-subscribing updates is_active."""
        now = now_timestamp()
        self.db.execute(
            """
            INSERT INTO team_programming_track
                (team_id, track_id, is_active, added_at, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(team_id, track_id) DO UPDATE SET
                is_active = excluded.is_active,
                updated_at = excluded.updated_at,
                update_counter = update_counter + 1
            """,
            (team_id, track_id, int(is_active), now, now, now),
        )
        self.db.commit()

    def active_tracks_for_team(self, team_id: str) -> list[dict]:
        """Active track subscriptions of a team, newest first."""
        return self.db.fetch_all(
            """
            SELECT tpt.*, pt.name as track_name, pt.description as track_description
            FROM team_programming_track tpt
            JOIN programming_track pt ON tpt.track_id = pt.id
            WHERE tpt.team_id = ? AND tpt.is_active = 1
            ORDER BY tpt.added_at DESC
            """,
            (team_id,),
        )


class ScheduleRepository:
    """
    Repository for scheduled workout instances.
    """

    def __init__(self, db: Database) -> None:
        """Initialize repository with database."""
        self.db = db

    def insert(self, instance: ScheduledWorkoutInstance) -> str:
        """Insert a scheduled instance."""
        now = now_timestamp()
        data = instance.to_dict()
        data["created_at"] = instance.created_at or now
        data["updated_at"] = instance.updated_at or now

        self.db.insert("scheduled_workout_instance", data)
        return instance.id

    def get_by_id(self, instance_id: str) -> ScheduledWorkoutInstance | None:
        """Get scheduled instance by ID."""
        row = self.db.fetch_one(
            "SELECT * FROM scheduled_workout_instance WHERE id = ?",
            (instance_id,),
        )
        return ScheduledWorkoutInstance.from_row(row) if row else None

    def get_by_team_and_range(
        self,
        team_id: str,
        start_timestamp: int,
        end_timestamp: int,
    ) -> list[ScheduledWorkoutInstance]:
        """
        Instances for a team scheduled in [start, end).

        `extra` on each instance holds `day_number`, `week_number` and
        `workout_name`.
        """
        rows = self.db.fetch_all(
            """
            SELECT swi.*, tw.day_number, tw.week_number, w.name as workout_name
            FROM scheduled_workout_instance swi
            JOIN track_workout tw ON swi.track_workout_id = tw.id
            JOIN workouts w ON tw.workout_id = w.id
            WHERE swi.team_id = ?
              AND swi.scheduled_date >= ? AND swi.scheduled_date < ?
            ORDER BY swi.scheduled_date ASC
            """,
            (team_id, start_timestamp, end_timestamp),
        )
        return [ScheduledWorkoutInstance.from_row(row) for row in rows]

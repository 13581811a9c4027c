"""
Programming service.

Files workouts onto programming tracks and schedules them for teams,
validating references before writing. Scheduled dates are stored as
the unix timestamp of local midnight in the configured timezone.
"""

import random
import string
import time
from datetime import date, timedelta
from typing import Any

from wod_scraper.core.exceptions import (
    DuplicateRecordError,
    RecordNotFoundError,
    StorageError,
)
from wod_scraper.llm.models import Workout
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
from wod_scraper.utils.dates import (
    DEFAULT_TIMEZONE,
    current_date,
    start_of_day_timestamp,
)
from wod_scraper.utils.logging import get_logger

logger = get_logger(__name__)

WORKOUT_ID_PREFIX = "workout"
TRACK_WORKOUT_ID_PREFIX = "trwk"
SCHEDULED_INSTANCE_ID_PREFIX = "swi"

_BASE36 = string.digits + string.ascii_lowercase


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_id(prefix: str) -> str:
    """
    Generate a record ID like `workout_lr1x2k3_a8f3k2m9q1_7pz`.

    Millisecond timestamp, ten random characters and a random counter,
    all base36.
    """
    timestamp = _to_base36(int(time.time() * 1000))
    random_part = "".join(random.choices(_BASE36, k=10))
    counter = _to_base36(random.randrange(10000))
    return f"{prefix}_{timestamp}_{random_part}_{counter}"


class ProgrammingService:
    """
    Workout, track and schedule operations.

    Example:
        >>> service = ProgrammingService(database)
        >>> workout_id = service.insert_workout(workout)
        >>> track_workout_id = service.add_workout_to_track(workout_id, "ptrk_main")
        >>> service.schedule_workout_for_date(track_workout_id, "team_1", date(2025, 1, 6))
    """

    def __init__(self, db: Database, timezone: str = DEFAULT_TIMEZONE) -> None:
        """
        Initialize service.

        Args:
            db: Database with an initialized schema
            timezone: Timezone whose midnight anchors scheduled dates
        """
        self.db = db
        self.timezone = timezone
        self.workouts = WorkoutRepository(db)
        self.tracks = TrackRepository(db)
        self.schedule = ScheduleRepository(db)

    # =========================================================================
    # Workouts
    # =========================================================================

    def insert_workout(
        self,
        workout: Workout,
        user_id: str | None = None,
        source_track_id: str | None = None,
    ) -> str:
        """
        Store a workout.

        Args:
            workout: Structured workout; a `workout_` ID is generated if
                it has none
            user_id: Owner of the workout
            source_track_id: Track the workout was scraped for

        Returns:
            Stored workout ID

        Raises:
            DuplicateRecordError: If the workout carries an ID already stored
        """
        workout_id = workout.id
        if workout_id:
            if self.workouts.exists(workout_id):
                raise DuplicateRecordError(
                    f"Workout with ID {workout_id} already exists",
                    record_type="workout",
                    record_id=workout_id,
                )
        else:
            workout_id = generate_id(WORKOUT_ID_PREFIX)
            while self.workouts.exists(workout_id):
                workout_id = generate_id(WORKOUT_ID_PREFIX)

        record = WorkoutRecord.from_workout(
            workout,
            workout_id=workout_id,
            user_id=user_id,
            source_track_id=source_track_id,
        )
        self.workouts.insert(record)
        logger.info(f"Workout inserted: {workout_id} ({workout.name})")
        return workout_id

    def get_workout(self, workout_id: str) -> WorkoutRecord | None:
        """Get a stored workout."""
        return self.workouts.get_by_id(workout_id)

    # =========================================================================
    # Tracks
    # =========================================================================

    def ensure_track(
        self,
        track_id: str,
        name: str,
        description: str | None = None,
        track_type: TrackType = TrackType.OFFICIAL_3RD_PARTY,
        owner_team_id: str | None = None,
        is_public: bool = False,
    ) -> ProgrammingTrack:
        """Return the track, creating it first if it does not exist."""
        existing = self.tracks.get_by_id(track_id)
        if existing is not None:
            return existing

        track = ProgrammingTrack(
            id=track_id,
            name=name,
            type=track_type,
            description=description,
            owner_team_id=owner_team_id,
            is_public=is_public,
        )
        self.tracks.insert(track)
        logger.info(f"Created programming track {track_id} ({name})")
        return self.tracks.get_by_id(track_id) or track

    def subscribe_team(self, team_id: str, track_id: str) -> None:
        """Make a track active for a team."""
        if not self.tracks.exists(track_id):
            raise RecordNotFoundError(
                f"Programming track {track_id} does not exist",
                record_type="programming_track",
                record_id=track_id,
            )
        self.tracks.add_team_track(team_id, track_id)

    def add_workout_to_track(
        self,
        workout_id: str,
        track_id: str,
        day_number: int | None = None,
        week_number: int | None = None,
        notes: str | None = None,
    ) -> str:
        """
        Place a workout on a track.

        Args:
            workout_id: Stored workout
            track_id: Existing programming track
            day_number: Day on the track; the next free day if None
            week_number: Optional week on the track
            notes: Optional notes

        Returns:
            Track workout ID

        Raises:
            RecordNotFoundError: If the workout or track does not exist
        """
        if not self.workouts.exists(workout_id):
            raise RecordNotFoundError(
                f"Workout {workout_id} does not exist",
                record_type="workout",
                record_id=workout_id,
            )
        if not self.tracks.exists(track_id):
            raise RecordNotFoundError(
                f"Programming track {track_id} does not exist",
                record_type="programming_track",
                record_id=track_id,
            )

        if day_number is None:
            day_number = self.tracks.next_day_number(track_id)

        track_workout = TrackWorkout(
            id=generate_id(TRACK_WORKOUT_ID_PREFIX),
            track_id=track_id,
            workout_id=workout_id,
            day_number=day_number,
            week_number=week_number,
            notes=notes,
        )
        self.tracks.insert_track_workout(track_workout)
        logger.info(
            f"Workout {workout_id} added to track {track_id} as day {day_number}")
        return track_workout.id

    def get_track_workouts(self, track_id: str) -> list[dict]:
        """Workouts on a track ordered by day number."""
        workouts = self.tracks.list_workouts(track_id)
        logger.debug(f"Track {track_id} has {len(workouts)} workout(s)")
        return workouts

    def get_next_day_number(self, track_id: str) -> int:
        """Next free day number on a track."""
        return self.tracks.next_day_number(track_id)

    # =========================================================================
    # Scheduling
    # =========================================================================

    def schedule_workout_for_date(
        self,
        track_workout_id: str,
        team_id: str,
        scheduled_date: date,
        team_specific_notes: str | None = None,
        scaling_guidance_for_day: str | None = None,
        class_times: str | None = None,
    ) -> str:
        """
        Schedule a track workout for a team.

        Returns:
            Scheduled instance ID

        Raises:
            RecordNotFoundError: If the track workout does not exist
        """
        if self.tracks.get_track_workout(track_workout_id) is None:
            raise RecordNotFoundError(
                f"Track workout {track_workout_id} does not exist",
                record_type="track_workout",
                record_id=track_workout_id,
            )

        instance = ScheduledWorkoutInstance(
            id=generate_id(SCHEDULED_INSTANCE_ID_PREFIX),
            team_id=team_id,
            track_workout_id=track_workout_id,
            scheduled_date=start_of_day_timestamp(scheduled_date, self.timezone),
            team_specific_notes=team_specific_notes,
            scaling_guidance_for_day=scaling_guidance_for_day,
            class_times=class_times,
        )
        self.schedule.insert(instance)
        logger.info(
            f"Workout scheduled: {instance.id} for team {team_id} "
            f"on {scheduled_date.isoformat()}"
        )
        return instance.id

    def schedule_workout_for_today(
        self,
        track_workout_id: str,
        team_id: str,
        **kwargs: Any,
    ) -> str:
        """Schedule a track workout for today in the service timezone."""
        return self.schedule_workout_for_date(
            track_workout_id, team_id, current_date(self.timezone), **kwargs)

    def get_scheduled_workouts(
        self,
        team_id: str,
        day: date,
    ) -> list[ScheduledWorkoutInstance]:
        """Workouts scheduled for a team on a calendar day."""
        start = start_of_day_timestamp(day, self.timezone)
        end = start_of_day_timestamp(day + timedelta(days=1), self.timezone)
        instances = self.schedule.get_by_team_and_range(team_id, start, end)
        logger.debug(
            f"Found {len(instances)} scheduled workout(s) for team {team_id} "
            f"on {day.isoformat()}"
        )
        return instances

    def get_todays_scheduled_workouts(
        self, team_id: str
    ) -> list[ScheduledWorkoutInstance]:
        """Workouts scheduled for a team today in the service timezone."""
        return self.get_scheduled_workouts(team_id, current_date(self.timezone))

    # =========================================================================
    # Batches
    # =========================================================================

    def execute_transaction(self, operations: list[dict[str, Any]]) -> list[dict[str, str]]:
        """
        Run a batch of operations atomically.

        Each operation is `{"type": ..., "data": {...}}` with type one of
        `insert_workout`, `add_workout_to_track` or `schedule_workout`.
        `data` holds the keyword arguments of the matching method;
        `insert_workout` takes the workout under `workout` (a Workout or
        a dict). When `workout_id` or `track_workout_id` is omitted, the
        ID produced by the latest earlier operation of that kind is used.

        Returns:
            One `{"type", "id"}` entry per operation, in order

        Raises:
            StorageError: On an unknown operation type or a storage
                failure; nothing from the batch is stored
            pydantic.ValidationError: If a workout dict does not validate
        """
        logger.debug(f"Executing transaction with {len(operations)} operation(s)")
        results: list[dict[str, str]] = []
        last_ids: dict[str, str] = {}

        with self.db.transaction():
            for operation in operations:
                op_type = operation.get("type")
                data = dict(operation.get("data") or {})

                if op_type == "insert_workout":
                    workout = data.pop("workout")
                    if not isinstance(workout, Workout):
                        workout = Workout.model_validate(workout)
                    record_id = self.insert_workout(workout, **data)
                    last_ids["workout_id"] = record_id
                elif op_type == "add_workout_to_track":
                    data.setdefault("workout_id", last_ids.get("workout_id"))
                    record_id = self.add_workout_to_track(**data)
                    last_ids["track_workout_id"] = record_id
                elif op_type == "schedule_workout":
                    data.setdefault(
                        "track_workout_id", last_ids.get("track_workout_id"))
                    record_id = self.schedule_workout_for_date(**data)
                else:
                    raise StorageError(
                        f"Unknown operation type: {op_type}",
                        details={"operation": op_type},
                    )

                results.append({"type": op_type, "id": record_id})

        logger.info(
            "Transaction completed: "
            + ", ".join(f"{r['type']}={r['id']}" for r in results)
        )
        return results

"""
Database schema definition.

Manages SQLite schema creation and versioning for workouts,
programming tracks and their scheduled instances.
"""

import sqlite3

from wod_scraper.utils.logging import get_logger

logger = get_logger(__name__)

SCHEMA_VERSION = 1

SCHEMES = (
    "'time', 'time-with-cap', 'pass-fail', 'rounds-reps', 'reps', 'emom', "
    "'load', 'calories', 'meters', 'feet', 'points'"
)
SECONDARY_SCHEMES = (
    "'time', 'pass-fail', 'rounds-reps', 'reps', 'emom', "
    "'load', 'calories', 'meters', 'feet', 'points'"
)


class SchemaManager:
    """
    Manages database schema creation.

    Example:
        >>> manager = SchemaManager(connection)
        >>> manager.initialize()
    """

    def __init__(self, connection: sqlite3.Connection) -> None:
        self.conn = connection

    def initialize(self) -> None:
        """
        Initialize database schema.

        Creates all tables if they don't exist.
        """
        logger.info("Initializing database schema")

        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER PRIMARY KEY,
                applied_at TEXT DEFAULT CURRENT_TIMESTAMP
            )
        """)

        cursor = self.conn.execute("SELECT MAX(version) FROM schema_version")
        current_version = cursor.fetchone()[0]

        if current_version is None:
            self._create_schema_v1()
            self.conn.execute(
                "INSERT INTO schema_version (version) VALUES (?)",
                (SCHEMA_VERSION,)
            )
            self.conn.commit()
            logger.info(f"Created schema version {SCHEMA_VERSION}")
        else:
            logger.info(f"Schema version {current_version} already exists")

    def current_version(self) -> int | None:
        """Applied schema version, or None before initialization."""
        try:
            cursor = self.conn.execute("SELECT MAX(version) FROM schema_version")
        except sqlite3.OperationalError:
            return None
        return cursor.fetchone()[0]

    def _create_schema_v1(self) -> None:
        """Create version 1 of the database schema."""

        self.conn.execute(f"""
            CREATE TABLE IF NOT EXISTS workouts (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                description TEXT NOT NULL,
                scope TEXT DEFAULT 'private' NOT NULL
                    CHECK (scope IN ('private', 'public')),
                scheme TEXT NOT NULL CHECK (scheme IN ({SCHEMES})),
                reps_per_round INTEGER,
                rounds_to_score INTEGER DEFAULT 1,
                user_id TEXT,
                sugar_id TEXT,
                tiebreak_scheme TEXT CHECK (tiebreak_scheme IN ('time', 'reps')),
                secondary_scheme TEXT CHECK (secondary_scheme IN ({SECONDARY_SCHEMES})),
                source_track_id TEXT,
                created_at INTEGER NOT NULL DEFAULT (strftime('%s', 'now')),
                updated_at INTEGER NOT NULL DEFAULT (strftime('%s', 'now')),
                update_counter INTEGER DEFAULT 0
            )
        """)

        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS programming_track (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                description TEXT,
                type TEXT NOT NULL,
                owner_team_id TEXT,
                is_public INTEGER DEFAULT 0 NOT NULL,
                created_at INTEGER NOT NULL DEFAULT (strftime('%s', 'now')),
                updated_at INTEGER NOT NULL DEFAULT (strftime('%s', 'now')),
                update_counter INTEGER DEFAULT 0
            )
        """)

        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS track_workout (
                id TEXT PRIMARY KEY,
                track_id TEXT NOT NULL,
                workout_id TEXT NOT NULL,
                day_number INTEGER NOT NULL,
                week_number INTEGER,
                notes TEXT,
                created_at INTEGER NOT NULL DEFAULT (strftime('%s', 'now')),
                updated_at INTEGER NOT NULL DEFAULT (strftime('%s', 'now')),
                update_counter INTEGER DEFAULT 0,
                FOREIGN KEY (track_id) REFERENCES programming_track(id),
                FOREIGN KEY (workout_id) REFERENCES workouts(id)
            )
        """)

        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS scheduled_workout_instance (
                id TEXT PRIMARY KEY,
                team_id TEXT NOT NULL,
                track_workout_id TEXT NOT NULL,
                scheduled_date INTEGER NOT NULL,
                team_specific_notes TEXT,
                scaling_guidance_for_day TEXT,
                class_times TEXT,
                created_at INTEGER NOT NULL DEFAULT (strftime('%s', 'now')),
                updated_at INTEGER NOT NULL DEFAULT (strftime('%s', 'now')),
                update_counter INTEGER DEFAULT 0,
                FOREIGN KEY (track_workout_id) REFERENCES track_workout(id)
            )
        """)

        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS team_programming_track (
                team_id TEXT NOT NULL,
                track_id TEXT NOT NULL,
                is_active INTEGER DEFAULT 1 NOT NULL,
                added_at INTEGER NOT NULL DEFAULT (strftime('%s', 'now')),
                created_at INTEGER NOT NULL DEFAULT (strftime('%s', 'now')),
                updated_at INTEGER NOT NULL DEFAULT (strftime('%s', 'now')),
                update_counter INTEGER DEFAULT 0,
                PRIMARY KEY (team_id, track_id),
                FOREIGN KEY (track_id) REFERENCES programming_track(id)
            )
        """)

        self.conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_track_workout_track ON track_workout(track_id)")
        self.conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_track_workout_day ON track_workout(day_number)")
        self.conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_track_workout_workout ON track_workout(workout_id)")
        self.conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_scheduled_team ON scheduled_workout_instance(team_id)")
        self.conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_scheduled_date "
            "ON scheduled_workout_instance(scheduled_date)")
        self.conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_programming_track_type ON programming_track(type)")
        self.conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_team_track_active "
            "ON team_programming_track(is_active)")

        logger.debug("Schema v1 tables and indexes created")

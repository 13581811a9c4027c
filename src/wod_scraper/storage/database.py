"""
SQLite access for workouts, tracks and schedules.

Each thread gets its own connection. Single writes commit on their
own; `transaction()` groups several writes so a scrape is stored
completely or not at all.
"""

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from wod_scraper.config import StorageSettings
from wod_scraper.core.exceptions import DatabaseError
from wod_scraper.storage.schema import SchemaManager
from wod_scraper.utils.logging import get_logger

logger = get_logger(__name__)

SQLITE_PAGE_SIZE = 4096


class Database:
    """
    Connection manager and query helpers.

    Example:
        >>> db = Database.from_settings(settings.storage)
        >>> with db.transaction():
        ...     db.insert("workouts", workout_row)
        ...     db.insert("track_workout", track_workout_row)
    """

    def __init__(
        self,
        database_path: Path | str,
        wal_mode: bool = True,
        cache_size_mb: int = 16,
    ) -> None:
        self.database_path = Path(database_path)
        self.wal_mode = wal_mode
        self.cache_size_mb = cache_size_mb

        self._connections: dict[int, sqlite3.Connection] = {}
        self._lock = threading.Lock()
        self._state = threading.local()
        self._initialized = False

    @classmethod
    def from_settings(cls, settings: StorageSettings) -> "Database":
        """Open the configured database and make sure its schema exists."""
        database = cls(
            database_path=settings.database_path,
            wal_mode=settings.wal_mode,
            cache_size_mb=settings.cache_size_mb,
        )
        database.setup()
        return database

    def setup(self) -> None:
        """Create the database directory and apply the schema."""
        self.database_path.parent.mkdir(parents=True, exist_ok=True)
        SchemaManager(self._get_connection()).initialize()
        self._initialized = True
        logger.info(f"Database ready at {self.database_path}")

    # =========================================================================
    # Connections
    # =========================================================================

    def _get_connection(self) -> sqlite3.Connection:
        thread_id = threading.get_ident()
        conn = self._connections.get(thread_id)
        if conn is None:
            with self._lock:
                conn = self._connections.get(thread_id)
                if conn is None:
                    conn = self._create_connection()
                    self._connections[thread_id] = conn
        return conn

    def _create_connection(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(
                str(self.database_path),
                check_same_thread=False,
                timeout=30.0,
            )
            conn.row_factory = sqlite3.Row

            cache_pages = self.cache_size_mb * 1024 * 1024 // SQLITE_PAGE_SIZE
            journal_mode = "WAL" if self.wal_mode else "DELETE"
            for pragma in (
                f"cache_size = -{cache_pages}",
                f"journal_mode = {journal_mode}",
                "synchronous = NORMAL",
                "foreign_keys = ON",
            ):
                conn.execute(f"PRAGMA {pragma}")
        except sqlite3.Error as e:
            raise DatabaseError(
                f"Cannot open database: {e}",
                details={"path": str(self.database_path)},
            ) from e

        logger.debug(
            f"Opened connection to {self.database_path} "
            f"for thread {threading.get_ident()} (journal_mode={journal_mode})"
        )
        return conn

    # =========================================================================
    # Transactions
    # =========================================================================

    @property
    def in_transaction(self) -> bool:
        """Whether this thread is inside `transaction()`."""
        return getattr(self._state, "depth", 0) > 0

    def commit(self) -> None:
        """Commit pending writes; a no-op inside `transaction()`."""
        if not self.in_transaction:
            self._get_connection().commit()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Group writes into one commit.

        Rolls back everything on an exception. A nested `transaction()`
        joins the outer one, so only the outermost block commits.
        """
        conn = self._get_connection()

        if self.in_transaction:
            self._state.depth += 1
            try:
                yield conn
            finally:
                self._state.depth -= 1
            return

        # finish any implicit transaction left open by earlier writes
        if conn.in_transaction:
            conn.commit()

        self._state.depth = 1
        try:
            conn.execute("BEGIN")
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            logger.warning("Transaction rolled back")
            raise
        finally:
            self._state.depth = 0

    # =========================================================================
    # Queries
    # =========================================================================

    def execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        """Run one statement; sqlite errors become DatabaseError."""
        try:
            return self._get_connection().execute(sql, params)
        except sqlite3.Error as e:
            raise DatabaseError(f"Query failed: {e}", query=sql) from e

    def fetch_one(self, sql: str, params: tuple = ()) -> dict[str, Any] | None:
        """First row of a query as a dict, or None."""
        row = self.execute(sql, params).fetchone()
        return dict(row) if row is not None else None

    def fetch_all(self, sql: str, params: tuple = ()) -> list[dict[str, Any]]:
        """All rows of a query as dicts."""
        return [dict(row) for row in self.execute(sql, params).fetchall()]

    def insert(self, table: str, data: dict[str, Any]) -> None:
        """Insert one row given as column-value pairs."""
        columns = ", ".join(data)
        placeholders = ", ".join("?" for _ in data)
        self.execute(
            f"INSERT INTO {table} ({columns}) VALUES ({placeholders})",
            tuple(data.values()),
        )
        self.commit()

    def update(
        self,
        table: str,
        data: dict[str, Any],
        where: str,
        params: tuple = (),
    ) -> int:
        """
        Update matching rows.

        Args:
            table: Table name
            data: Column-value pairs to set
            where: WHERE clause with `?` placeholders
            params: Values for the WHERE placeholders

        Returns:
            Number of rows changed
        """
        assignments = ", ".join(f"{column} = ?" for column in data)
        cursor = self.execute(
            f"UPDATE {table} SET {assignments} WHERE {where}",
            tuple(data.values()) + tuple(params),
        )
        self.commit()
        return cursor.rowcount

    def delete(self, table: str, where: str, params: tuple = ()) -> int:
        """Delete matching rows and return how many were removed."""
        cursor = self.execute(f"DELETE FROM {table} WHERE {where}", params)
        self.commit()
        return cursor.rowcount

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """Close every thread's connection."""
        with self._lock:
            connections = list(self._connections.values())
            self._connections.clear()

        for conn in connections:
            try:
                conn.close()
            except sqlite3.Error as e:
                logger.warning(f"Error closing connection: {e}")

        logger.debug(f"Closed {len(connections)} connection(s) to {self.database_path}")

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "ready" if self._initialized else "not set up"
        return f"Database(path={str(self.database_path)!r}, {state})"

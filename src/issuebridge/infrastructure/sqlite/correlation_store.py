"""SQLite-backed correlation store (outbound message id -> issue number)."""

from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator

from loguru import logger

from issuebridge.application.ports.correlation_store import CorrelationStore
from issuebridge.domain.errors import DuplicateCorrelationError, StoreError
from issuebridge.domain.models import CorrelationEntry


class SQLiteCorrelationStore(CorrelationStore):
    """
    Write-once mapping from outbound message id to issue number.

    Every call opens its own connection and commits before returning, so a
    concurrent reader sees either no row or the complete row. Writers are
    additionally serialized in-process.
    """

    def __init__(self, db_path: str | Path = "data/correlations.db"):
        self.db_path = Path(db_path)
        self._write_lock = threading.Lock()
        self._ensure_db()

    def _ensure_db(self) -> None:
        """Create database and table if they don't exist."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            with self._connection() as conn:
                conn.executescript("""
                    PRAGMA journal_mode=WAL;

                    CREATE TABLE IF NOT EXISTS correlations (
                        message_id TEXT PRIMARY KEY,
                        issue_number INTEGER NOT NULL,
                        created_at TEXT NOT NULL
                    );
                """)
        except (OSError, sqlite3.Error) as e:
            raise StoreError(f"Cannot open correlation store at {self.db_path}: {e}") from e
        logger.info(f"Correlation store initialized at {self.db_path}")

    @contextmanager
    def _connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Context manager for database connections."""
        conn = sqlite3.connect(self.db_path, timeout=30.0)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA synchronous=FULL")
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def put(self, message_id: str, issue_number: int) -> None:
        """Record a new correlation; existing ids are never overwritten."""
        if not message_id:
            raise ValueError("message_id must be a non-empty string")

        now = datetime.now(timezone.utc).isoformat()
        with self._write_lock:
            try:
                with self._connection() as conn:
                    conn.execute(
                        """INSERT INTO correlations (message_id, issue_number, created_at)
                           VALUES (?, ?, ?)""",
                        (message_id, int(issue_number), now),
                    )
            except sqlite3.IntegrityError as e:
                raise DuplicateCorrelationError(message_id, self.get(message_id)) from e
            except sqlite3.Error as e:
                raise StoreError(f"Failed to record correlation for {message_id!r}: {e}") from e

        logger.debug(f"Recorded correlation {message_id} -> #{issue_number}")

    def get(self, message_id: str) -> int | None:
        """Return the issue number for ``message_id``, or None."""
        try:
            with self._connection() as conn:
                row = conn.execute(
                    "SELECT issue_number FROM correlations WHERE message_id = ?",
                    (message_id,),
                ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to read correlation for {message_id!r}: {e}") from e
        return row["issue_number"] if row else None

    def list_all(self) -> list[CorrelationEntry]:
        """All correlations, oldest first."""
        try:
            with self._connection() as conn:
                rows = conn.execute(
                    """SELECT message_id, issue_number, created_at FROM correlations
                       ORDER BY created_at, message_id"""
                ).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to list correlations: {e}") from e

        return [
            CorrelationEntry(
                message_id=row["message_id"],
                issue_number=row["issue_number"],
                created_at=row["created_at"],
            )
            for row in rows
        ]

    def count(self) -> int:
        with self._connection() as conn:
            return conn.execute("SELECT COUNT(*) FROM correlations").fetchone()[0]

    def verify(self) -> bool:
        """Run SQLite's integrity check; True when the file is consistent."""
        try:
            with self._connection() as conn:
                result = conn.execute("PRAGMA integrity_check").fetchone()[0]
        except sqlite3.Error as e:
            logger.error(f"Correlation store integrity check failed: {e}")
            return False
        if result != "ok":
            logger.error(f"Correlation store integrity check reported: {result}")
            return False
        return True

    def close(self) -> None:
        """Flush the write-ahead log into the main database file."""
        try:
            with self._connection() as conn:
                conn.execute("PRAGMA wal_checkpoint(TRUNCATE)")
            logger.info(f"Correlation store flushed at {self.db_path}")
        except sqlite3.Error as e:
            logger.warning(f"Correlation store flush failed: {e}")

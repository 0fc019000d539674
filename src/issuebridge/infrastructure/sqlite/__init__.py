"""SQLite infrastructure for correlation storage."""

from issuebridge.infrastructure.sqlite.correlation_store import SQLiteCorrelationStore

__all__ = [
    "SQLiteCorrelationStore",
]

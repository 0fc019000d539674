"""Domain models for the issue/email bridge."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal


class Direction(str, Enum):
    """Which way a reply travels."""

    TRACKER_TO_EMAIL = "tracker_to_email"
    EMAIL_TO_TRACKER = "email_to_tracker"


@dataclass(frozen=True)
class CanonicalReply:
    """A single reply, independent of the channel it arrived on."""

    direction: Direction
    author_handle: str
    subject_context: str
    body_text: str
    # Contact address outbound, In-Reply-To token inbound
    correlation_key: str
    issue_number: int | None = None


@dataclass(frozen=True)
class Ignored:
    """An event that needs no action (edits, deletes)."""

    reason: str


@dataclass(frozen=True)
class CorrelationEntry:
    """Outbound message id recorded against the issue it came from."""

    message_id: str
    issue_number: int
    created_at: str


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of handling one inbound event."""

    status: Literal["delivered", "ignored", "dry_run", "duplicate"]
    direction: Direction | None = None
    issue_number: int | None = None
    message_id: str | None = None
    detail: str | None = None

    def as_dict(self) -> dict:
        return {
            "status": self.status,
            "direction": self.direction.value if self.direction else None,
            "issue_number": self.issue_number,
            "message_id": self.message_id,
            "detail": self.detail,
        }

"""Turn each channel's native webhook event into a CanonicalReply."""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from issuebridge.application.address import extract_address
from issuebridge.domain.errors import MalformedSourceError
from issuebridge.domain.models import CanonicalReply, Direction, Ignored

CREATED_ACTION = "created"
EMAIL_REQUIRED_FIELDS = ("From", "stripped-html", "In-Reply-To")


# ============================================================================
# Tracker payload
# ============================================================================


class _Model(BaseModel):
    model_config = ConfigDict(extra="ignore")


class TrackerUser(_Model):
    login: str = Field(min_length=1)


class TrackerIssue(_Model):
    id: int | None = None
    number: int
    title: str
    body: str


class TrackerComment(_Model):
    user: TrackerUser
    body: str


class TrackerCommentEvent(_Model):
    """The subset of an issue_comment webhook the bridge reads."""

    action: str
    issue: TrackerIssue
    comment: TrackerComment


def _describe(error: ValidationError) -> str:
    fields = sorted({".".join(str(p) for p in e["loc"]) for e in error.errors()})
    return ", ".join(fields)


def from_tracker_event(event: Mapping[str, Any]) -> CanonicalReply | Ignored:
    """Normalize an issue comment event.

    Actions other than ``created`` (edits, deletions) are returned as Ignored
    before any other field is looked at.
    """
    if not isinstance(event, Mapping):
        raise MalformedSourceError("Tracker event is not a JSON object")

    action = event.get("action")
    if action != CREATED_ACTION:
        return Ignored(reason=f"comment action {action!r} is not forwarded")

    try:
        parsed = TrackerCommentEvent.model_validate(dict(event))
    except ValidationError as e:
        raise MalformedSourceError(f"Tracker event is missing or has invalid fields: {_describe(e)}") from e

    return CanonicalReply(
        direction=Direction.TRACKER_TO_EMAIL,
        author_handle=parsed.comment.user.login,
        subject_context=parsed.issue.title,
        body_text=parsed.comment.body,
        correlation_key=extract_address(parsed.issue.body),
        issue_number=parsed.issue.number,
    )


# ============================================================================
# Email payload
# ============================================================================


def _field(form: Mapping[str, Any], name: str) -> str | None:
    value = form.get(name)
    # Multi-valued form fields arrive as lists; the first value wins
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return None
    value = str(value)
    return value if value.strip() else None


def from_email_event(form: Mapping[str, Any]) -> CanonicalReply:
    """Normalize an inbound email webhook's form fields."""
    values = {name: _field(form, name) for name in EMAIL_REQUIRED_FIELDS}
    missing = [name for name, value in values.items() if value is None]
    if missing:
        raise MalformedSourceError(f"Email event is missing required fields: {', '.join(missing)}")

    return CanonicalReply(
        direction=Direction.EMAIL_TO_TRACKER,
        author_handle=values["From"],
        subject_context=_field(form, "subject") or "",
        body_text=values["stripped-html"],
        correlation_key=values["In-Reply-To"],
        issue_number=None,
    )

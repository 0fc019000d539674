"""Use case for forwarding a reply to the other channel."""

from __future__ import annotations

from typing import Any, Mapping

from loguru import logger

from issuebridge.application.identity import IdentityResolver
from issuebridge.application.normalizer import from_email_event, from_tracker_event
from issuebridge.application.ports.correlation_store import CorrelationStore
from issuebridge.application.ports.email_sender import EmailSender
from issuebridge.application.ports.tracker_client import TrackerClient
from issuebridge.domain.errors import (
    BridgeError,
    DuplicateCorrelationError,
    NotFoundError,
    UpstreamProviderError,
)
from issuebridge.domain.models import CanonicalReply, Direction, DispatchResult, Ignored

DEFAULT_SENDER_ADDRESS = "bugs@usegalaxy.eu"


class BridgeDispatcher:
    """
    Forward canonical replies between the tracker and email.

    Tracker -> email:
    1. Resolve the comment author's display name
    2. Send "Re: <title>" to the issue's contact address
    3. Record outbound message id -> issue number

    Email -> tracker:
    1. Look up the issue number for the In-Reply-To id
    2. Post "<from> wrote:" plus the email body as an issue comment

    Each event stops at its first success or first error. Nothing is retried
    here; the webhook sender redelivers on a server error.
    """

    def __init__(
        self,
        identity: IdentityResolver,
        email_sender: EmailSender,
        tracker: TrackerClient,
        store: CorrelationStore,
        sender_address: str = DEFAULT_SENDER_ADDRESS,
        dry_run: bool = False,
    ):
        self.identity = identity
        self.email_sender = email_sender
        self.tracker = tracker
        self.store = store
        self.sender_address = sender_address
        self.dry_run = dry_run

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def handle_tracker_event(self, event: Mapping[str, Any]) -> DispatchResult:
        normalized = from_tracker_event(event)
        if isinstance(normalized, Ignored):
            logger.info(f"Tracker event ignored: {normalized.reason}")
            return DispatchResult(
                status="ignored",
                direction=Direction.TRACKER_TO_EMAIL,
                detail=normalized.reason,
            )
        return self.dispatch(normalized)

    def handle_email_event(self, form: Mapping[str, Any]) -> DispatchResult:
        return self.dispatch(from_email_event(form))

    def dispatch(self, reply: CanonicalReply) -> DispatchResult:
        if reply.direction is Direction.TRACKER_TO_EMAIL:
            return self._comment_to_email(reply)
        return self._email_to_comment(reply)

    # ------------------------------------------------------------------
    # Directions
    # ------------------------------------------------------------------

    def _comment_to_email(self, reply: CanonicalReply) -> DispatchResult:
        author = self.identity.resolve_display_name(reply.author_handle)
        from_display = f"{author} <{self.sender_address}>"
        subject = f"Re: {reply.subject_context}"

        log = logger.bind(
            author=author,
            title=reply.subject_context,
            reply_to=reply.correlation_key,
            issue=reply.issue_number,
            dry=self.dry_run,
        )
        log.info(f"Forwarding comment on #{reply.issue_number} to {reply.correlation_key}")

        if self.dry_run:
            return DispatchResult(
                status="dry_run",
                direction=reply.direction,
                issue_number=reply.issue_number,
            )

        message_id = self._call(
            "email provider",
            self.email_sender.send,
            from_display,
            subject,
            reply.body_text,
            reply.correlation_key,
        )

        if not message_id:
            # The email went out, but nothing can thread replies back to the issue
            log.error("Email provider returned no message id, reply is not correlated")
            return DispatchResult(
                status="delivered",
                direction=reply.direction,
                issue_number=reply.issue_number,
                detail="uncorrelated",
            )

        try:
            self.store.put(message_id, reply.issue_number)
        except DuplicateCorrelationError as e:
            log.warning(f"{e}; keeping existing issue #{e.existing}")
            return DispatchResult(
                status="duplicate",
                direction=reply.direction,
                issue_number=reply.issue_number,
                message_id=message_id,
            )

        log.info(f"Sent {message_id} for issue #{reply.issue_number}")
        return DispatchResult(
            status="delivered",
            direction=reply.direction,
            issue_number=reply.issue_number,
            message_id=message_id,
        )

    def _email_to_comment(self, reply: CanonicalReply) -> DispatchResult:
        log = logger.bind(in_reply_to=reply.correlation_key, dry=self.dry_run)

        issue_number = self.store.get(reply.correlation_key)
        if issue_number is None:
            log.warning(f"Unattributable email from {reply.author_handle}: no issue for {reply.correlation_key}")
            raise NotFoundError(f"No issue is correlated with message {reply.correlation_key!r}")

        log.info(f"Forwarding email from {reply.author_handle} to issue #{issue_number}")
        if self.dry_run:
            return DispatchResult(
                status="dry_run",
                direction=reply.direction,
                issue_number=issue_number,
                message_id=reply.correlation_key,
            )

        comment = f"{reply.author_handle} wrote:\n\n{reply.body_text}"
        self._call("tracker", self.tracker.create_comment, issue_number, comment)

        log.info(f"Commented on issue #{issue_number}")
        return DispatchResult(
            status="delivered",
            direction=reply.direction,
            issue_number=issue_number,
            message_id=reply.correlation_key,
        )

    @staticmethod
    def _call(what: str, fn, *args):
        try:
            return fn(*args)
        except BridgeError:
            raise
        except Exception as e:
            raise UpstreamProviderError(f"{what} call failed: {e}") from e

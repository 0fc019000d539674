import pytest

from issuebridge.application.identity import IdentityResolver
from issuebridge.application.use_cases.dispatch_reply import BridgeDispatcher
from issuebridge.infrastructure.sqlite import SQLiteCorrelationStore

ISSUE_BODY = (
    "Reported via the web form.\n"
    "<p>Contact: <a href=\"mailto:'a@x.org'\">"
    "<span style=\"font-family: monospace;\">'a@x.org'</span></a></p>"
)


class FakeIdentityProvider:
    def __init__(self, names=None, error=None):
        self.names = names or {}
        self.error = error
        self.calls = []

    def get_display_name(self, handle: str):
        self.calls.append(handle)
        if self.error:
            raise self.error
        return self.names.get(handle)


class FakeEmailSender:
    def __init__(self, message_id="m-100", error=None):
        self.message_id = message_id
        self.error = error
        self.sent = []

    def send(self, from_display: str, subject: str, body: str, to_address: str) -> str:
        if self.error:
            raise self.error
        self.sent.append(
            {"from": from_display, "subject": subject, "body": body, "to": to_address}
        )
        return self.message_id


class FakeTracker:
    def __init__(self, error=None):
        self.error = error
        self.comments = []

    def create_comment(self, issue_number: int, body: str) -> None:
        if self.error:
            raise self.error
        self.comments.append((issue_number, body))


def tracker_event(action="created", login="alice", number=7, title="Bug", body=ISSUE_BODY, comment="Thanks, fixed."):
    return {
        "action": action,
        "issue": {"id": 1007, "number": number, "title": title, "body": body},
        "comment": {"id": 55, "user": {"login": login}, "body": comment},
        "repository": {"name": "issues", "owner": {"login": "usegalaxy.eu"}},
    }


@pytest.fixture
def store(tmp_path):
    return SQLiteCorrelationStore(tmp_path / "correlations.db")


@pytest.fixture
def identity_provider():
    return FakeIdentityProvider({"alice": "Alice A."})


@pytest.fixture
def email_sender():
    return FakeEmailSender()


@pytest.fixture
def tracker():
    return FakeTracker()


@pytest.fixture
def make_dispatcher(store, identity_provider, email_sender, tracker):
    def _make(dry_run=False, **overrides):
        kwargs = dict(
            identity=IdentityResolver(identity_provider),
            email_sender=email_sender,
            tracker=tracker,
            store=store,
            sender_address="bugs@usegalaxy.eu",
            dry_run=dry_run,
        )
        kwargs.update(overrides)
        return BridgeDispatcher(**kwargs)

    return _make

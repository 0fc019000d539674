"""Capability interfaces the bridge depends on."""

from issuebridge.application.ports.correlation_store import CorrelationStore
from issuebridge.application.ports.email_sender import EmailSender
from issuebridge.application.ports.identity_provider import IdentityProvider
from issuebridge.application.ports.tracker_client import TrackerClient

__all__ = [
    "CorrelationStore",
    "EmailSender",
    "IdentityProvider",
    "TrackerClient",
]

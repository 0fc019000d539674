"""Application layer - normalization, identity and dispatch logic."""

from issuebridge.application.address import extract_address
from issuebridge.application.identity import IdentityResolver
from issuebridge.application.normalizer import from_email_event, from_tracker_event
from issuebridge.application.use_cases.dispatch_reply import BridgeDispatcher

__all__ = [
    "extract_address",
    "IdentityResolver",
    "from_tracker_event",
    "from_email_event",
    "BridgeDispatcher",
]

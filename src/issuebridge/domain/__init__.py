"""Domain models and errors."""

from issuebridge.domain.errors import (
    BridgeError,
    DuplicateCorrelationError,
    MalformedSourceError,
    NotFoundError,
    StoreError,
    UpstreamProviderError,
)
from issuebridge.domain.models import (
    CanonicalReply,
    CorrelationEntry,
    Direction,
    DispatchResult,
    Ignored,
)

__all__ = [
    # Models
    "Direction",
    "CanonicalReply",
    "Ignored",
    "CorrelationEntry",
    "DispatchResult",
    # Errors
    "BridgeError",
    "MalformedSourceError",
    "NotFoundError",
    "UpstreamProviderError",
    "StoreError",
    "DuplicateCorrelationError",
]

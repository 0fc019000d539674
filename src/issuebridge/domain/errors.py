"""Error taxonomy for the bridge.

Every error is scoped to the single webhook request that raised it. The
``status_code`` attribute is what the HTTP layer answers with.
"""

from __future__ import annotations


class BridgeError(Exception):
    """Base class for request-scoped bridge failures."""

    status_code: int = 500


class MalformedSourceError(BridgeError):
    """Inbound event is missing required fields or markup."""

    status_code = 400


class NotFoundError(BridgeError):
    """No correlation exists for an inbound email reply."""

    status_code = 404


class UpstreamProviderError(BridgeError):
    """Identity provider, email provider or tracker API call failed."""

    status_code = 502


class StoreError(BridgeError):
    """Correlation store could not persist or read an entry."""

    status_code = 500


class DuplicateCorrelationError(BridgeError):
    """A correlation for this message id already exists."""

    status_code = 409

    def __init__(self, message_id: str, existing: int | None = None):
        self.message_id = message_id
        self.existing = existing
        super().__init__(f"Correlation for {message_id!r} already recorded")

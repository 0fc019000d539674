"""HTTP endpoints for inbound webhooks."""

from issuebridge.infrastructure.http.webhooks import router

__all__ = ["router"]

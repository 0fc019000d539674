"""Application use cases."""

from issuebridge.application.use_cases.dispatch_reply import BridgeDispatcher

__all__ = ["BridgeDispatcher"]

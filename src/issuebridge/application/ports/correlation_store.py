from __future__ import annotations
from typing import Optional, Protocol
from issuebridge.domain.models import CorrelationEntry

class CorrelationStore(Protocol):
    # Write-once: put raises DuplicateCorrelationError for a known message id
    def put(self, message_id: str, issue_number: int) -> None: ...
    def get(self, message_id: str) -> Optional[int]: ...
    def list_all(self) -> list[CorrelationEntry]: ...

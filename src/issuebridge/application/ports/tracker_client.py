from __future__ import annotations
from typing import Protocol

class TrackerClient(Protocol):
    def create_comment(self, issue_number: int, body: str) -> None: ...

from __future__ import annotations
from typing import Protocol

class EmailSender(Protocol):
    # Returns the provider's message id for the sent email
    def send(self, from_display: str, subject: str, body: str, to_address: str) -> str: ...

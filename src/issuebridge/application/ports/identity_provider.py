from __future__ import annotations
from typing import Optional, Protocol

class IdentityProvider(Protocol):
    # None when the account exists but has no display name set
    def get_display_name(self, handle: str) -> Optional[str]: ...

"""Resolve tracker handles to human display names, with a TTL cache."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

from loguru import logger

from issuebridge.application.ports.identity_provider import IdentityProvider
from issuebridge.domain.errors import BridgeError, UpstreamProviderError

DEFAULT_TTL_SECONDS = 24 * 60 * 60
DEFAULT_HARD_EXPIRY_SECONDS = 48 * 60 * 60


@dataclass
class IdentityCacheEntry:
    """A cached display name and when it was fetched."""

    name: str
    stored_at: float


class IdentityResolver:
    """
    Look up display names through an IdentityProvider.

    Entries are served for ``ttl_seconds`` after they were fetched. Expired
    entries are refreshed lazily on the next lookup and swept from memory at
    most once per ``hard_expiry_seconds``. Failed lookups are never cached.

    The cache is not locked: two simultaneous misses for the same handle both
    hit the provider, and the last write wins.
    """

    def __init__(
        self,
        provider: IdentityProvider,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        hard_expiry_seconds: float = DEFAULT_HARD_EXPIRY_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        if hard_expiry_seconds < ttl_seconds:
            raise ValueError("hard_expiry_seconds must not be shorter than ttl_seconds")
        self.provider = provider
        self.ttl_seconds = ttl_seconds
        self.hard_expiry_seconds = hard_expiry_seconds
        self._clock = clock
        self._cache: dict[str, IdentityCacheEntry] = {}
        self._last_sweep = clock()
        self.hits = 0
        self.misses = 0

    def resolve_display_name(self, handle: str) -> str:
        """Return the display name for ``handle``, fetching it on a cache miss."""
        now = self._clock()
        self._maybe_sweep(now)

        entry = self._cache.get(handle)
        if entry is not None and now - entry.stored_at < self.ttl_seconds:
            self.hits += 1
            logger.bind(username=handle, cached=True).debug(f"Resolved {handle} -> {entry.name}")
            return entry.name

        self.misses += 1
        try:
            name = self.provider.get_display_name(handle)
        except BridgeError:
            raise
        except Exception as e:
            raise UpstreamProviderError(f"Identity lookup for {handle!r} failed: {e}") from e

        # Accounts without a profile name are attributed by handle
        name = name or handle
        self._cache[handle] = IdentityCacheEntry(name=name, stored_at=now)
        logger.bind(username=handle, cached=False).info(f"Resolved {handle} -> {name}")
        return name

    def _maybe_sweep(self, now: float) -> None:
        if now - self._last_sweep < self.hard_expiry_seconds:
            return
        self._last_sweep = now
        expired = [
            handle
            for handle, entry in list(self._cache.items())
            if now - entry.stored_at >= self.ttl_seconds
        ]
        for handle in expired:
            self._cache.pop(handle, None)
        if expired:
            logger.debug(f"Swept {len(expired)} expired identity cache entries")

    def __len__(self) -> int:
        return len(self._cache)

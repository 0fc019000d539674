import pytest

from issuebridge.application.identity import IdentityResolver
from issuebridge.domain.errors import UpstreamProviderError

from conftest import FakeIdentityProvider


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def test_cache_hit_skips_provider():
    provider = FakeIdentityProvider({"alice": "Alice A."})
    resolver = IdentityResolver(provider, clock=FakeClock())

    assert resolver.resolve_display_name("alice") == "Alice A."
    assert resolver.resolve_display_name("alice") == "Alice A."
    assert provider.calls == ["alice"]
    assert (resolver.hits, resolver.misses) == (1, 1)


def test_expired_entry_is_refetched():
    clock = FakeClock()
    provider = FakeIdentityProvider({"alice": "Alice A."})
    resolver = IdentityResolver(provider, ttl_seconds=60, hard_expiry_seconds=120, clock=clock)

    resolver.resolve_display_name("alice")
    provider.names["alice"] = "Alice Anderson"
    clock.now += 59
    assert resolver.resolve_display_name("alice") == "Alice A."
    clock.now += 2
    assert resolver.resolve_display_name("alice") == "Alice Anderson"
    assert provider.calls == ["alice", "alice"]


def test_sweep_drops_expired_entries():
    clock = FakeClock()
    provider = FakeIdentityProvider({"alice": "Alice A.", "bob": "Bob B."})
    resolver = IdentityResolver(provider, ttl_seconds=60, hard_expiry_seconds=120, clock=clock)

    resolver.resolve_display_name("alice")
    clock.now += 100
    resolver.resolve_display_name("bob")
    assert len(resolver) == 2

    clock.now += 30
    resolver.resolve_display_name("bob")
    # alice is past her TTL and gone after the sweep; bob was fresh
    assert len(resolver) == 1


def test_failed_lookup_is_not_cached():
    provider = FakeIdentityProvider(error=RuntimeError("rate limited"))
    resolver = IdentityResolver(provider, clock=FakeClock())

    with pytest.raises(UpstreamProviderError):
        resolver.resolve_display_name("alice")

    provider.error = None
    provider.names = {"alice": "Alice A."}
    assert resolver.resolve_display_name("alice") == "Alice A."
    assert provider.calls == ["alice", "alice"]


def test_upstream_error_passes_through_unchanged():
    raised = UpstreamProviderError("GitHub HTTP 502")
    resolver = IdentityResolver(FakeIdentityProvider(error=raised), clock=FakeClock())
    with pytest.raises(UpstreamProviderError) as exc:
        resolver.resolve_display_name("alice")
    assert exc.value is raised


def test_missing_profile_name_falls_back_to_handle():
    resolver = IdentityResolver(FakeIdentityProvider({}), clock=FakeClock())
    assert resolver.resolve_display_name("octocat") == "octocat"


def test_hard_expiry_shorter_than_ttl_is_rejected():
    with pytest.raises(ValueError):
        IdentityResolver(FakeIdentityProvider(), ttl_seconds=60, hard_expiry_seconds=30)

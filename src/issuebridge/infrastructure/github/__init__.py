"""GitHub integration: user lookups and issue comments."""

from issuebridge.infrastructure.github.client import GitHubClient

__all__ = [
    "GitHubClient",
]

"""Infrastructure layer - external services, storage and configuration."""

from issuebridge.infrastructure.github import GitHubClient
from issuebridge.infrastructure.logging import configure_logging
from issuebridge.infrastructure.mailgun import MailgunSender
from issuebridge.infrastructure.settings import Settings, get_settings
from issuebridge.infrastructure.sqlite import SQLiteCorrelationStore

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "configure_logging",
    # Storage
    "SQLiteCorrelationStore",
    # Providers
    "GitHubClient",
    "MailgunSender",
]

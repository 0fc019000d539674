"""Mailgun integration for outbound email."""

from issuebridge.infrastructure.mailgun.sender import MailgunSender

__all__ = [
    "MailgunSender",
]

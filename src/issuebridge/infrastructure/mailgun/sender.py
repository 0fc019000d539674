"""Mailgun email provider for sending outbound replies."""

from __future__ import annotations

import httpx
from loguru import logger

from issuebridge.application.ports.email_sender import EmailSender
from issuebridge.domain.errors import UpstreamProviderError


class MailgunSender(EmailSender):
    """Send plain-text email through the Mailgun messages API."""

    BASE_URL = "https://api.mailgun.net"

    def __init__(
        self,
        domain: str | None,
        api_key: str | None,
        base_url: str | None = None,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ):
        self.domain = domain
        self.api_key = api_key
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout
        self._client = client or httpx.Client(timeout=timeout)

    def send(self, from_display: str, subject: str, body: str, to_address: str) -> str:
        """Send one message and return Mailgun's message id."""
        if not self.domain or not self.api_key:
            raise UpstreamProviderError("Mailgun domain and API key are required to send email")

        try:
            response = self._client.post(
                f"{self.base_url}/v3/{self.domain}/messages",
                auth=("api", self.api_key),
                data={
                    "from": from_display,
                    "to": to_address,
                    "subject": subject,
                    "text": body,
                },
            )
        except httpx.TimeoutException as e:
            logger.error(f"Mailgun API timeout sending to {to_address}")
            raise UpstreamProviderError("Mailgun request timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"Mailgun API exception: {e}")
            raise UpstreamProviderError(f"Mailgun request failed: {e}") from e

        if response.status_code != 200:
            error_text = response.text
            logger.error(f"Mailgun API error {response.status_code}: {error_text[:200]}")
            raise UpstreamProviderError(f"Mailgun HTTP {response.status_code}: {error_text[:200]}")

        data = response.json()
        message_id = data.get("id") or ""
        logger.bind(id=message_id, resp=data.get("message")).info(f"Mailgun accepted email to {to_address}")
        return message_id

    def close(self) -> None:
        self._client.close()

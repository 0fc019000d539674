"""GitHub REST client acting as identity provider and tracker."""

from __future__ import annotations

import httpx
from loguru import logger

from issuebridge.application.ports.identity_provider import IdentityProvider
from issuebridge.application.ports.tracker_client import TrackerClient
from issuebridge.domain.errors import UpstreamProviderError


class GitHubClient(IdentityProvider, TrackerClient):
    """Look up users and post issue comments on a single repository."""

    BASE_URL = "https://api.github.com"

    def __init__(
        self,
        token: str | None,
        owner: str,
        repo: str,
        base_url: str | None = None,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ):
        self.token = token
        self.owner = owner
        self.repo = repo
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout
        self._client = client or httpx.Client(timeout=timeout)

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "issuebridge/1.0",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        url = f"{self.base_url}{path}"
        try:
            response = self._client.request(method, url, headers=self._headers(), **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"GitHub API timeout: {method} {path}")
            raise UpstreamProviderError(f"GitHub request timed out: {method} {path}") from e
        except httpx.HTTPError as e:
            logger.error(f"GitHub API exception: {e}")
            raise UpstreamProviderError(f"GitHub request failed: {e}") from e

        if response.status_code >= 400:
            error_text = response.text
            logger.error(f"GitHub API error {response.status_code}: {error_text[:200]}")
            raise UpstreamProviderError(f"GitHub HTTP {response.status_code}: {error_text[:200]}")
        return response

    def get_display_name(self, handle: str) -> str | None:
        """Return the profile name for ``handle`` (None if unset)."""
        data = self._request("GET", f"/users/{handle}").json()
        return data.get("name")

    def create_comment(self, issue_number: int, body: str) -> None:
        """Append ``body`` as a comment on issue ``issue_number``."""
        path = f"/repos/{self.owner}/{self.repo}/issues/{int(issue_number)}/comments"
        data = self._request("POST", path, json={"body": body}).json()
        logger.info(f"GitHub comment created on #{issue_number}: {data.get('html_url')}")

    def close(self) -> None:
        self._client.close()

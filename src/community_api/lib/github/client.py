"""GitHub REST API client for repository contributors."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import httpx
from loguru import logger

_BASE_URL = "https://api.github.com"
_PER_PAGE = 100


@dataclass
class GitHubContributor:
    """One entry from the repository contributors listing."""

    login: str
    avatar_url: str
    html_url: str
    contributions: int
    raw_data: dict = field(default_factory=dict)


class GitHubClientError(Exception):
    """Raised when the GitHub API returns an error or cannot be reached.

    Args:
        message: Human-readable error description.
        status_code: Optional HTTP status code from GitHub.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(f"github: {message}")


class GitHubClient:
    """Fetches contributors and user profiles for one repository.

    Args:
        repo: ``owner/name`` of the repository.
        token: Optional personal access token.
        timeout: Request timeout in seconds.
    """

    def __init__(self, repo: str, token: str | None = None, timeout: float = 15.0) -> None:
        headers = {"Accept": "application/vnd.github+json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.repo = repo
        self._client = httpx.AsyncClient(base_url=_BASE_URL, headers=headers, timeout=timeout)

    async def fetch_contributors(self) -> list[GitHubContributor]:
        """Return every contributor of the repository, in GitHub's ranking order."""
        contributors: list[GitHubContributor] = []
        page = 1
        while True:
            data = await self._request(
                f"/repos/{self.repo}/contributors",
                {"per_page": _PER_PAGE, "page": page},
            )
            if not isinstance(data, list):
                msg = "Unexpected contributors payload"
                raise GitHubClientError(msg)
            for item in data:
                contributor = self._map_contributor(item)
                if contributor is not None:
                    contributors.append(contributor)
            if len(data) < _PER_PAGE:
                break
            page += 1
        return contributors

    async def fetch_user_profile(self, login: str) -> dict[str, Any]:
        """Return the public profile of ``login``."""
        data = await self._request(f"/users/{login}", {})
        if not isinstance(data, dict):
            msg = f"Unexpected profile payload for {login}"
            raise GitHubClientError(msg)
        return data

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def _request(self, path: str, params: dict[str, Any]) -> Any:
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "GitHub API error: {} {} for {}",
                exc.response.status_code,
                exc.response.reason_phrase,
                path,
            )
            raise GitHubClientError(
                f"HTTP {exc.response.status_code}: {exc.response.reason_phrase}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.RequestError as exc:
            logger.error("GitHub request failed: {}", exc)
            raise GitHubClientError(f"Request failed: {exc}") from exc
        except json.JSONDecodeError as exc:
            logger.error("GitHub returned non-JSON response for {}", path)
            raise GitHubClientError(f"Invalid JSON response for {path}") from exc

    @staticmethod
    def _map_contributor(item: Any) -> GitHubContributor | None:
        """Map a contributors entry; anonymous or malformed entries are skipped."""
        if not isinstance(item, dict) or not item.get("login"):
            logger.warning("Skipping GitHub contributor without a login: {!r}", item)
            return None
        return GitHubContributor(
            login=item["login"],
            avatar_url=item.get("avatar_url") or "",
            html_url=item.get("html_url") or f"https://github.com/{item['login']}",
            contributions=int(item.get("contributions") or 0),
            raw_data=item,
        )

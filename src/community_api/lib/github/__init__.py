"""GitHub API client library."""

from community_api.lib.github.client import GitHubClient, GitHubClientError, GitHubContributor

__all__ = [
    "GitHubClient",
    "GitHubClientError",
    "GitHubContributor",
]

"""GitHub API client for repository metadata.

With a token the GraphQL API returns repositories, languages and READMEs in
one request. Without one the public REST API is used, at the cost of a few
requests per repository and a much lower rate limit.
"""

import base64
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from cv_generator.exceptions import (
    GitHubError,
    GitHubNetworkError,
    GitHubRateLimitError,
    GitHubUserNotFoundError,
)

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 30.0

# Repositories requested from the REST API before sorting by stars
REST_PAGE_SIZE = 20

README_NAMES = ("README.md", "readme.md")

GITHUB_GRAPHQL_QUERY = """
query ($username: String!, $count: Int!) {
  user(login: $username) {
    repositories(first: $count, ownerAffiliations: OWNER, orderBy: {field: STARGAZERS, direction: DESC}) {
      nodes {
        name
        description
        url
        homepageUrl
        stargazerCount
        forkCount
        owner { login }
        languages(first: 10) {
          nodes { name }
        }
        object(expression: "HEAD:README.md") {
          ... on Blob { text }
        }
        readmeLower: object(expression: "HEAD:readme.md") {
          ... on Blob { text }
        }
      }
    }
  }
}
"""


@dataclass(frozen=True)
class Repository:
    """The repository fields projects are built from."""

    name: str
    owner: str
    url: str
    description: str | None = None
    homepage: str | None = None
    stars: int = 0
    forks: int = 0
    languages: list[str] = field(default_factory=list)
    readme: str | None = None


def decode_content(encoded: str) -> str:
    """Decode the base64 ``content`` field of the contents API."""
    return base64.b64decode(encoded).decode("utf-8", errors="replace")


class GitHubClient:
    """Thin wrapper over the GitHub GraphQL and REST APIs."""

    def __init__(
        self,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
    ):
        self.token = token
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "CV-Generator/1.0",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = client or httpx.Client(base_url=GITHUB_API_URL, timeout=timeout)
        self._client.headers.update(headers)

    @property
    def authenticated(self) -> bool:
        return bool(self.token)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            return self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise GitHubNetworkError(f"Could not reach GitHub: {e}") from e

    @staticmethod
    def _raise_for_status(response: httpx.Response, username: str | None = None) -> None:
        status = response.status_code
        if status < 400:
            return
        if status == 404 and username is not None:
            raise GitHubUserNotFoundError(username)
        if status == 429 or (
            status == 403 and response.headers.get("X-RateLimit-Remaining") == "0"
        ):
            reset = response.headers.get("X-RateLimit-Reset")
            suffix = f" (resets at {reset})" if reset else ""
            raise GitHubRateLimitError(f"GitHub API rate limit exceeded{suffix}")
        raise GitHubError(f"GitHub API error: HTTP {status}")

    def fetch_repositories(self, username: str, count: int = 6) -> list[Repository]:
        """Top ``count`` repositories of ``username`` by stars, most starred first."""
        if self.authenticated:
            repositories = self._fetch_graphql(username, count)
        else:
            repositories = self._fetch_rest(username, count)
        logger.info(f"Fetched {len(repositories)} repositories for {username}")
        return repositories

    def _fetch_graphql(self, username: str, count: int) -> list[Repository]:
        response = self._request(
            "POST",
            "/graphql",
            json={
                "query": GITHUB_GRAPHQL_QUERY,
                "variables": {"username": username, "count": count},
            },
        )
        self._raise_for_status(response)
        payload = response.json()

        for error in payload.get("errors") or []:
            if error.get("type") == "NOT_FOUND":
                raise GitHubUserNotFoundError(username)
            if error.get("type") == "RATE_LIMITED":
                raise GitHubRateLimitError("GitHub GraphQL rate limit exceeded")
        if payload.get("errors") and not payload.get("data"):
            raise GitHubError(f"GitHub GraphQL error: {payload['errors'][0].get('message')}")

        user = (payload.get("data") or {}).get("user")
        if user is None:
            raise GitHubUserNotFoundError(username)

        repositories = []
        for node in user["repositories"]["nodes"]:
            readme = (node.get("object") or {}).get("text") or (
                node.get("readmeLower") or {}
            ).get("text")
            repositories.append(
                Repository(
                    name=node["name"],
                    owner=(node.get("owner") or {}).get("login", username),
                    url=node["url"],
                    description=node.get("description"),
                    homepage=node.get("homepageUrl") or None,
                    stars=node.get("stargazerCount", 0),
                    forks=node.get("forkCount", 0),
                    languages=[lang["name"] for lang in node["languages"]["nodes"]],
                    readme=readme,
                )
            )
        return repositories

    def _fetch_rest(self, username: str, count: int) -> list[Repository]:
        response = self._request(
            "GET", f"/users/{username}/repos", params={"per_page": REST_PAGE_SIZE, "type": "owner"}
        )
        self._raise_for_status(response, username=username)

        repos = sorted(response.json(), key=lambda r: r.get("stargazers_count", 0), reverse=True)
        repositories = []
        for repo in repos[:count]:
            owner = repo.get("owner", {}).get("login", username)
            repositories.append(
                Repository(
                    name=repo["name"],
                    owner=owner,
                    url=repo["html_url"],
                    description=repo.get("description"),
                    homepage=repo.get("homepage") or None,
                    stars=repo.get("stargazers_count", 0),
                    forks=repo.get("forks_count", 0),
                    languages=self._fetch_languages(repo.get("languages_url")),
                    readme=self.fetch_readme(owner, repo["name"]),
                )
            )
        return repositories

    def _fetch_languages(self, url: str | None) -> list[str]:
        if not url:
            return []
        response = self._request("GET", url)
        if response.status_code != 200:
            logger.warning(f"Could not fetch languages from {url}: HTTP {response.status_code}")
            return []
        return list(response.json())

    def fetch_file(self, owner: str, repo: str, path: str) -> str | None:
        """Text of ``path`` in the default branch, or None when it does not exist."""
        response = self._request("GET", f"/repos/{owner}/{repo}/contents/{path}")
        if response.status_code == 404:
            return None
        self._raise_for_status(response)

        data = response.json()
        if not isinstance(data, dict) or not data.get("content"):
            return None
        return decode_content(data["content"])

    def fetch_readme(self, owner: str, repo: str) -> str | None:
        for name in README_NAMES:
            content = self.fetch_file(owner, repo, name)
            if content:
                return content
        logger.debug(f"No README found for {owner}/{repo}")
        return None

"""GitHub repository fetcher."""

from cv_generator.github.client import GitHubClient, Repository
from cv_generator.github.projects import fetch_github_projects

__all__ = ["GitHubClient", "Repository", "fetch_github_projects"]

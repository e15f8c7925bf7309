"""Turn GitHub repositories into CV projects."""

import logging

from cv_generator.enrichment.json_extract import extract_json_object
from cv_generator.enrichment.merge import dedupe_labels
from cv_generator.enrichment.prompts import build_project_analysis_prompt
from cv_generator.exceptions import EnhancementError, GitHubError, LLMError
from cv_generator.github.client import GitHubClient, Repository
from cv_generator.github.parsers import (
    parse_package_json,
    parse_pyproject_toml,
    parse_requirements,
)
from cv_generator.llm.base import LLMProvider
from cv_generator.models import GitHubProject

logger = logging.getLogger(__name__)

DEFAULT_REPOSITORY_DESCRIPTION = "A GitHub repository"
ANALYSIS_TEMPERATURE = 0.1


def get_relevant_config_files(languages: list[str]) -> list[str]:
    """Config files worth reading for a repository's detected languages."""
    config_files = []
    if any(lang in ("JavaScript", "TypeScript") for lang in languages):
        config_files.append("package.json")
    if "Python" in languages:
        config_files.extend(["requirements.txt", "pyproject.toml"])
    return config_files


def collect_dependencies(
    client: GitHubClient, repo: Repository
) -> tuple[dict[str, list[str]], list[str]]:
    """Read dependency names from the repository's config files.

    Returns:
        Dependency names by kind (``dependencies``, ``devDependencies``,
        ``python``) and the config files that were found.
    """
    dependencies: dict[str, list[str]] = {}
    found: list[str] = []

    for path in get_relevant_config_files(repo.languages):
        try:
            content = client.fetch_file(repo.owner, repo.name, path)
        except GitHubError as e:
            logger.warning(f"Could not fetch {path} from {repo.owner}/{repo.name}: {e}")
            continue
        if not content:
            continue

        if path == "package.json":
            parsed = parse_package_json(content)
            if not parsed:
                continue
            dependencies.update(parsed)
        elif path == "requirements.txt":
            dependencies.setdefault("python", []).extend(parse_requirements(content))
        else:
            dependencies.setdefault("python", []).extend(parse_pyproject_toml(content))
        found.append(path)

    return dependencies, found


def project_from_repository(repo: Repository) -> GitHubProject:
    """Project built from repository metadata alone."""
    return GitHubProject(
        name=repo.name,
        description=repo.description or DEFAULT_REPOSITORY_DESCRIPTION,
        technologies=repo.languages,
        github=repo.url,
        url=repo.homepage or repo.url,
        stars=repo.stars,
        forks=repo.forks,
    )


def analyze_project(
    project: GitHubProject,
    repo: Repository,
    provider: LLMProvider,
    dependencies: dict[str, list[str]] | None = None,
    config_files: list[str] | None = None,
    temperature: float = ANALYSIS_TEMPERATURE,
) -> GitHubProject:
    """Refresh a project's description and technologies from its README.

    Technologies become the detected languages plus the model's list,
    de-duplicated. Any model failure keeps the project as it was.
    """
    prompt = build_project_analysis_prompt(
        repo.name,
        repo.description,
        repo.languages,
        repo.readme or "",
        dependencies=dependencies,
        config_files=config_files,
    )
    try:
        result = extract_json_object(provider.complete(prompt, temperature=temperature))
    except (LLMError, EnhancementError) as e:
        logger.warning(f"Project analysis failed for {repo.name}, keeping repository data: {e}")
        return project

    updates = {}
    description = result.get("description")
    if isinstance(description, str) and description.strip():
        updates["description"] = description.strip()

    technologies = result.get("technologies")
    if isinstance(technologies, list) and technologies:
        labels = [str(tech) for tech in technologies if str(tech).strip()]
        updates["technologies"] = dedupe_labels([*repo.languages, *labels])

    logger.debug(f"Analysis of {repo.name} updated: {', '.join(updates) or 'nothing'}")
    return project.model_copy(update=updates)


def fetch_github_projects(
    username: str,
    client: GitHubClient | None = None,
    provider: LLMProvider | None = None,
    count: int = 6,
    analysis_temperature: float = ANALYSIS_TEMPERATURE,
) -> list[GitHubProject]:
    """Build CV projects from a user's most starred repositories.

    With a provider, repositories that have a README are analysed by the
    model. Config files are only read with an authenticated client, to spare
    the anonymous rate limit.

    Raises:
        GitHubError: If the repository list cannot be fetched.
    """
    owns_client = client is None
    client = client or GitHubClient()
    try:
        repositories = client.fetch_repositories(username, count)
        projects = []
        for repo in repositories:
            project = project_from_repository(repo)
            if provider is not None and repo.readme:
                dependencies, config_files = (
                    collect_dependencies(client, repo) if client.authenticated else ({}, [])
                )
                project = analyze_project(
                    project,
                    repo,
                    provider,
                    dependencies=dependencies,
                    config_files=config_files,
                    temperature=analysis_temperature,
                )
            projects.append(project)
    finally:
        if owns_client:
            client.close()

    logger.info(f"Built {len(projects)} project(s) from {username}'s repositories")
    return projects

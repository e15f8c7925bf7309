"""CLI entry point for CV Generator."""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Annotated

from dotenv import load_dotenv

# Load environment variables from .env.local
# Path: main.py -> cv_generator/ -> src/ -> project root
load_dotenv(Path(__file__).parent.parent.parent / ".env.local")

import typer  # noqa: E402
from pydantic import ValidationError  # noqa: E402
from rich.console import Console  # noqa: E402
from rich.logging import RichHandler  # noqa: E402
from rich.panel import Panel  # noqa: E402
from rich.table import Table  # noqa: E402

from cv_generator.config import get_settings  # noqa: E402
from cv_generator.enrichment import enhance_cv  # noqa: E402
from cv_generator.exceptions import CVGeneratorError  # noqa: E402
from cv_generator.github import GitHubClient, fetch_github_projects  # noqa: E402
from cv_generator.llm import provider_from_settings  # noqa: E402
from cv_generator.llm.ollama import OllamaProvider  # noqa: E402
from cv_generator.models import CVRecord  # noqa: E402
from cv_generator.pdf import generate_cv_pdf  # noqa: E402

app = typer.Typer(
    name="cv-generator",
    help="CV Generator - build a CV from text, form data and GitHub, render it to PDF",
    add_completion=False,
)
console = Console()


class ProviderName(str, Enum):
    """LLM providers selectable on the command line."""

    TOGETHER = "together"
    OLLAMA = "ollama"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug logging")
    ] = False,
) -> None:
    """Configure logging for every command."""
    level = "DEBUG" if verbose else get_settings().log_level
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def read_file(path: Path) -> str:
    """Read file content as text."""
    if not path.exists():
        console.print(f"[red]Error:[/red] File not found: {path}")
        raise typer.Exit(1)
    return path.read_text(encoding="utf-8")


def read_json(path: Path) -> dict:
    """Read a JSON object from a file."""
    try:
        data = json.loads(read_file(path))
    except json.JSONDecodeError as e:
        console.print(f"[red]Error:[/red] {path} is not valid JSON: {e}")
        raise typer.Exit(1) from e
    if not isinstance(data, dict):
        console.print(f"[red]Error:[/red] {path} must contain a JSON object")
        raise typer.Exit(1)
    return data


def _write_pdf(record: CVRecord | dict, options: dict | None, output: Path | None) -> Path:
    try:
        document = generate_cv_pdf(record, options)
    except ValidationError as e:
        console.print(f"[red]Invalid input:[/red]\n{e}")
        raise typer.Exit(1) from e
    except CVGeneratorError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    path = document.save(output)
    pages = document.pages_count
    console.print(f"[green]CV saved to:[/green] {path} [dim]({pages} page(s))[/dim]")
    return path


@app.command()
def render(
    cv_json: Annotated[Path, typer.Argument(help="CV record as JSON (camelCase fields)")],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output PDF path (default: First_Last_CV.pdf)"),
    ] = None,
    options: Annotated[
        Path | None,
        typer.Option("--options", help="JSON file with colorScheme/spacing/styles overrides"),
    ] = None,
) -> None:
    """Render a CV record to PDF."""
    record = read_json(cv_json)
    overrides = read_json(options) if options else {}
    _write_pdf(record, overrides, output)


@app.command()
def generate(
    text_file: Annotated[Path, typer.Argument(help="Free-text description of your background")],
    manual: Annotated[
        Path | None,
        typer.Option("--manual", "-m", help="JSON file with form data that takes precedence"),
    ] = None,
    github: Annotated[
        str | None, typer.Option("--github", "-g", help="Add projects from this GitHub user")
    ] = None,
    provider: Annotated[
        ProviderName | None,
        typer.Option("--provider", "-p", help="LLM provider (default from settings)"),
    ] = None,
    model: Annotated[str | None, typer.Option("--model", help="Model ID override")] = None,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Output PDF path")
    ] = None,
    save_json: Annotated[
        Path | None, typer.Option("--save-json", help="Also save the merged CV record as JSON")
    ] = None,
) -> None:
    """Generate CV data with an LLM, merge it with form and GitHub data, render to PDF."""
    console.print(
        Panel.fit("[bold blue]CV Generator[/bold blue] - Building your CV", border_style="blue")
    )
    settings = get_settings()
    text = read_file(text_file)
    manual_data = read_json(manual) if manual else None

    try:
        llm = provider_from_settings(
            settings, provider=provider.value if provider else None, model=model
        )
        repository_projects = None
        if github:
            with GitHubClient(settings.github_token, timeout=settings.request_timeout) as client:
                repository_projects = fetch_github_projects(
                    github,
                    client=client,
                    provider=llm,
                    count=settings.github_repo_count,
                    analysis_temperature=settings.analysis_temperature,
                )
            console.print(f"  [green]OK[/green] {len(repository_projects)} GitHub project(s)")

        result = enhance_cv(
            text,
            manual=manual_data,
            provider=llm,
            repository_projects=repository_projects,
            progress_callback=lambda message: console.print(f"  [green]OK[/green] {message}"),
        )
    except ValidationError as e:
        console.print(f"[red]Invalid input:[/red]\n{e}")
        raise typer.Exit(1) from e
    except CVGeneratorError as e:
        console.print(f"\n[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    for warning in result.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")

    if save_json:
        save_json.write_text(
            result.record.model_dump_json(by_alias=True, indent=2), encoding="utf-8"
        )
        console.print(f"[green]CV data saved to:[/green] {save_json}")

    _write_pdf(result.record, None, output)


@app.command("github")
def github_projects(
    username: Annotated[str, typer.Argument(help="GitHub username")],
    count: Annotated[
        int | None, typer.Option("--count", "-n", min=1, max=20, help="Repositories to fetch")
    ] = None,
    no_llm: Annotated[
        bool, typer.Option("--no-llm", help="Skip README analysis by the LLM")
    ] = False,
    save_json: Annotated[
        Path | None, typer.Option("--save-json", help="Save projects as JSON")
    ] = None,
) -> None:
    """List a user's top repositories as CV projects."""
    settings = get_settings()
    try:
        llm = None if no_llm else provider_from_settings(settings)
        with GitHubClient(settings.github_token, timeout=settings.request_timeout) as client:
            projects = fetch_github_projects(
                username,
                client=client,
                provider=llm,
                count=count or settings.github_repo_count,
                analysis_temperature=settings.analysis_temperature,
            )
    except CVGeneratorError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    table = Table(title=f"GitHub projects of {username}")
    table.add_column("Project", style="bold")
    table.add_column("Stars", justify="right")
    table.add_column("Technologies")
    table.add_column("Description")
    for project in projects:
        table.add_row(
            project.name,
            str(project.stars),
            ", ".join(project.technologies),
            project.description,
        )
    console.print(table)

    if save_json:
        payload = [project.model_dump(by_alias=True) for project in projects]
        save_json.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        console.print(f"[green]Projects saved to:[/green] {save_json}")


@app.command()
def models() -> None:
    """List models installed on the local Ollama server."""
    settings = get_settings()
    provider = OllamaProvider(base_url=settings.ollama_base_url, timeout=settings.request_timeout)
    try:
        names = provider.list_models()
    except CVGeneratorError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    if not names:
        console.print("[yellow]No models installed.[/yellow]")
        return
    for name in names:
        console.print(f"  {name}")


@app.command()
def version() -> None:
    """Show version information."""
    from cv_generator import __version__

    console.print(f"CV Generator v{__version__}")


if __name__ == "__main__":
    app()

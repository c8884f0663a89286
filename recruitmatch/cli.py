"""
RecruitMatch Command Line Interface

Provides CLI commands for operating the match scoring service,
including database setup, one-off matching and auto-matching.
"""

import asyncio
from typing import Optional

import typer
from pymongo.errors import PyMongoError
from rich.console import Console
from rich.table import Table

from recruitmatch.core.exceptions import AutoMatchAborted, RecruitMatchError, StorageError

app = typer.Typer(
    name="recruitmatch",
    help="Resume-to-job match scoring CLI",
    add_completion=False,
)
console = Console()


def _score_color(score: int) -> str:
    if score >= 75:
        return "green"
    elif score >= 50:
        return "yellow"
    return "red"


def _fail(message: str) -> None:
    console.print(f"[red]Error: {message}[/red]")
    raise typer.Exit(1)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level"),
):
    """Configure logging before any command runs."""
    from recruitmatch.utils.logger import setup_logging

    setup_logging(level="DEBUG" if verbose else None)


@app.command()
def version():
    """Show application version."""
    from recruitmatch import __version__, __app_name__

    console.print(f"[bold blue]{__app_name__}[/bold blue] version [green]{__version__}[/green]")


@app.command()
def info():
    """Show system information and configuration."""
    from recruitmatch.utils.config import get_settings

    settings = get_settings()

    table = Table(title="RecruitMatch Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Environment", settings.environment)
    table.add_row("Debug Mode", str(settings.debug))
    table.add_row("Database Host", settings.database.host)
    table.add_row("Database Name", settings.database.name)
    table.add_row("Auto-match Page Size", str(settings.matching.auto_match_page_size))
    table.add_row("API Address", f"{settings.api.host}:{settings.api.port}")
    table.add_row("Log Level", settings.logging.level)

    console.print(table)


@app.command()
def init_db():
    """Create the indexes the matching flows rely on."""
    from recruitmatch.data.database import get_database_manager

    console.print("[yellow]Initializing database...[/yellow]")

    db_manager = get_database_manager()

    console.print("  Checking database connection...")
    if not db_manager.check_sync_connection():
        console.print("[red]Error: Could not connect to MongoDB.[/red]")
        console.print("[dim]Make sure MongoDB is running and connection settings are correct.[/dim]")
        raise typer.Exit(1)

    console.print("  [green]✓[/green] Connected to MongoDB")

    console.print("  Creating indexes...")
    try:
        created = db_manager.ensure_indexes()
    except PyMongoError as e:
        _fail(f"Could not create indexes: {e}")
    console.print(f"  [green]✓[/green] {len(created)} indexes in place")

    console.print("\n[green]Database initialized successfully![/green]")


@app.command()
def health_check():
    """Check connectivity to the database."""
    from recruitmatch.data.database import get_database_manager

    if get_database_manager().check_sync_connection():
        console.print("[green]✓ MongoDB reachable[/green]")
    else:
        console.print("[red]✗ MongoDB unreachable[/red]")
        raise typer.Exit(1)


@app.command()
def match(
    resume_id: str = typer.Argument(..., help="Resume ID to score"),
    job_id: str = typer.Argument(..., help="Job ID to score against"),
):
    """Score one resume against one job and store the match."""
    from recruitmatch.core.matching import MatchService
    from recruitmatch.core.principal import Principal

    service = MatchService()

    async def _run():
        outcome = await service.match(resume_id, job_id, Principal.system())
        resume = await service.resumes.get_by_id_async(resume_id)
        job = await service.jobs.get_by_id_async(job_id)
        return outcome, resume, job

    try:
        outcome, resume, job = asyncio.run(_run())
    except RecruitMatchError as e:
        _fail(e.message)

    breakdown = service.calculator.breakdown(resume, job)
    points = service.calculator.config

    table = Table(title=f"Match {outcome.match.id} ({'created' if outcome.created else 'updated'})")
    table.add_column("Component", style="cyan")
    table.add_column("Points", justify="right")
    table.add_column("Max", justify="right", style="dim")

    table.add_row("Skills", f"{breakdown.skills_score:.2f}", f"{points.skills_max:g}")
    table.add_row("Experience", f"{breakdown.experience_score:.2f}", f"{points.experience_points:g}")
    table.add_row("Education", f"{breakdown.education_score:.2f}", f"{points.education_points:g}")
    table.add_row("Summary", f"{breakdown.summary_score:.2f}", f"{points.summary_points:g}")

    score = outcome.match.match_score
    color = _score_color(score)
    table.add_row("[bold]Total[/bold]", f"[{color}]{score}[/{color}]", "100")
    console.print(table)

    missing = service.calculator.comparator.missing_skills(resume.skills, job.required_skills)
    console.print(f"  Required skills matched: [cyan]{outcome.match.skills_match}[/cyan]")
    if missing:
        console.print(f"  [yellow]Missing required skills:[/yellow] {', '.join(missing)}")


@app.command()
def auto_match(
    job_id: str = typer.Argument(..., help="Job ID to match every resume against"),
    top_n: int = typer.Option(20, "--top", "-n", help="Number of results to display"),
):
    """Re-score every resume in the system against a job."""
    from recruitmatch.core.matching import AutoMatchOrchestrator

    console.print(f"[yellow]Auto-matching resumes for job: {job_id}[/yellow]")

    orchestrator = AutoMatchOrchestrator()
    try:
        result = asyncio.run(orchestrator.auto_match(job_id))
    except AutoMatchAborted as e:
        console.print(f"[red]Auto-match aborted after {e.applied_count} resume(s): {e.cause}[/red]")
        console.print("[dim]Matches stored before the failure were kept.[/dim]")
        raise typer.Exit(1)
    except RecruitMatchError as e:
        _fail(e.message)

    console.print(f"[green]{result.message}[/green] ({result.stored_count} matches stored for this job)")
    if not result.results:
        raise typer.Exit(0)

    ranked = sorted(result.results, key=lambda entry: entry.score, reverse=True)[:top_n]
    table = Table(title=f"Top {len(ranked)} of {result.matched_count}")
    table.add_column("Rank", style="dim", width=4)
    table.add_column("Resume", style="cyan")
    table.add_column("Score", justify="right")

    for i, entry in enumerate(ranked, 1):
        color = _score_color(entry.score)
        table.add_row(str(i), entry.resume_id, f"[{color}]{entry.score}[/{color}]")

    console.print(table)


@app.command()
def list_matches(
    job_id: Optional[str] = typer.Option(None, "--job", "-j", help="Filter by job ID"),
    candidate_id: Optional[str] = typer.Option(None, "--candidate", "-c", help="Filter by candidate ID"),
    status: Optional[str] = typer.Option(None, "--status", "-s", help="Filter by status"),
    limit: int = typer.Option(50, "--limit", "-l", help="Maximum rows"),
):
    """List stored matches, best scores first."""
    from recruitmatch.core.matching import MatchService
    from recruitmatch.utils.constants import MatchStatus

    match_status = None
    if status:
        try:
            match_status = MatchStatus(status.lower())
        except ValueError:
            valid = ", ".join(s.value for s in MatchStatus)
            _fail(f"Unknown status '{status}' (expected one of: {valid})")

    service = MatchService()
    try:
        matches = asyncio.run(
            service.list_matches(
                job_id=job_id,
                candidate_id=candidate_id,
                status=match_status,
                limit=limit,
            )
        )
    except StorageError as e:
        _fail(e.message)

    if not matches:
        console.print("[yellow]No matches found.[/yellow]")
        raise typer.Exit(0)

    table = Table(title=f"Matches ({len(matches)})")
    table.add_column("Match", style="dim")
    table.add_column("Job")
    table.add_column("Resume")
    table.add_column("Candidate", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Skills", justify="right")
    table.add_column("Status")
    table.add_column("Matched At", style="dim")

    for m in matches:
        color = _score_color(m.match_score)
        table.add_row(
            str(m.id),
            str(m.job_id),
            str(m.resume_id),
            m.candidate_id,
            f"[{color}]{m.match_score}[/{color}]",
            str(m.skills_match),
            m.status,
            m.matched_at.strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Bind port"),
):
    """Run the HTTP API."""
    import uvicorn

    from recruitmatch.api import create_app
    from recruitmatch.utils.config import get_settings

    settings = get_settings()
    uvicorn.run(
        create_app(),
        host=host or settings.api.host,
        port=port or settings.api.port,
    )


if __name__ == "__main__":
    app()

"""Typer-based CLI entry point."""

from __future__ import annotations

import asyncio
import logging
from functools import wraps
from pathlib import Path
from typing import Optional

import typer
from rich import print
from rich.console import Console
from rich.table import Table

from jobwindow.appctx import AppContext, _create_settings_manager
from jobwindow.domain.models.core import JobListing, MatchResult
from jobwindow.errors import JobFailedError, JobWindowError, NotFoundError, UploadValidationError

app = typer.Typer(help="Browse job listings and resume matches through a bounded window")
console = Console()


def _handle_errors(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (UploadValidationError, NotFoundError, JobFailedError) as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except JobWindowError as exc:
            typer.echo(f"Unexpected error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


def _context(ctx: typer.Context) -> AppContext:
    settings_path: Optional[Path] = ctx.obj.get("settings_path") if ctx.obj else None
    return AppContext(settings=_create_settings_manager(settings_path))


def _render(items: list, title: str) -> None:
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Title")
    table.add_column("Company")
    table.add_column("Location")
    table.add_column("Score", justify="right")
    for position, item in enumerate(items, start=1):
        job: JobListing = item.job if isinstance(item, MatchResult) else item
        score = f"{item.score:.2f}" if isinstance(item, MatchResult) else ""
        table.add_row(str(position), job.title, job.company_name, job.location, score)
    console.print(table)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    settings_path: Optional[Path] = typer.Option(None, "--settings", help="Settings file"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    ctx.obj = {"settings_path": settings_path}


@app.command()
@_handle_errors
def browse(
    ctx: typer.Context,
    pages: int = typer.Option(1, min=1, help="Number of pages to load"),
    domain: Optional[str] = typer.Option(None, help="Only list jobs in this domain"),
) -> None:
    """List recent jobs, loading forward page by page."""

    async def _run() -> None:
        context = _context(ctx)
        view_model = context.jobs_view_model(domain)
        try:
            await view_model.load_initial()
            for _ in range(pages - 1):
                if view_model.reached_end.value:
                    break
                await view_model.load_next()
            if view_model.error.value:
                typer.echo(f"Error: {view_model.error.value}", err=True)
                raise typer.Exit(1)
            if view_model.is_empty:
                print("[yellow]No jobs yet. Check back later.")
                return
            _render(view_model.items.value, "Recent jobs")
            if view_model.reached_end.value:
                print("[dim]You've reached the end of results.")
        finally:
            view_model.dispose()
            await context.aclose()

    asyncio.run(_run())


@app.command()
@_handle_errors
def match(ctx: typer.Context, resume: Path = typer.Argument(..., exists=False)) -> None:
    """Upload a resume, wait for matching to finish and show the top matches."""

    async def _run() -> None:
        context = _context(ctx)
        view_model = context.match_view_model()
        view_model.activate()
        try:
            job_id = await view_model.upload_and_match(resume)
            if job_id is None:
                typer.echo(f"Error: {view_model.job_error.value}", err=True)
                raise typer.Exit(1)
            with console.status(f"Matching resume (job {job_id})…"):
                await view_model.poller.wait()
            if view_model.job_error.value:
                raise JobFailedError(view_model.job_error.value)
            print(f"[green]{view_model.total_matches.value or 0} matches")
            _render(view_model.items.value, "Top matches")
        finally:
            view_model.dispose()
            await context.aclose()

    asyncio.run(_run())


@app.command()
@_handle_errors
def status(ctx: typer.Context, job_id: str) -> None:
    """Show the status of a match job."""

    async def _run() -> None:
        context = _context(ctx)
        try:
            report = await context.api.matches.get_match_job_status(job_id)
        finally:
            await context.aclose()
        print(f"{report.job_id}: [bold]{report.status.value}")
        if report.error:
            print(f"[red]{report.error}")

    asyncio.run(_run())


if __name__ == "__main__":  # pragma: no cover
    app()

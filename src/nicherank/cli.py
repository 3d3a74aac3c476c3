"""CLI entrypoints for NicheRank."""

from __future__ import annotations

import asyncio
import json

import typer
from rich.console import Console
from rich.table import Table

from nicherank.config import load_settings
from nicherank.logging import configure_logging, get_logger
from nicherank.models.niche import InvalidNicheError
from nicherank.models.run import RankedResult, Run, SubmitResult
from nicherank.orchestrator.runner import NicheRanker
from nicherank.storage import build_run_store

app = typer.Typer(add_completion=False, help="NicheRank: rank the top websites for a niche")
logger = get_logger(__name__)
console = Console()


def _results_table(title: str, results: list[RankedResult]) -> Table:
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Site")
    table.add_column("Score", justify="right")
    for column in ("Search", "Perf", "Auth", "Fresh", "Usab"):
        table.add_column(column, justify="right")

    for r in results:
        c = r.components
        table.add_row(
            str(r.rank),
            f"{r.site.title}\n[dim]{r.site.url}[/dim]",
            str(r.score),
            str(c.search),
            str(c.performance),
            str(c.authority),
            str(c.freshness),
            str(c.usability),
        )
    return table


async def _submit(niche: str) -> SubmitResult:
    settings = load_settings()
    async with NicheRanker.from_settings(settings) as ranker:
        return await ranker.submit(niche)


@app.command()
def rank(
    niche: str = typer.Argument("", help='Niche to rank websites for (defaults to "study").', show_default=False),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """Discover and score the top websites for a niche."""

    settings = load_settings()
    configure_logging(settings.log_level)
    logger.info("CLI run requested")

    try:
        result = asyncio.run(_submit(niche))
    except InvalidNicheError as e:
        raise typer.BadParameter(str(e)) from e

    if as_json:
        typer.echo(json.dumps(result.model_dump(mode="json", by_alias=True), ensure_ascii=False, indent=2))
    elif result.success:
        console.print(_results_table(f'Top websites for "{result.niche}"', result.results))
        console.print(f"run id: {result.run_id}")
    else:
        console.print(f"[red]{result.error}[/red]")

    if not result.success:
        raise typer.Exit(code=1)


@app.command()
def show(
    run_id: str = typer.Argument(..., help="Run id printed by `rank`."),
    as_json: bool = typer.Option(False, "--json", help="Print the run as JSON"),
) -> None:
    """Show a stored run (needs a file or redis store backend)."""

    settings = load_settings()
    configure_logging(settings.log_level)

    run: Run | None = build_run_store(settings).fetch(run_id)
    if run is None:
        console.print(f"[red]Run not found: {run_id}[/red]")
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(run.model_dump(mode="json", by_alias=True), ensure_ascii=False, indent=2))
        return
    console.print(_results_table(f'{run.niche} ({run.status.value})', run.results))
    if run.error:
        console.print(f"[red]{run.error}[/red]")


if __name__ == "__main__":
    app()

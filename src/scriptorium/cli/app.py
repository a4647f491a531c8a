import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from scriptorium.config import SiteConfig
from scriptorium.exceptions import ScriptoriumError
from scriptorium.ingest.loader import load_documents
from scriptorium.logging_setup import configure_logging
from scriptorium.orchestration.build import build_site

app = typer.Typer(
    name="scriptorium",
    help="Build a static blog from a directory of Markdown documents.",
    add_completion=False,
)

console = Console()
logger = logging.getLogger(__name__)

RootOption = Annotated[
    Path,
    typer.Option("--root", "-r", help="Site root containing scriptorium.toml.", file_okay=False),
]
LogLevelOption = Annotated[
    str | None,
    typer.Option("--log-level", help="Logging level (default: SCRIPTORIUM_LOG_LEVEL or INFO)."),
]


def _load_config(root: Path) -> SiteConfig:
    try:
        return SiteConfig.load(root)
    except ScriptoriumError as exc:
        logger.error("%s", exc)
        raise typer.Exit(code=1) from exc


@app.command()
def build(
    root: RootOption = Path(),
    workers: Annotated[int | None, typer.Option("--workers", "-j", min=1, help="Parallel workers.")] = None,
    log_level: LogLevelOption = None,
) -> None:
    """
    Render every page, the index, the feed and copy the assets.
    """
    configure_logging(log_level)
    config = _load_config(root)
    if workers is not None:
        config.build.max_workers = workers

    try:
        report = build_site(config)
    except ScriptoriumError as exc:
        logger.error("Build aborted: %s", exc)
        raise typer.Exit(code=1) from exc

    style = "bold green" if report.ok else "bold yellow"
    console.print(
        f"[{style}]{len(report.render.successes)}/{len(report.documents)} page(s) written to "
        f"{config.paths.abs_output_dir}[/{style}]"
    )


@app.command()
def check(
    root: RootOption = Path(),
    log_level: LogLevelOption = None,
) -> None:
    """
    Validate the documents without writing anything.
    """
    configure_logging(log_level)
    config = _load_config(root)

    try:
        result = load_documents(config.paths.abs_posts_dir, config.build.extensions)
    except ScriptoriumError as exc:
        logger.error("%s", exc)
        raise typer.Exit(code=1) from exc

    table = Table(title=f"{len(result.documents)} document(s)")
    table.add_column("Date", style="bold cyan")
    table.add_column("Category")
    table.add_column("Slug")
    table.add_column("Title")
    for doc in result.documents:
        table.add_row(
            doc.metadata.publish_timestamp.strftime("%Y-%m-%d"),
            doc.metadata.category,
            doc.metadata.slug,
            doc.metadata.title,
        )
    console.print(table)

    if result.failures:
        console.print(f"[bold yellow]{len(result.failures)} file(s) skipped[/bold yellow]")


if __name__ == "__main__":
    app()

"""Main CLI interface for parse-git-log."""

import asyncio
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from parse_git_log.config import ParserSettings
from parse_git_log.core.stream import parse_git_log
from parse_git_log.exceptions import GitLogError
from parse_git_log.models.commit import Commit

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _commit_table(title: str) -> Table:
    table = Table(title=title, show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Commit", style="yellow", no_wrap=True)
    table.add_column("Date", style="green")
    table.add_column("Author", style="cyan")
    table.add_column("Subject")
    table.add_column("Refs", style="magenta")
    return table


def _add_row(table: Table, commit: Commit) -> None:
    table.add_row(
        str(commit.id),
        commit.abbrev or "",
        commit.date.relative or "",
        commit.author.name or "",
        commit.header or "",
        commit.ref or "",
    )


async def _print_log(project_root: Path, as_json: bool, settings: ParserSettings):
    stream = parse_git_log(project_root, settings=settings)
    table = _commit_table(str(project_root))

    if as_json:
        stream.on("commit", lambda commit: click.echo(commit.model_dump_json()))
    else:
        stream.on("commit", lambda commit: _add_row(table, commit))

    await stream.run()

    if not as_json:
        if stream.commit_count:
            console.print(table)
        else:
            console.print("[yellow]No commits found[/yellow]")


@click.command()
@click.version_option(package_name="parse-git-log")
@click.argument(
    "project_path", type=click.Path(file_okay=False), default=".", required=False
)
@click.option(
    "--json", "as_json", is_flag=True, help="Print one JSON object per commit"
)
@click.option("--strict", is_flag=True, help="Fail on records with missing fields")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def main(project_path: str, as_json: bool, strict: bool, verbose: bool):
    """Parse the git log of PROJECT_PATH into structured commits."""
    _configure_logging(verbose)
    project_root = Path(project_path).resolve()
    settings = ParserSettings(strict=strict)

    try:
        asyncio.run(_print_log(project_root, as_json, settings))
    except GitLogError as e:
        err_console.print(f"[red]Error: {e}[/red]")
        raise click.Abort() from e


if __name__ == "__main__":
    main()

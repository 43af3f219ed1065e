"""CLI entrypoint."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

import click

from ..config import load_config
from ..errors import NotablogError
from ..lib.log import configure_logging, get_logger
from ..notion.client import NotionClient
from ..paths import BuildPaths
from ..site import BuildSummary, SiteBuilder

logger = get_logger(__name__)


@dataclass
class AppEnv:
    root: Path
    verbose: bool = False


def _format_summary(summary: BuildSummary) -> str:
    counts = summary.counts
    line = (
        f"{counts.total} posts, {counts.updated} updated, "
        f"{counts.published} published, {summary.rendered} rendered"
    )
    if summary.failed:
        line += f", {summary.failed} failed"
    return line


async def _run_build(root: Path) -> BuildSummary:
    config = load_config(root)
    paths = BuildPaths(root=root, theme=config.theme)
    async with NotionClient.from_env() as client:
        builder = SiteBuilder(paths, config, client)
        return await builder.build()


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--workdir", "-C",
    type=click.Path(path_type=Path, file_okay=False),
    default=".",
    show_default=True,
    help="Site root containing config.json, themes/, source/ and public/",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines")
@click.pass_context
def cli(ctx: click.Context, workdir: Path, verbose: bool, json_logs: bool) -> None:
    """Build a static blog from a Notion database."""
    configure_logging(verbose=verbose, json_logs=json_logs)
    ctx.obj = AppEnv(root=workdir.resolve(), verbose=verbose)


@cli.command("build")
@click.pass_context
def build_command(ctx: click.Context) -> None:
    """Fetch changed pages and render the site into public/."""
    env: AppEnv = ctx.obj
    try:
        summary = asyncio.run(_run_build(env.root))
    except NotablogError as exc:
        logger.error("Build failed", error=str(exc), error_type=type(exc).__name__)
        click.echo(f"build: {exc}", err=True)
        ctx.exit(1)

    click.echo(f"Site built: {_format_summary(summary)}")
    click.echo(f"Open {env.root / 'public' / 'index.html'} to preview")


def main() -> None:
    cli()


__all__ = ["cli", "main"]

"""CLI interface for Folio.

Serve a portfolio site or render single routes from the command line.
"""

import asyncio
import json
import logging
import sys
from pathlib import Path

import click

from folio.config import Config


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_config(config_path: Path | None) -> Config:
    try:
        return Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)


config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover folio.toml)",
)
content_dir_option = click.option(
    "--content-dir",
    "-d",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Content root directory (overrides config)",
)
content_url_option = click.option(
    "--content-url",
    default=None,
    help="Fetch content over HTTP from this base URL (overrides config)",
)
verbose_option = click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging",
)


@click.group()
def cli() -> None:
    """Folio - a small portfolio site renderer."""


@cli.command()
@config_option
@content_dir_option
@content_url_option
@click.option("--host", default=None, help="Host to bind to (overrides config)")
@click.option("--port", "-p", type=int, default=None, help="Port to bind to (overrides config)")
@click.option(
    "--live-reload/--no-live-reload",
    default=None,
    help="Enable/disable live reload (overrides config, default: disabled)",
)
@verbose_option
def serve(
    config_path: Path | None,
    content_dir: Path | None,
    content_url: str | None,
    host: str | None,
    port: int | None,
    live_reload: bool | None,
    verbose: bool,
) -> None:
    """Start the site server."""
    from folio.server import run_server

    _configure_logging(verbose)
    config = _load_config(config_path).with_overrides(
        host=host,
        port=port,
        content_root=content_dir,
        base_url=content_url,
        live_reload_enabled=live_reload,
    )

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    if config.content.base_url:
        click.echo(f"Content URL: {config.content.base_url}")
    else:
        click.echo(f"Content directory: {config.content.root}")
    click.echo(f"Live reload: {'enabled' if config.live_reload.enabled else 'disabled'}")

    run_server(config)


@cli.command()
@click.argument("fragment", default="")
@config_option
@content_dir_option
@content_url_option
@click.option(
    "--content-only",
    is_flag=True,
    help="Print only the content fragment instead of the full page",
)
@verbose_option
def render(
    fragment: str,
    config_path: Path | None,
    content_dir: Path | None,
    content_url: str | None,
    content_only: bool,
    verbose: bool,
) -> None:
    """Render the page for a route FRAGMENT (e.g. "#blog/hello") to stdout.

    Exits with status 1 when the route renders the not-found or error view.
    """
    from folio.application import Application
    from folio.shell import HtmlShell

    if verbose:
        _configure_logging(verbose)
    config = _load_config(config_path).with_overrides(
        content_root=content_dir,
        base_url=content_url,
    )

    async def _render() -> tuple[HtmlShell, bool]:
        application = await Application.start(config)
        try:
            shell = HtmlShell(config.site.title)
            result = await application.render_into(shell, fragment)
        finally:
            await application.close()
        if result is not None:
            shell.page_title = result.page.title
        return shell, result is not None and result.failure is None

    shell, ok = asyncio.run(_render())
    click.echo(shell.content if content_only else shell.render_document())
    if not ok:
        sys.exit(1)


@cli.command()
@click.argument("markdown_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def meta(markdown_file: Path) -> None:
    """Print the front matter of MARKDOWN_FILE as JSON."""
    from folio.core.frontmatter import parse_front_matter

    block = parse_front_matter(markdown_file.read_text(encoding="utf-8"))
    click.echo(json.dumps(block.to_dict(), indent=2, ensure_ascii=False))

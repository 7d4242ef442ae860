"""Command-line interface for Gazette.

This module defines the CLI commands using Click framework.
It provides commands for building sites, running the development server and
creating new content files.

Commands:
- build: Build the site into the output directory (optionally watching).
- serve: Run development server with live reload.
- new: Create a new post or page with front matter.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from pathlib import Path

import click
import questionary
import yaml

from . import __version__
from .config import load_config
from .errors import GazetteError, ParseError
from .extractors import TIME_FORMAT
from .utils import ensure_clean_dir, slugify, titleize

logger = logging.getLogger("gazette")


def _setup_logging(verbose: bool) -> None:
    """Route the package's log records to stderr as plain messages."""
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.handlers = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False


def _report_failure(exc: Exception, project_root: Path) -> None:
    click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
    if isinstance(exc, ParseError):
        try:
            source = exc.source_path.relative_to(project_root)
        except ValueError:
            source = exc.source_path
        click.echo(click.style(f"  File: {source}", fg="yellow"), err=True)
        click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
    else:
        click.echo(click.style(f"  Error: {exc}", fg="white"), err=True)


@click.group()
@click.version_option(version=__version__, prog_name="gazette")
def cli():
    """Gazette static site generator."""


@cli.command()
@click.option("-w", "--watch", is_flag=True, help="Rebuild when sources change")
@click.option("-c", "--clean", is_flag=True, help="Empty the output directory first")
@click.option("-v", "--verbose", is_flag=True, help="Log every generated file")
def build(watch: bool, clean: bool, verbose: bool):
    """Build the site into the output directory."""
    _setup_logging(verbose)
    project_root = Path.cwd()
    from .build import SiteBuilder, build_site

    try:
        if watch:
            builder = SiteBuilder(project_root)
            result = builder.rebuild()
        else:
            result = build_site(project_root, clean_output=clean)
    except (GazetteError, OSError) as exc:
        _report_failure(exc, project_root)
        raise SystemExit(1) from None
    click.echo(f"Built {result.files_written} files into {result.output_dir}")
    if watch:
        _watch(project_root, builder)


def _watch(project_root: Path, builder) -> None:
    """Rebuild on changes until interrupted."""
    from .config import CONFIG_FILENAME
    from .watch import Watcher

    config = load_config(project_root)
    output = builder.output_dir
    watcher = Watcher(
        builder.rebuild,
        [
            config.source_dir,
            config.theme_dir,
            *(project_root / name for name in config.directory.assets),
            project_root / CONFIG_FILENAME,
        ],
        ignore=[
            output,
            output.with_name(output.name + ".staging"),
            output.with_name(output.name + ".previous"),
        ],
        on_rebuilt=lambda result: click.echo(
            f"Built {result.files_written} files into {result.output_dir}"
        ),
    )
    watcher.start()
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        watcher.stop()


@cli.command()
@click.option(
    "-p",
    "--port",
    type=int,
    required=False,
    help="Port to run the dev server (overrides gazette.yaml)",
)
@click.option(
    "--ws-port",
    type=int,
    required=False,
    help="Port for the live reload websocket server (overrides gazette.yaml ws_port)",
)
@click.option("-c", "--clean", is_flag=True, help="Empty the output directory first")
@click.option("-v", "--verbose", is_flag=True, help="Log every generated file")
def serve(port: int | None, ws_port: int | None, clean: bool, verbose: bool):
    """Run dev server with live reload."""
    _setup_logging(verbose)
    project_root = Path.cwd()
    from .server import DevServer

    try:
        if clean:
            ensure_clean_dir(load_config(project_root).output_dir)
        server = DevServer(project_root, http_port=port, ws_port=ws_port)
        server.start()
    except (GazetteError, OSError) as exc:
        _report_failure(exc, project_root)
        raise SystemExit(1) from None


@cli.command()
@click.argument("path", required=False)
@click.option("--page", is_flag=True, help="Create a page instead of a post")
def new(path: str | None, page: bool):
    """Create a new post (or page) under the source directory."""
    project_root = Path.cwd()
    config = load_config(project_root)
    target_dir = config.pages_dir if page else config.posts_dir

    if path is None:
        path = questionary.text(
            "Page path:" if page else "Post path:",
            validate=lambda x: len(x.strip()) > 0 or "Path cannot be empty",
            style=_questionary_style(),
        ).ask()
        if path is None:
            raise click.Abort()
        path = path.strip()

    relative = Path(path)
    if relative.suffix.lower() != ".md":
        relative = relative.with_name(relative.name + ".md")
    target_path = target_dir / relative
    if target_path.exists():
        raise click.ClickException(
            f"File already exists: {target_path.relative_to(project_root)}"
        )

    target_path.parent.mkdir(parents=True, exist_ok=True)
    target_path.write_text(
        _new_document(relative, page), encoding="utf-8"
    )
    click.echo(f"Created {target_path.relative_to(project_root)}")


def _new_document(relative: Path, page: bool) -> str:
    """Return the text of a new document with its front matter."""
    meta = {
        "title": titleize(relative.name),
        "slug": slugify(relative.with_suffix("").as_posix()),
        "date": datetime.now().strftime(TIME_FORMAT),
    }
    if page:
        meta["template"] = "page.html"
    else:
        meta["tags"] = []
    front = yaml.safe_dump(meta, sort_keys=False, allow_unicode=True)
    return f"---\n{front}---\n\n"


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()

"""CLI entrypoints for the news build."""

import logging
import os
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from .config import Config, apply_environment, load_config
from .errors import ConfigurationError, NewsdeskError
from .fetch import fetch_entries, load_payload, save_payload
from .pipeline import BuildResult, run_build

console = Console()
app = typer.Typer(help="Build static news pages from the content delivery API.")

ConfigPathOption = Annotated[
    str,
    typer.Option("--config", "-c", help="Path to a configuration file or project directory."),
]
EnvironmentOption = Annotated[
    str | None,
    typer.Option(
        "--environment",
        "-e",
        help="Preferred content environment (overrides CONTENTFUL_ENV).",
    ),
]
VerboseFlag = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Show debug logging."),
]


@app.command()
def build(
    config_path: ConfigPathOption = ".",
    environment: EnvironmentOption = None,
    payload_path: Annotated[
        Path | None,
        typer.Option(
            "--payload",
            help="Build from a saved payload JSON instead of calling the API.",
        ),
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Override the output directory."),
    ] = None,
    verbose: VerboseFlag = False,
) -> None:
    """Fetch entries and write the listing, article pages, sitemap, and RSS feed."""
    _configure_logging(verbose)
    config = _load(config_path, environment)
    if output_dir is not None:
        config.output_dir = output_dir.resolve()

    try:
        payload = load_payload(payload_path) if payload_path is not None else None
        result = run_build(config, payload)
    except ConfigurationError as exc:
        console.print(f"[bold red]Configuration error[/]: {exc}")
        raise typer.Exit(code=1) from exc
    except NewsdeskError as exc:
        console.print(f"[bold red]Build failed[/]: {exc}")
        raise typer.Exit(code=1) from exc

    _print_build_summary(result)


@app.command()
def fetch(
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Where to save the fetched payload JSON."),
    ],
    config_path: ConfigPathOption = ".",
    environment: EnvironmentOption = None,
    verbose: VerboseFlag = False,
) -> None:
    """Fetch entries and save the raw payload for offline builds."""
    _configure_logging(verbose)
    config = _load(config_path, environment)

    try:
        result = fetch_entries(config.source)
    except NewsdeskError as exc:
        console.print(f"[bold red]Fetch failed[/]: {exc}")
        raise typer.Exit(code=1) from exc

    target = save_payload(result, output)
    console.print(
        f"[bold green]Payload saved[/]: {result.item_count} item(s) from environment "
        f"'{result.environment}' -> {target}"
    )


def _print_build_summary(result: BuildResult) -> None:
    source = f"environment '{result.environment}'" if result.environment else "saved payload"
    console.print(
        f"[bold green]Build complete[/]: {result.entry_count} entr"
        f"{'y' if result.entry_count == 1 else 'ies'} from {source}."
    )
    console.print(f"- Listing: {result.listing_path}")
    console.print(f"- Article pages: {len(result.article_paths)}")
    for path in result.feed_paths:
        console.print(f"- Feed: {path}")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load(path: str, environment: str | None) -> Config:
    try:
        config = load_config(path)
    except FileNotFoundError as exc:
        raise typer.BadParameter(f"Config file not found: {path}") from exc
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    apply_environment(config, os.environ)
    if environment:
        config.source = config.source.model_copy(update={"environment": environment.strip()})
    return config


if __name__ == "__main__":
    app()

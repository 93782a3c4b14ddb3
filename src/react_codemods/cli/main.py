"""Command-line entry point for react-codemods."""

import sys
from pathlib import Path

import typer
from loguru import logger

from .. import __version__
from .commands import effect_debug, log_functions, profile, usestate_analyze, usestate_log

app = typer.Typer(
    name="react-codemods",
    help="🧰 Syntax-tree analysis and instrumentation for React codebases",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def setup_logging(verbose: bool) -> None:
    """Route loguru to stderr; WARNING unless verbose."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"react-codemods {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging on stderr"
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (defaults to .react-codemods.yaml in the target)",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """🧰 React codemods: analyze and instrument React source trees."""
    setup_logging(verbose)
    ctx.obj = {"config_path": config}


app.command("usestate-analyze")(usestate_analyze.main)
app.command("usestate-log")(usestate_log.main)
app.command("effect-debug")(effect_debug.main)
app.command("profile")(profile.main)
app.command("log-functions")(log_functions.main)


if __name__ == "__main__":
    app()

"""Startup checks shared by every command.

All of these run before any source file is read: a missing target path, a
missing parsing toolchain or a broken configuration file stops the command
with exit code 1.
"""

import importlib.util
from pathlib import Path

import typer
from loguru import logger
from rich.markup import escape

from ..config.defaults import REQUIRED_MODULES, get_default_config_path
from ..config.settings import CodemodConfig
from ..core.exceptions import ConfigError, ProjectNotFoundError, ToolchainError
from .output import console, print_error, print_info


def check_toolchain() -> None:
    """Verify the parsing modules can be imported.

    Raises:
        ToolchainError: With the distribution names of the missing modules
    """
    missing = [
        distribution
        for module, distribution in REQUIRED_MODULES.items()
        if importlib.util.find_spec(module) is None
    ]
    if missing:
        raise ToolchainError(missing)


def resolve_target(path: Path) -> Path:
    """Make sure the target exists.

    Raises:
        ProjectNotFoundError: If the path does not exist
    """
    if not path.exists():
        raise ProjectNotFoundError(f"Path not found: {path}", context={"path": str(path)})
    return path


def load_config(path: Path, config_path: Path | None) -> CodemodConfig:
    """Load ``--config`` or the project's default config file.

    Raises:
        ConfigError: If an explicit config file is missing or invalid
    """
    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        return CodemodConfig.load(config_path)
    return CodemodConfig.load(get_default_config_path(path))


def prepare(ctx: typer.Context, path: Path) -> CodemodConfig:
    """Run startup checks and return the effective configuration."""
    config_path = (ctx.obj or {}).get("config_path")
    try:
        resolve_target(path)
        check_toolchain()
        config = load_config(path, config_path)
    except ToolchainError as e:
        print_error("Required dependencies are missing. Please install them manually:")
        console.print(f"  pip install {' '.join(e.missing)}", markup=False)
        raise typer.Exit(1) from e
    except (ProjectNotFoundError, ConfigError) as e:
        print_error(escape(str(e)))
        raise typer.Exit(1) from e

    logger.debug(f"Target {path}, extensions {config.discovery.extensions}")
    return config


def announce(action: str, path: Path, json_output: bool) -> None:
    if not json_output:
        print_info(f"{action} [cyan]{escape(str(path))}[/cyan]")

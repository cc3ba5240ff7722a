"""Typer-based entry point that wraps git."""

from __future__ import annotations

import logging
import sys
from typing import Sequence

import typer
from rich.console import Console
from rich.logging import RichHandler

from .args import ArgumentList
from .commands import Registry, registry
from .config import HubConfig, load_config
from .context import Context
from .exceptions import FatalError, HubError
from .runner import Runner

app = typer.Typer(add_completion=False, add_help_option=False)


@app.command(
    context_settings={
        "allow_extra_args": True,
        "ignore_unknown_options": True,
        "help_option_names": [],
    }
)
def main() -> None:
    """Run git, with any registered augmentations applied."""

    # Click swallows "--" and would parse git's options, so take argv verbatim
    run(sys.argv[1:])


def run(
    argv: Sequence[str],
    *,
    config: HubConfig | None = None,
    hooks: Registry = registry,
    context: Context | None = None,
) -> None:
    config = config or load_config()
    configure_logging(config.verbose)
    args = ArgumentList(argv, executable=config.git_executable)
    context = context or Context(config)
    try:
        hooks.run(args, context)
        Runner(args).execute()
    except FatalError as err:
        _fail(f"fatal: {err}", err.exit_code)
    except HubError as err:
        _fail(str(err), err.exit_code)


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_time=False, show_path=False)],
    )


def _fail(message: str, code: int = 1) -> None:
    typer.secho(message, err=True, fg=typer.colors.RED)
    raise typer.Exit(code)


if __name__ == "__main__":
    app()

"""Runs the chain of commands built for a git invocation."""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from typing import Sequence

import typer

from .args import ArgumentList, Callback, Subprocess
from .exceptions import CommandNotFoundError, HubError

logger = logging.getLogger(__name__)


def is_windows() -> bool:
    return os.name == "nt"


def exit_status(returncode: int) -> int:
    """Translate a ``subprocess`` return code into a process exit status."""

    if returncode < 0:
        return 128 + abs(returncode)
    return returncode


class Runner:
    """Executes an :class:`ArgumentList` once augmentation is finished.

    Every step but the last runs to completion before the next one starts, and
    the first failing command ends the run with its own exit status. The last
    command replaces the current process, so nothing runs after it.
    """

    def __init__(self, args: ArgumentList):
        self.args = args

    def command(self) -> str:
        """Single-line rendering of what would run, or ``""`` when skipped."""

        if self.args.is_skip:
            return ""
        return "; ".join(self.commands())

    def commands(self) -> list[str]:
        return [str(step) for step in self.args.commands()]

    def execute(self) -> None:
        if self.args.is_skip:
            return
        if self.args.is_noop:
            for line in self.commands():
                typer.echo(line)
        else:
            self.execute_chain(self.args.commands())

    def execute_chain(self, steps: Sequence[Subprocess | Callback]) -> None:
        last = len(steps) - 1
        for index, step in enumerate(steps):
            if isinstance(step, Callback):
                logger.debug("Running callback: %s", step)
                step()
            elif index == last:
                self.exec(step.argv)
            else:
                returncode = self.system(step.argv)
                if returncode != 0:
                    raise typer.Exit(code=exit_status(returncode))

    def system(self, argv: Sequence[str]) -> int:
        """Run ``argv`` to completion with inherited stdio and return its code."""

        if self._portable_echo(argv):
            return 0
        logger.debug("Running command: %s", " ".join(argv))
        try:
            return subprocess.run(list(argv), check=False).returncode
        except FileNotFoundError as exc:
            raise CommandNotFoundError(argv[0]) from exc

    def exec(self, argv: Sequence[str]) -> None:
        """Replace the current process with ``argv``; never returns normally."""

        if self._portable_echo(argv):
            raise typer.Exit(code=0)
        logger.debug("Exec: %s", " ".join(argv))
        if is_windows():
            raise typer.Exit(code=exit_status(self.system(argv)))
        sys.stdout.flush()
        sys.stderr.flush()
        try:
            os.execvp(argv[0], list(argv))
        except FileNotFoundError as exc:
            raise CommandNotFoundError(argv[0]) from exc
        raise HubError(f"exec returned unexpectedly: {argv[0]}")

    def _portable_echo(self, argv: Sequence[str]) -> bool:
        # Windows has no standalone echo binary
        if argv and argv[0] == "echo" and is_windows():
            typer.echo(" ".join(argv[1:]))
            return True
        return False

"""Thin wrappers around git plumbing commands."""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Iterable

from .exceptions import CommandNotFoundError

logger = logging.getLogger(__name__)


def run_git(
    args: Iterable[str],
    *,
    executable: str = "git",
    cwd: Path | None = None,
) -> subprocess.CompletedProcess[str]:
    """Execute a git command, capturing its output."""

    cmd = [executable, *args]
    logger.debug("Running command: %s", " ".join(cmd))
    try:
        return subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError as exc:
        raise CommandNotFoundError(executable) from exc


class GitReader:
    """Runs plumbing commands and hands back their trimmed output.

    A failing command yields ``None`` instead of raising, so callers can treat
    a missing ref or config key as an ordinary absence.
    """

    def __init__(self, executable: str = "git", cwd: Path | None = None):
        self.executable = executable
        self.cwd = cwd
        self.global_flags: list[str] = []

    def add_exec_flags(self, flags: Iterable[str]) -> None:
        self.global_flags.extend(flags)

    def command(self, cmd: str) -> str | None:
        proc = run_git(
            [*self.global_flags, *shlex.split(cmd)],
            executable=self.executable,
            cwd=self.cwd,
        )
        if proc.returncode != 0:
            return None
        return proc.stdout.strip()

    def config(self, name: str, get_all: bool = False) -> str | None:
        flag = "--get-all" if get_all else "--get"
        return self.command(f"config {flag} {shlex.quote(name)}")

    def config_bool(self, name: str) -> bool:
        return self.command(f"config --bool --get {shlex.quote(name)}") == "true"

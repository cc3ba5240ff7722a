"""Runtime configuration resolved from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

MAIN_HOST = "github.com"
DEFAULT_EXECUTABLE = "git"


@dataclass(frozen=True)
class HubConfig:
    """Settings read once per run and shared by reference."""

    git_executable: str = DEFAULT_EXECUTABLE
    default_host: str = MAIN_HOST
    main_host: str = MAIN_HOST
    verbose: bool = False

    @property
    def ssh_host(self) -> str:
        return f"ssh.{self.default_host}"


def load_config(environ: Mapping[str, str] | None = None) -> HubConfig:
    env = os.environ if environ is None else environ
    return HubConfig(
        git_executable=env.get("GIT") or DEFAULT_EXECUTABLE,
        default_host=env.get("GITHUB_HOST") or MAIN_HOST,
        verbose=bool(env.get("HUB_VERBOSE")),
    )

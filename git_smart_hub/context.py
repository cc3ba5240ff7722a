"""Lazily resolved facts about the current repository and its hosted projects."""

from __future__ import annotations

import functools
import os
import re
import shlex
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, TypeVar, cast

from .config import HubConfig, load_config
from .exceptions import ContextError, FatalError
from .git import GitReader
from .models import Branch, Project, Remote, ResolvedURL
from .ssh_config import SshConfig

DEFAULT_MASTER_REF = "refs/heads/master"

T = TypeVar("T")


def memoized(func: Callable[[Any], T]) -> property:
    """Read-only property whose value is stored in the owner's ``_cache``."""

    key = func.__name__

    @functools.wraps(func)
    def getter(self: Any) -> T:
        try:
            return self._cache[key]
        except KeyError:
            value = self._cache[key] = func(self)
            return value

    return property(getter)


class LocalRepo:
    """The git repository found in the working directory."""

    def __init__(
        self,
        reader: GitReader,
        directory: Path,
        config: HubConfig,
        ssh_config: SshConfig | None = None,
    ):
        self.reader = reader
        self.dir = directory
        self.config = config
        self._ssh_config = ssh_config
        self._cache: dict[str, Any] = {}

    def git_command(self, cmd: str) -> str | None:
        return self.reader.command(cmd)

    def git_config(self, name: str, get_all: bool = False) -> str | None:
        return self.reader.config(name, get_all=get_all)

    @property
    def name(self) -> str:
        project = self.main_project
        if project is not None:
            return project.name
        return self.dir.name

    @property
    def repo_owner(self) -> str | None:
        project = self.main_project
        return project.owner if project else None

    @property
    def repo_host(self) -> str | None:
        project = self.main_project
        return project.host if project else None

    @property
    def main_project(self) -> Project | None:
        remote = self.origin_remote
        return remote.project if remote else None

    @property
    def upstream_project(self) -> Project | None:
        branch = self.current_branch
        if branch is None:
            return None
        upstream = branch.upstream
        if upstream is None or not upstream.is_remote:
            return None
        remote = self.remote_by_name(upstream.remote_name)
        return remote.project if remote else None

    @property
    def current_project(self) -> Project | None:
        return self.upstream_project or self.main_project

    @memoized
    def current_branch(self) -> Branch | None:
        ref = self.git_command("symbolic-ref -q HEAD")
        return Branch(self, ref) if ref else None

    @memoized
    def master_branch(self) -> Branch:
        default_ref = None
        remote = self.origin_remote
        if remote is not None:
            default_ref = self.git_command(f"rev-parse --symbolic-full-name {remote}")
        return Branch(self, default_ref or DEFAULT_MASTER_REF)

    @memoized
    def remotes(self) -> list[Remote]:
        names = (self.git_command("remote") or "").splitlines()
        # every default-project lookup relies on origin coming first
        if "origin" in names:
            names.remove("origin")
            names.insert(0, "origin")
        return [Remote(self, name) for name in names]

    def remotes_group(self, name: str) -> str | None:
        return self.git_config(f"remotes.{name}")

    @property
    def origin_remote(self) -> Remote | None:
        remotes = self.remotes
        return remotes[0] if remotes else None

    def remote_by_name(self, remote_name: str) -> Remote | None:
        return next((r for r in self.remotes if r.name == remote_name), None)

    @memoized
    def known_hosts(self) -> list[str]:
        hosts = (self.git_config("hub.host", get_all=True) or "").splitlines()
        hosts.append(self.default_host)
        # ssh over the https port
        hosts.append(self.config.ssh_host)
        return hosts

    @property
    def default_host(self) -> str:
        return self.config.default_host

    @property
    def main_host(self) -> str:
        return self.config.main_host

    @memoized
    def ssh_config(self) -> SshConfig:
        return self._ssh_config if self._ssh_config is not None else SshConfig()


class Context:
    """Per-run entry point to the repository graph.

    Every fact is computed on first access and kept for the rest of the run.
    Build a fresh instance for each invocation; nothing here is thread-safe.
    """

    def __init__(
        self,
        config: HubConfig | None = None,
        *,
        reader: GitReader | None = None,
        ssh_config: SshConfig | None = None,
        cwd: Path | None = None,
    ):
        self.config = config or load_config()
        self.cwd = cwd or Path.cwd()
        self.reader = reader or GitReader(self.config.git_executable, self.cwd)
        self.ssh_config = ssh_config
        self._cache: dict[str, Any] = {}

    @memoized
    def git_dir(self) -> str | None:
        return self.reader.command("rev-parse -q --git-dir")

    @property
    def is_repo(self) -> bool:
        return self.git_dir is not None

    def local_repo(self, fatal: bool = True) -> LocalRepo | None:
        repo = self._cache.get("local_repo")
        if repo is None:
            if self.is_repo:
                repo = LocalRepo(self.reader, self.cwd, self.config, self.ssh_config)
                self._cache["local_repo"] = repo
            elif fatal:
                raise FatalError("Not a git repository")
        return repo

    def _repo(self) -> LocalRepo:
        return cast(LocalRepo, self.local_repo())

    @property
    def repo_name(self) -> str:
        return self._repo().name

    @property
    def repo_owner(self) -> str | None:
        return self._repo().repo_owner

    @property
    def repo_host(self) -> str | None:
        return self._repo().repo_host

    @property
    def current_branch(self) -> Branch | None:
        return self._repo().current_branch

    @property
    def current_project(self) -> Project | None:
        return self._repo().current_project

    @property
    def upstream_project(self) -> Project | None:
        return self._repo().upstream_project

    @property
    def main_project(self) -> Project | None:
        return self._repo().main_project

    @property
    def remotes(self) -> list[Remote]:
        return self._repo().remotes

    @property
    def origin_remote(self) -> Remote | None:
        return self._repo().origin_remote

    def remotes_group(self, name: str) -> str | None:
        return self._repo().remotes_group(name)

    def remote_by_name(self, name: str) -> Remote | None:
        return self._repo().remote_by_name(name)

    @property
    def known_hosts(self) -> list[str]:
        return self._repo().known_hosts

    @property
    def master_branch(self) -> Branch:
        repo = self.local_repo(fatal=False)
        if repo is not None:
            return repo.master_branch
        return Branch(None, DEFAULT_MASTER_REF)

    def project_for(self, name: str | None = None, owner: str | None = None) -> Project:
        """Build a project from ``name``/``owner``, either of which may be ``owner/name``."""

        if owner and "/" in owner:
            owner, name = owner.split("/", 1)
        elif name and "/" in name:
            owner, name = name.split("/", 1)
        else:
            name = name or self.repo_name
            owner = owner or self.repo_owner
        if not name:
            raise ContextError("A project name is required")
        if not owner:
            raise ContextError("A project owner is required")

        repo = self.local_repo(fatal=False)
        main_project = repo.main_project if repo is not None else None
        if main_project is not None:
            return replace(main_project, owner=owner, name=name)
        return Project(owner, name, self.config.default_host, local_repo=repo)

    @property
    def is_https_protocol(self) -> bool:
        if self.reader.config("hub.protocol") == "https":
            return True
        # legacy setting
        return self.reader.config_bool("hub.http-clone")

    def git_url(
        self,
        owner: str | None = None,
        name: str | None = None,
        *,
        https: bool | None = None,
        private: bool = False,
    ) -> str:
        project = self.project_for(name, owner)
        if https is None:
            https = self.is_https_protocol
        return project.git_url(https=https, private=private)

    def resolve_url(self, url: str) -> ResolvedURL | None:
        if not re.match(r"^https?:", url):
            return None
        return ResolvedURL.resolve(url, self._repo())

    def alias_for(self, name: str) -> str | None:
        return self.reader.config(f"alias.{name}")

    def rev_list(self, a: str, b: str) -> str | None:
        return self.reader.command(f"rev-list --cherry-pick --right-only --no-merges {a}...{b}")

    @property
    def git_editor(self) -> list[str]:
        """The user's editor as an argv, e.g. ``["vim"]`` or ``["code", "--wait"]``."""

        editor = self.reader.command("var GIT_EDITOR")
        if not editor:
            raise ContextError("Unable to determine the git editor")
        variable = re.match(r"^\$(\w+)$", editor)
        if variable:
            editor = os.environ.get(variable.group(1), "")
        if (re.match(r"^[~.]", editor) or "/" in editor) and not re.search(r"[\"']", editor):
            editor = os.path.abspath(os.path.join(self.cwd, os.path.expanduser(editor)))
        # keep "C:\Program Files\..." in one piece
        if Path(editor).exists():
            return [editor]
        return shlex.split(editor)

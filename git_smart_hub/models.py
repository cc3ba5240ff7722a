"""Value types describing remotes, branches and hosted projects."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from functools import cached_property
from typing import TYPE_CHECKING, Any, Mapping
from urllib.parse import urlsplit

from .config import HubConfig
from .exceptions import ContextError

if TYPE_CHECKING:
    from .context import LocalRepo


_INVALID_URI_CHARS = re.compile(r"[\s<>\"{}|\\^`]")
_REMOTE_LINE = re.compile(r"^(.+?)\t(.+) \((.+)\)$")
_URI_WITH_SCHEME = re.compile(r"^[\w-]+://")
_SCP_LIKE = re.compile(r"^([^/]+?):")
_REF_NAMESPACE = re.compile(r"^refs/(remotes/)?.+?/")
_REMOTE_REF = re.compile(r"^refs/remotes/([^/]+)")


def _netloc_host(netloc: str, hostname: str | None) -> str | None:
    """``hostname`` with the case it had in ``netloc``; urlsplit lowercases it."""

    if hostname is None:
        return None
    hostinfo = netloc.rpartition("@")[2]
    start = hostinfo.lower().find(hostname)
    if start < 0:
        return hostname
    return hostinfo[start : start + len(hostname)]


@dataclass(frozen=True)
class GitURL:
    """A parsed remote URL."""

    scheme: str
    host: str | None
    path: str = ""
    user: str | None = None
    port: int | None = None
    query: str = ""
    fragment: str = ""

    @classmethod
    def parse(cls, uri: str) -> GitURL:
        """Parse ``uri``, raising ``ValueError`` when it is not a valid URI."""

        if _INVALID_URI_CHARS.search(uri):
            raise ValueError(f"Invalid URI: {uri!r}")
        parts = urlsplit(uri)
        if not parts.scheme:
            raise ValueError(f"URI has no scheme: {uri!r}")
        return cls(
            scheme=parts.scheme,
            host=_netloc_host(parts.netloc, parts.hostname),
            path=parts.path,
            user=parts.username,
            port=parts.port,
            query=parts.query,
            fragment=parts.fragment,
        )

    def replace(self, **changes: Any) -> GitURL:
        return replace(self, **changes)

    def __str__(self) -> str:
        netloc = self.host or ""
        if self.user:
            netloc = f"{self.user}@{netloc}"
        if self.port is not None:
            netloc = f"{netloc}:{self.port}"
        url = f"{self.scheme}://{netloc}{self.path}"
        if self.query:
            url += f"?{self.query}"
        if self.fragment:
            url += f"#{self.fragment}"
        return url


@dataclass(frozen=True)
class Branch:
    """A ref such as ``refs/heads/main`` or ``refs/remotes/origin/main``."""

    local_repo: LocalRepo | None = field(repr=False, compare=False)
    name: str

    def __str__(self) -> str:
        return self.name

    @property
    def short_name(self) -> str:
        return _REF_NAMESPACE.sub("", self.name, count=1)

    @property
    def is_master(self) -> bool:
        if self.local_repo is not None:
            master_name = self.local_repo.master_branch.short_name
        else:
            master_name = "master"
        return self.short_name == master_name

    @property
    def upstream(self) -> Branch | None:
        if self.local_repo is None:
            return None
        ref = self.local_repo.git_command(
            f"rev-parse --symbolic-full-name {self.short_name}@{{upstream}}"
        )
        if ref:
            return Branch(self.local_repo, ref)
        return None

    @property
    def is_remote(self) -> bool:
        return self.name.startswith("refs/remotes/")

    @property
    def remote_name(self) -> str:
        match = _REMOTE_REF.match(self.name)
        if not match:
            raise ContextError(f"can't get remote name from {self.name!r}")
        return match.group(1)


@dataclass(frozen=True, eq=False)
class Remote:
    """A named git remote; compares equal to its name as a string."""

    local_repo: LocalRepo = field(repr=False)
    name: str

    def __str__(self) -> str:
        return self.name

    def __eq__(self, other: object) -> bool:
        if isinstance(other, str):
            return self.name == other
        if isinstance(other, Remote):
            return self.name == other.name and self.local_repo is other.local_repo
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.name)

    @property
    def project(self) -> Project | None:
        for url in self.urls.values():
            project = Project.from_url(url, self.local_repo)
            if project is not None:
                return project
        return None

    @cached_property
    def urls(self) -> dict[str, GitURL]:
        """Map of connection type (``fetch``/``push``) to parsed URL."""

        urls: dict[str, GitURL] = {}
        output = self.local_repo.git_command("remote -v") or ""
        for line in output.splitlines():
            match = _REMOTE_LINE.match(line)
            if not match:
                continue
            remote, uri, kind = match.groups()
            if remote != self.name or kind in urls:
                continue
            if not _URI_WITH_SCHEME.match(uri):
                scp = _SCP_LIKE.match(uri)
                if not scp:
                    continue
                uri = f"ssh://{scp.group(1)}/{uri[scp.end():]}"
            try:
                urls[kind] = self.uri_parse(uri)
            except ValueError:
                continue
        return urls

    def uri_parse(self, uri: str) -> GitURL:
        url = GitURL.parse(uri)
        ssh_config = self.local_repo.ssh_config
        host = ssh_config.get_value(url.host, "hostname", lambda: url.host)
        user = ssh_config.get_value(url.host, "user", lambda: url.user)
        return url.replace(host=host, user=user)


@dataclass(eq=False)
class Project:
    """Hosted project identity; two projects are equal when ``owner/name`` match."""

    owner: str | None
    name: str
    host: str | None = None
    local_repo: LocalRepo | None = field(default=None, repr=False)
    repo_data: Mapping[str, Any] | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        hosts = self._hosts
        self.name = self.name.replace(" ", "-")
        if not self.host:
            self.host = hosts.default_host
        if self.host.lower() == hosts.ssh_host.lower():
            self.host = self.host[len("ssh."):]

    @classmethod
    def from_url(cls, url: GitURL, local_repo: LocalRepo) -> Project | None:
        known = {host.lower() for host in local_repo.known_hosts}
        if not url.host or url.host.lower() not in known:
            return None
        parts = url.path.split("/", 3)
        if len(parts) < 3 or not parts[1] or not parts[2]:
            return None
        name = re.sub(r"\.git$", "", parts[2])
        return cls(parts[1], name, url.host, local_repo=local_repo)

    @property
    def _hosts(self) -> HubConfig:
        if self.local_repo is not None:
            return self.local_repo.config
        return HubConfig()

    @property
    def name_with_owner(self) -> str:
        return f"{self.owner}/{self.name}"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Project):
            return self.name_with_owner == other.name_with_owner
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.name_with_owner)

    @property
    def is_private(self) -> bool:
        if self.repo_data is not None:
            return bool(self.repo_data["private"])
        return self.host.lower() != self._hosts.main_host.lower()

    def owned_by(self, new_owner: str) -> Project:
        return replace(self, owner=new_owner)

    @property
    def remote(self) -> Remote | None:
        if self.local_repo is None:
            return None
        return next((r for r in self.local_repo.remotes if r.project == self), None)

    def web_url(self, path: str | None = None) -> str:
        project_name = self.name_with_owner
        if project_name.endswith(".wiki"):
            project_name = project_name[: -len(".wiki")]
            if path != "/wiki":
                if path and path.startswith("/commits/"):
                    path = "/_history"
                else:
                    # wiki special pages are prefixed with an underscore
                    path = re.sub(r"\w+", r"_\g<0>", path or "", count=1)
                path = f"/wiki{path}"
        return f"https://{self.host}/{project_name}{path or ''}"

    def git_url(self, *, https: bool = False, private: bool = False) -> str:
        if https:
            prefix = f"https://{self.host}/"
        elif private or self.is_private:
            prefix = f"git@{self.host}:"
        else:
            prefix = f"git://{self.host}/"
        return f"{prefix}{self.name_with_owner}.git"


@dataclass(frozen=True)
class ResolvedURL:
    """An http(s) URL that points into a known hosted project."""

    url: GitURL
    project: Project

    @classmethod
    def resolve(cls, url: str, local_repo: LocalRepo) -> ResolvedURL | None:
        try:
            parsed = GitURL.parse(url)
        except ValueError:
            return None
        if parsed.scheme not in ("http", "https"):
            return None
        project = Project.from_url(parsed, local_repo)
        if project is None:
            return None
        return cls(parsed, project)

    def __str__(self) -> str:
        return str(self.url)

    @property
    def host(self) -> str | None:
        return self.url.host

    @property
    def path(self) -> str:
        return self.url.path

    @property
    def project_name(self) -> str:
        return self.project.name

    @property
    def project_owner(self) -> str | None:
        return self.project.owner

    @property
    def project_path(self) -> str | None:
        """Segment of the path after ``/owner/name/``."""

        parts = self.url.path.split("/", 3)
        if len(parts) < 4:
            return None
        return parts[3]

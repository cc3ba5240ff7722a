"""Lookup of host aliases in the SSH client configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable

import paramiko

CONFIG_FILES = ("~/.ssh/config", "/etc/ssh_config", "/etc/ssh/ssh_config")


class SshConfig:
    """Answers ``hostname``/``user`` style queries for a host alias.

    The files are read in order into one ``paramiko.SSHConfig``; as with ssh
    itself the first value obtained for a key wins. Missing files are skipped.
    """

    def __init__(self, files: Iterable[str | Path] = CONFIG_FILES):
        self._config = paramiko.SSHConfig()
        for path in files:
            path = Path(path).expanduser()
            if path.is_file():
                with path.open() as handle:
                    self._config.parse(handle)

    def get_value(self, host: str | None, key: str, fallback: Callable[[], str | None]) -> str | None:
        if host:
            key = key.lower()
            value = self._config.lookup(host).get(key)
            # paramiko reports the host itself when no HostName applies
            if value is not None and not (key == "hostname" and value == host):
                return value
        return fallback()

"""The argument list handed to git, plus the chain of extra steps around it."""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Sequence, Union

from .config import load_config
from .exceptions import InvalidStepError


class OriginalMarker:
    """Slot in the chain where the user's own git command runs."""

    _instance: OriginalMarker | None = None

    def __new__(cls) -> OriginalMarker:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ORIGINAL"


ORIGINAL = OriginalMarker()


@dataclass(frozen=True)
class Subprocess:
    """An external command, given as a complete argv."""

    argv: tuple[str, ...]

    def __str__(self) -> str:
        return " ".join(_quote_argument(arg) for arg in self.argv)


@dataclass(frozen=True)
class Callback:
    """A zero-argument function run in-process between commands."""

    func: Callable[[], Any]

    def __call__(self) -> Any:
        return self.func()

    def __str__(self) -> str:
        return f"<callback {getattr(self.func, '__qualname__', repr(self.func))}>"


Step = Union[Subprocess, Callback, OriginalMarker]


def _quote_argument(arg: str) -> str:
    # only meant for display; not a full shell quote
    if " " in arg or not arg:
        return f"'{arg}'"
    return arg


class ArgumentList:
    """Tokens of a git invocation and the chain of steps that will run.

    args = ArgumentList(["remote", "add", "-f", "tekkub"])
    args.words() == ["remote", "add", "tekkub"]
    args.flags() == ["-f"]
    """

    def __init__(self, tokens: Iterable[str], executable: str | Sequence[str] | None = None):
        self._tokens = list(tokens)
        self._original = list(self._tokens)
        if executable is None:
            executable = load_config().git_executable
        self.executable: list[str] = [executable] if isinstance(executable, str) else list(executable)
        self._skip = False
        self._noop = False
        self._chain: list[Step] = [ORIGINAL]

    # sequence access

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[str]:
        return iter(self._tokens)

    def __getitem__(self, index: Any) -> Any:
        return self._tokens[index]

    def __setitem__(self, index: Any, value: Any) -> None:
        self._tokens[index] = value

    def __delitem__(self, index: Any) -> None:
        del self._tokens[index]

    def __contains__(self, token: object) -> bool:
        return token in self._tokens

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ArgumentList):
            return self._tokens == other._tokens
        if isinstance(other, (list, tuple)):
            return self._tokens == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ArgumentList({self._tokens!r})"

    def append(self, token: str) -> None:
        self._tokens.append(token)

    def insert(self, index: int, token: str) -> None:
        self._tokens.insert(index, token)

    def extend(self, tokens: Iterable[str]) -> None:
        self._tokens.extend(tokens)

    def index(self, token: str) -> int:
        return self._tokens.index(token)

    def remove(self, token: str) -> None:
        self._tokens.remove(token)

    def pop(self, index: int = -1) -> str:
        return self._tokens.pop(index)

    def tolist(self) -> list[str]:
        return list(self._tokens)

    # chain building

    def after(self, cmd: Any = None, args: Sequence[str] | None = None) -> None:
        """Queue a step to run after the original command, in call order."""

        self._chain.append(self._normalize_step(cmd, args))

    def before(self, cmd: Any = None, args: Sequence[str] | None = None) -> None:
        """Queue a step immediately ahead of the original command."""

        step = self._normalize_step(cmd, args)
        self._chain.insert(self._chain.index(ORIGINAL), step)

    def skip(self) -> None:
        self._skip = True

    def noop(self) -> None:
        self._noop = True

    @property
    def is_skip(self) -> bool:
        return self._skip

    @property
    def is_noop(self) -> bool:
        return self._noop

    @property
    def chain(self) -> tuple[Step, ...]:
        return tuple(self._chain)

    def is_chained(self) -> bool:
        return len(self._chain) > 1

    def is_changed(self) -> bool:
        """True if steps were added or the tokens differ from the ones given."""

        return self.is_chained() or self._tokens != self._original

    def commands(self) -> list[Subprocess | Callback]:
        commands: list[Subprocess | Callback] = []
        for step in self._chain:
            if isinstance(step, OriginalMarker):
                commands.append(Subprocess(tuple(self.to_exec())))
            else:
                commands.append(step)
        return commands

    def to_exec(self, tokens: Iterable[str] | None = None) -> list[str]:
        if tokens is None:
            tokens = self._tokens
        return [*self.executable, *tokens]

    def add_exec_flags(self, flags: Iterable[str]) -> None:
        self.executable = [*self.executable, *flags]

    # introspection

    def words(self) -> list[str]:
        return [arg for arg in self._tokens if not arg.startswith("-")]

    def flags(self) -> list[str]:
        words = set(self.words())
        return [arg for arg in self._tokens if arg not in words]

    def has_flag(self, *names: str) -> bool:
        return any(
            arg == name or arg.startswith(f"{name}=")
            for arg in self._tokens
            for name in names
        )

    def _normalize_step(self, cmd: Any, args: Sequence[str] | None) -> Subprocess | Callback:
        if isinstance(cmd, (Subprocess, Callback)):
            return cmd
        if callable(cmd):
            return Callback(cmd)
        if args is not None:
            if not cmd:
                raise InvalidStepError("A command name is required when arguments are given")
            return Subprocess((cmd, *args))
        if isinstance(cmd, (list, tuple)):
            return Subprocess(tuple(self.to_exec(cmd)))
        if isinstance(cmd, str):
            argv = shlex.split(cmd)
            if argv:
                return Subprocess(tuple(argv))
        raise InvalidStepError("command or callback required")

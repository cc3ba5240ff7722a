"""Dispatch of a git invocation to the augmentation hook registered for it."""

from __future__ import annotations

import logging
import shlex
from typing import Callable

from .args import ArgumentList
from .context import Context

logger = logging.getLogger(__name__)

Hook = Callable[[ArgumentList, Context], None]

# leading options that git accepts before the subcommand
GLOBAL_FLAGS = frozenset(
    [
        "--noop",
        "-c",
        "-C",
        "-p",
        "--paginate",
        "--no-pager",
        "--no-replace-objects",
        "--literal-pathspecs",
        "--bare",
        "--version",
        "--help",
    ]
)
GLOBAL_FLAG_PREFIXES = ("--exec-path=", "--git-dir=", "--work-tree=", "--namespace=")
PAGER_FLAGS = frozenset(["-p", "--paginate", "--no-pager"])


class Registry:
    """Maps git subcommand names to hooks that reshape the invocation."""

    def __init__(self) -> None:
        self._hooks: dict[str, Hook] = {}

    def register(self, name: str) -> Callable[[Hook], Hook]:
        def decorator(hook: Hook) -> Hook:
            self._hooks[name] = hook
            return hook

        return decorator

    def __contains__(self, name: object) -> bool:
        return name in self._hooks

    def run(self, args: ArgumentList, context: Context) -> None:
        slurp_global_flags(args, context)
        if not len(args):
            args.append("help")

        name = args[0]
        expanded = self.expand_alias(name, context)
        if expanded:
            name = expanded[0]

        hook = self._hooks.get(name)
        if hook is None:
            return
        if expanded:
            del args[0]
            for position, token in enumerate(expanded):
                args.insert(position, token)
        logger.debug("Augmenting `%s`", name)
        hook(args, context)

    def expand_alias(self, name: str, context: Context) -> list[str] | None:
        """Words of a git alias for ``name``; shell aliases (``!cmd``) are left alone."""

        if name in self._hooks:
            return None
        expanded = context.alias_for(name)
        if not expanded or expanded.startswith("!"):
            return None
        return shlex.split(expanded)


def slurp_global_flags(args: ArgumentList, context: Context) -> None:
    """Move git's leading global options from the tokens onto the executable."""

    shared: list[str] = []
    local: list[str] = []
    while len(args) and (args[0] in GLOBAL_FLAGS or args[0].startswith(GLOBAL_FLAG_PREFIXES)):
        flag = args.pop(0)
        if flag == "--noop":
            args.noop()
        elif flag in ("--version", "--help"):
            args.insert(0, flag[2:])
            break
        elif flag in ("-c", "-C"):
            shared.append(flag)
            if len(args):
                shared.append(args.pop(0))
        elif flag in PAGER_FLAGS:
            local.append(flag)
        else:
            shared.append(flag)
    # plumbing reads must see the same -c/-C/--git-dir options as the command
    context.reader.add_exec_flags(shared)
    args.add_exec_flags(shared)
    args.add_exec_flags(local)


registry = Registry()

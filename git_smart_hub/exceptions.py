"""Custom exception hierarchy for git-smart-hub."""


class HubError(Exception):
    """Base error for all custom exceptions."""

    exit_code = 1


class ContextError(HubError):
    """Raised when a repository fact cannot be derived."""


class FatalError(ContextError):
    """Raised when a lookup requires a git repository and there is none."""


class InvalidStepError(HubError, ValueError):
    """Raised when a chain step is built without a command or callback."""


class CommandNotFoundError(HubError):
    """Raised when a chain step names a program that cannot be found."""

    exit_code = 127

    def __init__(self, program: str):
        super().__init__(f"Command not found: {program}")
        self.program = program

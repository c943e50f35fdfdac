"""Exceptions raised by the relay and its collaborators."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ExitOutcome

# Reserved for failures of the helper itself, never the wrapped command's code.
RELAY_FAILURE_EXIT_CODE = 125


class RelayError(Exception):
    """Base class for failures of the relay mechanism."""

    pass


class CommandLineError(RelayError):
    """The target command line could not be parsed."""

    pass


class StartupError(RelayError):
    """The target executable could not be started."""

    def __init__(self, command: str, reason: str):
        super().__init__(f"Cannot start {command}: {reason}")
        self.command = command
        self.reason = reason


class CopyError(RelayError):
    """A relay link failed while copying.

    Raised only after the child has been waited on, so ``outcome`` holds its
    exit code.
    """

    def __init__(self, link: str, cause: BaseException, outcome: ExitOutcome | None = None):
        super().__init__(f"Relay of {link} failed: {cause}")
        self.link = link
        self.cause = cause
        self.outcome = outcome


__all__ = [
    "CommandLineError",
    "CopyError",
    "RELAY_FAILURE_EXIT_CODE",
    "RelayError",
    "StartupError",
]

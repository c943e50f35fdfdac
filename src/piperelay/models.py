"""Result models shared by the relay and the CLI."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ExitOutcome(BaseModel):
    """Exit code of the relayed child, captured once."""

    model_config = ConfigDict(frozen=True)

    returncode: int

    @property
    def exit_status(self) -> int:
        """Status for the helper's own exit.

        A child killed by signal N reports ``-N``; shells expose that as
        ``128 + N``.
        """
        if self.returncode < 0:
            return 128 - self.returncode
        return self.returncode


__all__ = ["ExitOutcome"]

"""Relay a child's standard streams to and from the parent's.

Shutdown order matters:
1. Start the child; input is piped only if the parent's input is redirected
2. Copy input, output and error concurrently
3. Wait for the input copy, then close the child's input so it sees EOF
4. Wait for the output and error copies to drain
5. Close the child's output and error
6. Wait for the child and report its exit code

Closing input before waiting on output keeps read-until-EOF children from
deadlocking. Draining output before waiting on the child keeps the last
buffered chunk from being lost.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import IO, Optional

from .cmdline import CommandLine
from .copier import DEFAULT_BUFFER_SIZE, copy_stream_removing_eof_marker
from .errors import CopyError
from .models import ExitOutcome
from .process_utils import ChildProcess

logger = logging.getLogger(__name__)

Launcher = Callable[..., ChildProcess]


@dataclass
class RelayLink:
    """One direction of the relay: source endpoint to destination endpoint."""

    name: str
    source: IO[bytes]
    destination: IO[bytes]

    def copy(self, buffer_size: int = DEFAULT_BUFFER_SIZE) -> int:
        copied = copy_stream_removing_eof_marker(self.source, self.destination, buffer_size)
        logger.debug("%s link finished after %d bytes", self.name, copied)
        return copied


class PipedProcess:
    """Runs a command with its three standard streams relayed.

    The parent's streams are borrowed: the relay never opens or closes them.
    """

    def __init__(
        self,
        command: CommandLine,
        stdin: Optional[IO[bytes]],
        stdout: IO[bytes],
        stderr: IO[bytes],
        *,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        launcher: Optional[Launcher] = None,
    ):
        self.command = command
        self.buffer_size = buffer_size
        self._outer_stdin = stdin
        self._outer_stdout = stdout
        self._outer_stderr = stderr
        self._launcher = launcher or ChildProcess.start
        self.outcome: Optional[ExitOutcome] = None

    def run(self) -> ExitOutcome:
        """Relay until the child has exited and every stream is drained.

        Raises:
            StartupError: If the command could not be started
            CopyError: If a link failed; raised after the child was waited on
        """
        child = self._launcher(self.command, redirect_input=self._outer_stdin is not None)

        input_link = None
        if self._outer_stdin is not None and child.input is not None:
            input_link = RelayLink("stdin", self._outer_stdin, child.input)
        output_link = RelayLink("stdout", child.output, self._outer_stdout)
        error_link = RelayLink("stderr", child.error, self._outer_stderr)

        failures: list[CopyError] = []
        workers = 3 if input_link is not None else 2

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="piperelay") as pool:
            input_future = None
            if input_link is not None:
                input_future = pool.submit(self._copy_input, input_link)
            drains: dict[Future[int], tuple[RelayLink, Callable[[], None]]] = {
                pool.submit(output_link.copy, self.buffer_size): (output_link, child.close_output),
                pool.submit(error_link.copy, self.buffer_size): (error_link, child.close_error),
            }

            if input_future is not None:
                self._collect(input_future, "stdin", failures)
                child.close_input()

            for future in as_completed(drains):
                link, close = drains[future]
                if not self._collect(future, link.name, failures):
                    # Nobody drains this pipe any more; let the child see it closed
                    close()

            child.close_output()
            child.close_error()
            returncode = child.wait()

        self.outcome = ExitOutcome(returncode=returncode)
        if failures:
            failure = failures[0]
            failure.outcome = self.outcome
            raise failure
        return self.outcome

    def _copy_input(self, link: RelayLink) -> int:
        try:
            return link.copy(self.buffer_size)
        except BrokenPipeError:
            # The child stopped reading its input; nothing left to deliver
            logger.debug("Child closed its input early")
            return 0

    @staticmethod
    def _collect(future: Future[int], name: str, failures: list[CopyError]) -> bool:
        error = future.exception()
        if error is None:
            return True
        logger.debug("%s link failed: %s", name, error)
        failures.append(CopyError(name, error))
        return False


__all__ = ["PipedProcess", "RelayLink"]

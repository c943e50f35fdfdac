"""The helper's own standard streams.

Input is only relayed when it is redirected from a file or pipe. An
interactive console is left to the child, which inherits it directly.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import IO, Any, Optional


@dataclass(frozen=True)
class StandardStreams:
    """Binary standard streams of the parent process."""

    stdin: Optional[IO[bytes]]
    stdout: IO[bytes]
    stderr: IO[bytes]


def _binary(stream: Any) -> Any:
    """Return the byte layer under a text stream, or the stream itself."""
    return getattr(stream, "buffer", stream)


def input_is_redirected(stream: Any) -> bool:
    """Return True if ``stream`` is readable input that is not a terminal."""
    if stream is None or getattr(stream, "closed", False):
        return False
    try:
        return not stream.isatty()
    except (AttributeError, OSError, ValueError):
        return False


def standard_streams(
    stdin: Any = None,
    stdout: Any = None,
    stderr: Any = None,
) -> StandardStreams:
    """Resolve the streams to relay, defaulting to this process's own.

    Args:
        stdin: Input stream (default: ``sys.stdin``); dropped unless redirected
        stdout: Output stream (default: ``sys.stdout``)
        stderr: Error stream (default: ``sys.stderr``)

    A missing output or error stream is replaced by the null device, so the
    child's output is discarded rather than failing the relay.
    """
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout
    stderr = sys.stderr if stderr is None else stderr

    # Without a console (pythonw, services) there is nowhere to relay to
    if stdout is None:
        stdout = open(os.devnull, "wb")
    if stderr is None:
        stderr = open(os.devnull, "wb")

    # Flush text already buffered above the byte layer
    for stream in (stdout, stderr):
        if hasattr(stream, "buffer"):
            stream.flush()

    return StandardStreams(
        stdin=_binary(stdin) if input_is_redirected(stdin) else None,
        stdout=_binary(stdout),
        stderr=_binary(stderr),
    )


__all__ = ["StandardStreams", "input_is_redirected", "standard_streams"]

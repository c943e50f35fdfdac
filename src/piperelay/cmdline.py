"""Split a target command line into program and argument string.

The helper is placed in front of a real program, so everything after the
helper's own options is the target's command line. The program is the first
token (quotes honoured); the argument string is the remainder, passed on
verbatim.
"""

from __future__ import annotations

import io
import os
import shlex
import subprocess
from collections.abc import Sequence
from typing import NamedTuple

from .errors import CommandLineError


def _default_posix() -> bool:
    return os.name != "nt"


class CommandLine(NamedTuple):
    """Target program and its (unsplit) argument string."""

    program: str
    arguments: str = ""

    def popen_args(self, posix: bool | None = None) -> list[str] | str:
        """Arguments in the form ``subprocess.Popen`` expects on this platform.

        Windows programs parse their own command line, so they get a single
        string. Elsewhere the argument string is tokenized shell-style.
        """
        if posix is None:
            posix = _default_posix()
        if posix:
            return [self.program, *shlex.split(self.arguments)]
        head = subprocess.list2cmdline([self.program])
        return f"{head} {self.arguments}" if self.arguments else head


def join_arguments(args: Sequence[str], posix: bool | None = None) -> str:
    """Quote ``args`` back into one argument string."""
    if posix is None:
        posix = _default_posix()
    if posix:
        return shlex.join(args)
    return subprocess.list2cmdline(args)


def parse_command_line(raw: str, posix: bool | None = None) -> CommandLine:
    """Parse a raw command line into a :class:`CommandLine`.

    Args:
        raw: Command line such as ``'"C:/Tools/fmt.exe" -w 80 in.txt'``
        posix: Use POSIX quoting rules (default: current platform)

    Returns:
        CommandLine with the unquoted program and the verbatim remainder

    Raises:
        CommandLineError: If no program is present or quotes are unbalanced
    """
    if posix is None:
        posix = _default_posix()

    stream = io.StringIO(raw.lstrip())
    lexer = shlex.shlex(stream, posix=posix)
    lexer.whitespace_split = True
    lexer.commenters = ""

    try:
        program = lexer.get_token()
    except ValueError as e:
        raise CommandLineError(f"Invalid command line: {e}") from e

    if not program:
        raise CommandLineError("No command specified")

    if not posix and len(program) >= 2 and program[0] == program[-1] == '"':
        program = program[1:-1]

    # The lexer consumed the whitespace that ended the program token
    remainder = raw.lstrip()[stream.tell():]
    return CommandLine(program=program, arguments=remainder.strip())


def from_argv(argv: Sequence[str], posix: bool | None = None) -> CommandLine:
    """Build a :class:`CommandLine` from an already-split argv."""
    if not argv:
        raise CommandLineError("No command specified")
    program = argv[0]
    if not program.strip():
        raise CommandLineError("Command cannot be empty or whitespace")
    return CommandLine(program=program, arguments=join_arguments(argv[1:], posix))


__all__ = ["CommandLine", "from_argv", "join_arguments", "parse_command_line"]

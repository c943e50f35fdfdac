"""piperelay: run a program with its standard streams relayed, minus a trailing EOF marker."""

from .cmdline import CommandLine, from_argv, parse_command_line
from .copier import MARKER_BYTE, copy_stream_removing_eof_marker
from .errors import CommandLineError, CopyError, RelayError, StartupError
from .models import ExitOutcome
from .relay import PipedProcess

__all__ = [
    "__version__",
    "CommandLine",
    "CommandLineError",
    "CopyError",
    "ExitOutcome",
    "MARKER_BYTE",
    "PipedProcess",
    "RelayError",
    "StartupError",
    "copy_stream_removing_eof_marker",
    "from_argv",
    "parse_command_line",
]

__version__ = "0.1.0"

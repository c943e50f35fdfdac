"""piperelay CLI entry point."""

import sys

import click
from pydantic import ValidationError

from .. import __version__
from ..cmdline import from_argv, parse_command_line
from ..config import configure_logging, resolve_config
from ..context import standard_streams
from ..errors import RELAY_FAILURE_EXIT_CODE, RelayError
from ..relay import PipedProcess

_VERBOSITY = {1: "INFO", 2: "DEBUG"}


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(RELAY_FAILURE_EXIT_CODE)


class RelayCommand(click.Command):
    """Command whose own usage errors exit with the relay failure code.

    click exits with 2 on bad options, which a wrapped program may use too.
    """

    def main(self, *args, **kwargs):
        kwargs["standalone_mode"] = False
        try:
            return super().main(*args, **kwargs)
        except click.ClickException as e:
            _fail(e.format_message())
        except click.Abort:
            _fail("Aborted")


@click.command(
    cls=RelayCommand,
    context_settings=dict(
        ignore_unknown_options=True,
        allow_interspersed_args=False,
        help_option_names=["-h", "--help"],
    )
)
@click.option(
    "--command-line",
    "raw_command_line",
    metavar="TEXT",
    help="Target command line as one string (program followed by its arguments).",
)
@click.option(
    "--buffer-size",
    type=click.IntRange(min=1),
    help="Bytes per read on each stream (default 8192, or $PIPERELAY_BUFFER_SIZE).",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    help="Write diagnostics here instead of stderr (or $PIPERELAY_LOG_FILE).",
)
@click.option("-v", "--verbose", count=True, help="Log relay activity (-vv for debug).")
@click.version_option(__version__, prog_name="piperelay")
@click.argument("command", nargs=-1, type=click.UNPROCESSED)
def cli(raw_command_line, buffer_size, log_file, verbose, command):
    """Run COMMAND with its standard streams relayed through this process.

    Output and error are copied back unchanged except that a trailing
    end-of-file marker byte (0x1A) is dropped. Input is relayed the same way
    when it is redirected; an interactive console is passed straight through.
    The exit code is COMMAND's own.

    \b
    Examples:
        piperelay sort -r names.txt
        piperelay --command-line '"/opt/tools/fmt" -w 72'
        type notes.txt | piperelay --buffer-size 65536 -- wc -l

    piperelay exits with 125 when it cannot start or relay COMMAND.
    """
    try:
        config = resolve_config(
            buffer_size=buffer_size,
            log_level=_VERBOSITY.get(min(verbose, 2)) if verbose else None,
            log_file=log_file,
        )
    except ValidationError as e:
        _fail(f"Invalid configuration: {e.errors()[0]['msg']}")

    try:
        configure_logging(config.log_level, config.log_file)
    except OSError as e:
        _fail(f"Cannot open log file: {e}")

    try:
        if raw_command_line is not None:
            if command:
                _fail("Give either --command-line or COMMAND, not both")
            target = parse_command_line(raw_command_line)
        else:
            target = from_argv(command)
    except RelayError as e:
        _fail(str(e))

    streams = standard_streams()
    relay = PipedProcess(
        target,
        streams.stdin,
        streams.stdout,
        streams.stderr,
        buffer_size=config.buffer_size,
    )

    try:
        outcome = relay.run()
    except RelayError as e:
        _fail(str(e))

    sys.exit(outcome.exit_status)


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()

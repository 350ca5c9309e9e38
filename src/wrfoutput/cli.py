"""CLI entry point for wrfoutput."""

import argparse
import logging
import sys
from pathlib import Path

from wrfoutput import __version__

# A live WRF run can take several minutes of wall time between two
# output files.
CLI_TIMEOUT = 600.0


def _setup_logging(verbose: bool, no_color: bool):
    from rich.console import Console
    from rich.logging import RichHandler

    handler = RichHandler(
        console=Console(stderr=True, no_color=no_color),
        show_path=False,
    )
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
    )


def _open_source(log_path):
    if log_path is None:
        return sys.stdin, None
    f = open(log_path, "r", errors="replace")
    return f, f.close


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="wrfoutput",
        description="List the output files written by a WRF run, reading its rsl.out log",
    )
    parser.add_argument(
        "log_path",
        nargs="?",
        type=Path,
        default=None,
        help="Path to the WRF rsl.out.0000 log (default: read stdin)",
    )
    parser.add_argument(
        "-t", "--timeout",
        type=float,
        default=CLI_TIMEOUT,
        help=f"Seconds without new output files before the run is considered stalled (default: {CLI_TIMEOUT:g})",
    )
    parser.add_argument(
        "--table",
        action="store_true",
        help="Render a table instead of JSON lines",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show detailed parsing progress",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored terminal output",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    args = parser.parse_args(argv)
    if args.timeout <= 0:
        parser.error("--timeout must be positive")

    _setup_logging(args.verbose, args.no_color)

    from wrfoutput.analyzer import parse
    from wrfoutput.errors import WrfOutputError

    try:
        source, on_close = _open_source(args.log_path)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    stream = parse(source, timeout=args.timeout, on_close=on_close)

    if args.table:
        from wrfoutput.report.terminal import render_records
        if not render_records(stream, no_color=args.no_color):
            sys.exit(1)
        return

    import json
    from wrfoutput.report.json_report import RecordEncoder

    try:
        for record in stream.records():
            print(json.dumps(record, cls=RecordEncoder), flush=True)
    except WrfOutputError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

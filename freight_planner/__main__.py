"""Interactive freight delivery planner.

Reads line commands (see ``commands.HELP_TEXT``) from stdin or a script file,
applies them to one engine and prints the event log whenever ``X`` is given.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, TextIO

from .commands import HELP_TEXT, CommandError, execute, parse_command
from .engine import FreightEngine
from .errors import FreightError


def main() -> None:
    args = parse_args()
    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose > 1 else logging.INFO,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )

    engine = FreightEngine()
    if args.script is None:
        print(HELP_TEXT)
        run_session(engine, sys.stdin, echo=args.echo)
        return

    with args.script.open(encoding="utf-8") as handle:
        run_session(engine, handle, echo=args.echo)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Plan train freight deliveries")
    parser.add_argument(
        "--script",
        type=Path,
        default=None,
        help="File of commands to run instead of reading stdin",
    )
    parser.add_argument(
        "--echo",
        action="store_true",
        help="Print each command before its output",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log scheduling decisions to stderr (-vv for every move)",
    )
    args = parser.parse_args(argv)
    if args.script is not None and not args.script.is_file():
        parser.error(f"--script {args.script} not found")
    return args


def run_session(engine: FreightEngine, lines: Iterable[str], echo: bool = False, out: TextIO = None) -> None:
    """Apply every line to ``engine``; a bad line is reported and the session goes on."""

    out = out or sys.stdout
    for line in lines:
        if echo:
            print(f"> {line.rstrip()}", file=out)
        try:
            command = parse_command(line)
            output = execute(engine, command)
        except (CommandError, FreightError) as err:
            print(f"{type(err).__name__}: {err}", file=out)
            continue
        for text in output:
            print(text, file=out)


if __name__ == "__main__":
    main()

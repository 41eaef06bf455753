"""Line commands that declare a freight network, and rendering of the event log."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from .engine import FreightEngine
from .models import Event

NODE = "N"
EDGE = "E"
TRAIN = "T"
PACKAGE = "P"
DELIVER = "X"
CLEAR = "C"
HELP = "?"

HELP_TEXT = "\n".join(
    [
        "Select options below",
        "[N] Node input [ ex: N,A where A=name]",
        "[E] Edge input [ ex: E,E1,A,B,30 where E1=name, A=node1, B=node2, 30=travel time]",
        "[T] Train input [ ex: T,Q1,6,B where Q1=name, 6=Capacity, B=node location]",
        "[P] Package input [ ex: P,K1,5,A,C where K1=name 5=Weight, A=node origin, C=node destination]",
        "[X] deliver packages",
        "[C] Clear data",
        "[_]Any invalid keys will show the options",
    ]
)


class CommandError(ValueError):
    """A line that could not be turned into a command."""


@dataclass(frozen=True)
class Command:
    kind: str
    args: Tuple = ()


def _number(text: str, message: str) -> int:
    if not text.isdecimal():
        raise CommandError(message)
    return int(text)


def parse_command(line: str) -> Command:
    """Parse one input line. Input is case-insensitive: names are upper-cased."""

    text = line.strip().upper()
    if not text:
        return Command(HELP)

    fields = [field.strip() for field in text.split(",")]
    kind = text[0]

    if kind == NODE:
        if len(fields) != 2 or not fields[1]:
            raise CommandError("Invalid node entry")
        return Command(NODE, (fields[1],))

    if kind == EDGE:
        if len(fields) != 5 or not fields[1]:
            raise CommandError("Invalid edge entry")
        minutes = _number(fields[4], "Invalid travel time")
        return Command(EDGE, (fields[1], fields[2], fields[3], minutes))

    if kind == TRAIN:
        if len(fields) != 4 or not fields[1]:
            raise CommandError("Invalid train entry")
        capacity = _number(fields[2], "Invalid capacity")
        return Command(TRAIN, (fields[1], capacity, fields[3]))

    if kind == PACKAGE:
        if len(fields) != 5 or not fields[1]:
            raise CommandError("Invalid package entry")
        weight = _number(fields[2], "Invalid weight")
        return Command(PACKAGE, (fields[1], weight, fields[3], fields[4]))

    if kind == DELIVER:
        return Command(DELIVER)
    if kind == CLEAR:
        return Command(CLEAR)
    return Command(HELP)


def execute(engine: FreightEngine, command: Command) -> List[str]:
    """Apply a command to the engine and return the lines to show the user.

    Engine errors propagate; the caller decides how to report them.
    """

    if command.kind == NODE:
        engine.add_node(*command.args)
        return []
    if command.kind == EDGE:
        engine.add_route(*command.args)
        return []
    if command.kind == TRAIN:
        engine.add_vehicle(*command.args)
        return []
    if command.kind == PACKAGE:
        engine.add_package(*command.args)
        return []
    if command.kind == DELIVER:
        events = engine.run()
        return render_log(events) + [format_summary(events.makespan)]
    if command.kind == CLEAR:
        engine.reset()
        return ["Cleared"]
    return [HELP_TEXT]


def _names(cargo: Iterable[str]) -> str:
    return "[" + ", ".join(cargo) + "]"


def format_event(event: Event) -> str:
    return (
        f"W={event.timestamp}, T={event.vehicle}, N1={event.from_node}, "
        f"P1={_names(event.cargo_before)}, N2={event.to_node}, P2={_names(event.cargo_after)}"
    )


def render_log(events: Iterable[Event]) -> List[str]:
    return [format_event(event) for event in events]


def format_summary(minutes: int) -> str:
    return f"completed delivery in: {minutes} minutes"

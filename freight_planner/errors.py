"""Errors raised while declaring a freight network or running a schedule."""


class FreightError(Exception):
    """Base class for every error surfaced by the engine."""


class UnknownNode(FreightError):
    def __init__(self, node: str, role: str = "Node") -> None:
        super().__init__(f"{role} '{node}' doesn't exist")
        self.node = node


class DuplicateName(FreightError):
    def __init__(self, kind: str, name: str) -> None:
        super().__init__(f"{kind} '{name}' already existing")
        self.kind = kind
        self.name = name


class InvalidValue(FreightError, ValueError):
    pass


class Unreachable(FreightError):
    def __init__(self, origin: str, destination: str, detail: str = "") -> None:
        msg = f"No path from '{origin}' to '{destination}'"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)
        self.origin = origin
        self.destination = destination


class CapacityExceeded(FreightError):
    def __init__(self, package: str, weight: int, max_capacity: int) -> None:
        super().__init__(
            f"Package '{package}' weighs {weight} but the largest vehicle carries {max_capacity}"
        )
        self.package = package
        self.weight = weight
        self.max_capacity = max_capacity


class NoFeasibleAssignment(FreightError):
    def __init__(self, waiting, at: int = 0) -> None:
        names = ", ".join(sorted(waiting))
        super().__init__(f"No idle vehicle can take waiting packages [{names}] at W={at}")
        self.waiting = sorted(waiting)
        self.at = at

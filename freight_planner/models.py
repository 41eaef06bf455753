"""Core entities of the freight network: routes, vehicles, packages and events."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class VehicleStatus(str, Enum):
    IDLE = "idle"
    EN_ROUTE = "en_route"


class PackageStatus(str, Enum):
    WAITING = "waiting"
    LOADED = "loaded"
    DELIVERED = "delivered"


@dataclass(frozen=True)
class Route:
    name: str
    node_a: str
    node_b: str
    travel_time: int

    def other_end(self, node: str) -> str:
        return self.node_b if node == self.node_a else self.node_a


@dataclass(frozen=True)
class Hop:
    """One route segment of a planned path, ending at ``node``."""

    route: str
    node: str
    travel_time: int


@dataclass
class Package:
    name: str
    weight: int
    origin: str
    destination: str

    status: PackageStatus = PackageStatus.WAITING
    assigned_to: Optional[str] = None   # vehicle whose manifest holds it
    carrier: Optional[str] = None       # vehicle it is (or was) aboard
    picked_up_at: Optional[int] = None
    delivered_at: Optional[int] = None

    @property
    def is_waiting(self) -> bool:
        return self.status is PackageStatus.WAITING

    @property
    def is_delivered(self) -> bool:
        return self.status is PackageStatus.DELIVERED


@dataclass
class Vehicle:
    name: str
    capacity: int
    location: str

    status: VehicleStatus = VehicleStatus.IDLE
    # Package names currently aboard, kept sorted.
    cargo: List[str] = field(default_factory=list)
    cargo_weight: int = 0
    # Packages committed to the active trip (aboard or still to be picked up).
    manifest: List[str] = field(default_factory=list)
    path: List[Hop] = field(default_factory=list)

    trips: int = 0
    busy_time: int = 0

    @property
    def free_capacity(self) -> int:
        return self.capacity - self.cargo_weight

    @property
    def is_idle(self) -> bool:
        return self.status is VehicleStatus.IDLE

    def remaining_nodes(self) -> List[str]:
        return [hop.node for hop in self.path]


@dataclass(frozen=True)
class Event:
    """A vehicle handling a node at ``timestamp``.

    ``cargo_before`` is what was aboard when the vehicle reached ``from_node``,
    ``cargo_after`` is what is aboard once drop-offs and pickups there are done,
    i.e. what it carries toward ``to_node``. ``to_node == from_node`` when the
    vehicle's trip ends at that node.
    """

    timestamp: int
    vehicle: str
    from_node: str
    to_node: str
    cargo_before: Tuple[str, ...]
    cargo_after: Tuple[str, ...]

    @property
    def dropped(self) -> Tuple[str, ...]:
        return tuple(p for p in self.cargo_before if p not in self.cargo_after)

    @property
    def picked_up(self) -> Tuple[str, ...]:
        return tuple(p for p in self.cargo_after if p not in self.cargo_before)

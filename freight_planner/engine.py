"""Public entry point: declare a freight network, then run the delivery schedule."""

from __future__ import annotations

import logging
from typing import Dict, Tuple

from .dispatch import DispatchScheduler
from .errors import DuplicateName, FreightError, InvalidValue, UnknownNode
from .event_log import EventLog
from .models import Package, Vehicle
from .network import Network

logger = logging.getLogger(__name__)


class FreightEngine:
    """Owns the network, the fleet, the packages and the event log.

    Declarations are kept apart from the live simulation state, so ``run()``
    always starts from vehicles at their start nodes and every package
    waiting at its origin. Running the same declarations twice gives the same
    log.
    """

    def __init__(self) -> None:
        self.network = Network()
        self.vehicles: Dict[str, Vehicle] = {}
        self.packages: Dict[str, Package] = {}
        self.events = EventLog()
        self._fleet: Dict[str, Tuple[int, str]] = {}
        self._cargo: Dict[str, Tuple[int, str, str]] = {}

    # ----------------- declarations -----------------
    def add_node(self, name: str) -> "FreightEngine":
        self.network.add_node(name)
        return self

    def add_route(self, name: str, node_a: str, node_b: str, travel_time: int) -> "FreightEngine":
        self.network.add_route(name, node_a, node_b, travel_time)
        return self

    def add_vehicle(self, name: str, capacity: int, start_node: str) -> "FreightEngine":
        if not name:
            raise InvalidValue("Vehicle name must not be empty")
        if name in self._fleet:
            raise DuplicateName("Train", name)
        if not self.network.has_node(start_node):
            raise UnknownNode(start_node)
        if capacity <= 0:
            raise InvalidValue(f"Train '{name}' capacity must be positive, got {capacity}")

        self._fleet[name] = (capacity, start_node)
        self.vehicles[name] = Vehicle(name, capacity, start_node)
        return self

    def add_package(self, name: str, weight: int, origin: str, destination: str) -> "FreightEngine":
        if not name:
            raise InvalidValue("Package name must not be empty")
        if name in self._cargo:
            raise DuplicateName("Package", name)
        for node in (origin, destination):
            if not self.network.has_node(node):
                raise UnknownNode(node)
        if weight <= 0:
            raise InvalidValue(f"Package '{name}' weight must be positive, got {weight}")

        self._cargo[name] = (weight, origin, destination)
        self.packages[name] = Package(name, weight, origin, destination)
        return self

    # ----------------- execution -----------------
    def run(self) -> EventLog:
        """Deliver every package and return the event log.

        On failure the error propagates and the events recorded so far stay
        available through ``self.events``.
        """
        self._restore()
        logger.info(
            "Delivering %d package(s) with %d vehicle(s) over %d node(s)",
            len(self.packages), len(self.vehicles), len(self.network.nodes()),
        )
        scheduler = DispatchScheduler(self.network, self.vehicles, self.packages, self.events)
        try:
            makespan = scheduler.run()
        except FreightError as err:
            logger.warning("Run halted after %d event(s): %s", len(self.events), err)
            raise
        logger.info("Completed delivery in %d minute(s), %d event(s)", makespan, len(self.events))
        return self.events

    @property
    def makespan(self) -> int:
        return self.events.makespan

    def reset(self) -> None:
        self.network.clear()
        self.vehicles.clear()
        self.packages.clear()
        self.events.clear()
        self._fleet.clear()
        self._cargo.clear()

    def _restore(self) -> None:
        self.events.clear()
        self.vehicles = {
            name: Vehicle(name, capacity, start) for name, (capacity, start) in self._fleet.items()
        }
        self.packages = {
            name: Package(name, weight, origin, destination)
            for name, (weight, origin, destination) in self._cargo.items()
        }

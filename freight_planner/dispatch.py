"""Greedy, deterministic dispatch of idle vehicles to waiting packages.

The scheduler is a discrete-event simulation over an integer minute clock:

* at every time point, vehicles arriving at a node first drop off the cargo
  destined there;
* idle vehicles are then paired with unassigned waiting packages, always
  taking the pairing with the shortest trip to the package's origin (ties go
  to the smaller package name, then the smaller vehicle name);
* finally each vehicle that arrived or was dispatched picks up what it can
  and departs on its next hop, and one Event is written for it.

A dispatched vehicle may also pick up other waiting packages at the nodes it
passes, provided their destination lies further along its path and they do
not eat into the capacity still reserved for its own manifest.
"""

from __future__ import annotations

import heapq
import logging
from typing import Dict, List, Optional, Tuple

import numpy as np

from .errors import CapacityExceeded, NoFeasibleAssignment, Unreachable
from .event_log import EventLog
from .models import Event, Package, PackageStatus, Vehicle, VehicleStatus
from .network import Network
from .path_planner import join_paths

logger = logging.getLogger(__name__)


class DispatchScheduler:
    def __init__(
        self,
        network: Network,
        vehicles: Dict[str, Vehicle],
        packages: Dict[str, Package],
        log: EventLog,
    ) -> None:
        self.network = network
        self.vehicles = vehicles
        self.packages = packages
        self.log = log
        self.now = 0
        self._arrivals: List[Tuple[int, str]] = []
        # The network does not change during a run, so one snapshot serves every selection round.
        self._nodes, self._times = network.travel_times()
        self._index = {node: i for i, node in enumerate(self._nodes)}

    def travel_time(self, origin: str, destination: str) -> float:
        return float(self._times[self._index[origin], self._index[destination]])

    def run(self) -> int:
        """Run until every package is delivered; return the makespan."""
        self._preflight()
        self._deliver_in_place()
        while self._outstanding():
            self._step()
        return self.log.makespan

    # ----------------- validation -----------------
    def _preflight(self) -> None:
        pending = [
            p for p in self._sorted_packages()
            if p.is_waiting and p.origin != p.destination
        ]
        if not pending:
            return
        if not self.vehicles:
            raise NoFeasibleAssignment([p.name for p in pending], self.now)

        max_capacity = max(v.capacity for v in self.vehicles.values())
        for package in pending:
            if package.weight > max_capacity:
                raise CapacityExceeded(package.name, package.weight, max_capacity)

        for package in pending:
            if not np.isfinite(self.travel_time(package.origin, package.destination)):
                raise Unreachable(package.origin, package.destination, f"package '{package.name}'")
            carriers = [v for v in self._sorted_vehicles() if v.capacity >= package.weight]
            if not any(np.isfinite(self.travel_time(v.location, package.origin)) for v in carriers):
                raise Unreachable(
                    carriers[0].location,
                    package.origin,
                    f"no vehicle able to carry '{package.name}' can reach its origin",
                )

    def _deliver_in_place(self) -> None:
        for package in self._sorted_packages():
            if package.is_waiting and package.origin == package.destination:
                package.status = PackageStatus.DELIVERED
                package.delivered_at = self.now
                logger.debug("%s starts at its destination %s", package.name, package.destination)

    # ----------------- simulation -----------------
    def _step(self) -> None:
        if self._arrivals:
            self.now = self._arrivals[0][0]

        # Cargo each handled vehicle had when it reached its current node.
        handled: Dict[str, Tuple[str, ...]] = {}
        while self._arrivals and self._arrivals[0][0] == self.now:
            _, name = heapq.heappop(self._arrivals)
            vehicle = self.vehicles[name]
            handled[name] = tuple(vehicle.cargo)
            self._arrive(vehicle)

        for name in self._dispatch():
            handled.setdefault(name, tuple(self.vehicles[name].cargo))

        for name in sorted(handled):
            self._depart(self.vehicles[name], handled[name])

        if self._outstanding() and not self._arrivals:
            waiting = [p.name for p in self.packages.values() if p.is_waiting]
            raise NoFeasibleAssignment(waiting, self.now)

    def _arrive(self, vehicle: Vehicle) -> None:
        hop = vehicle.path.pop(0)
        vehicle.location = hop.node
        vehicle.busy_time += hop.travel_time
        logger.debug("W=%d %s arrived at %s via %s", self.now, vehicle.name, hop.node, hop.route)
        self._unload(vehicle)
        if not vehicle.path:
            vehicle.status = VehicleStatus.IDLE

    def _depart(self, vehicle: Vehicle, cargo_before: Tuple[str, ...]) -> None:
        self._load(vehicle)
        here = vehicle.location
        to_node = here
        if vehicle.path:
            hop = vehicle.path[0]
            to_node = hop.node
            heapq.heappush(self._arrivals, (self.now + hop.travel_time, vehicle.name))
        self.log.append(
            Event(self.now, vehicle.name, here, to_node, cargo_before, tuple(vehicle.cargo))
        )

    # ----------------- assignment -----------------
    def _dispatch(self) -> List[str]:
        dispatched: List[str] = []
        while True:
            choice = self._select()
            if choice is None:
                return dispatched
            vehicle, package = choice
            self._commit(vehicle, package)
            dispatched.append(vehicle.name)

    def _select(self) -> Optional[Tuple[Vehicle, Package]]:
        idle = [v for v in self._sorted_vehicles() if v.is_idle]
        waiting = [p for p in self._sorted_packages() if p.is_waiting and p.assigned_to is None]

        best_key = None
        best: Optional[Tuple[Vehicle, Package]] = None
        for vehicle in idle:
            for package in waiting:
                if package.weight > vehicle.free_capacity:
                    continue
                to_origin = self.travel_time(vehicle.location, package.origin)
                if not np.isfinite(to_origin):
                    continue
                key = (to_origin, package.name, vehicle.name)
                if best_key is None or key < best_key:
                    best_key = key
                    best = (vehicle, package)
        return best

    def _commit(self, vehicle: Vehicle, package: Package) -> None:
        to_origin = self.network.shortest_path(vehicle.location, package.origin)
        to_destination = self.network.shortest_path(package.origin, package.destination)
        path = join_paths(to_origin, to_destination)

        package.assigned_to = vehicle.name
        vehicle.manifest = [package.name]
        vehicle.path = list(path.hops)
        vehicle.status = VehicleStatus.EN_ROUTE
        vehicle.trips += 1
        logger.debug(
            "W=%d dispatch %s -> %s via %s (%d min)",
            self.now, vehicle.name, package.name, "-".join(path.nodes), path.travel_time,
        )

    # ----------------- cargo handling -----------------
    def _unload(self, vehicle: Vehicle) -> None:
        for name in list(vehicle.cargo):
            package = self.packages[name]
            if package.destination != vehicle.location:
                continue
            vehicle.cargo.remove(name)
            vehicle.cargo_weight -= package.weight
            if name in vehicle.manifest:
                vehicle.manifest.remove(name)
            package.status = PackageStatus.DELIVERED
            package.assigned_to = None
            package.delivered_at = self.now
            logger.debug("W=%d %s delivered %s at %s", self.now, vehicle.name, name, vehicle.location)

    def _load(self, vehicle: Vehicle) -> None:
        here = vehicle.location
        reserved = 0
        for name in list(vehicle.manifest):
            package = self.packages[name]
            if not package.is_waiting:
                continue
            if package.origin == here:
                self._pick_up(vehicle, package)
            else:
                reserved += package.weight

        ahead = set(vehicle.remaining_nodes())
        if not ahead:
            return
        for package in self._sorted_packages():
            if not package.is_waiting or package.assigned_to is not None:
                continue
            if package.origin != here or package.destination not in ahead:
                continue
            if vehicle.cargo_weight + reserved + package.weight > vehicle.capacity:
                continue
            package.assigned_to = vehicle.name
            vehicle.manifest.append(package.name)
            self._pick_up(vehicle, package)

    def _pick_up(self, vehicle: Vehicle, package: Package) -> None:
        package.status = PackageStatus.LOADED
        package.carrier = vehicle.name
        package.picked_up_at = self.now
        vehicle.cargo.append(package.name)
        vehicle.cargo.sort()
        vehicle.cargo_weight += package.weight
        logger.debug("W=%d %s picked up %s at %s", self.now, vehicle.name, package.name, vehicle.location)

    # ----------------- helpers -----------------
    def _outstanding(self) -> bool:
        return any(not p.is_delivered for p in self.packages.values())

    def _sorted_vehicles(self) -> List[Vehicle]:
        return [self.vehicles[name] for name in sorted(self.vehicles)]

    def _sorted_packages(self) -> List[Package]:
        return [self.packages[name] for name in sorted(self.packages)]

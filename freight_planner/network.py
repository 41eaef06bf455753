"""Named locations joined by bidirectional, timed routes."""

from __future__ import annotations

from typing import Dict, List, Tuple

import networkx as nx
import numpy as np

from .errors import DuplicateName, InvalidValue, UnknownNode
from .models import Route
from .path_planner import WEIGHT, Path, shortest_path, travel_time_matrix


class Network:
    """Owns the graph. Edges are keyed by route name so parallel routes coexist."""

    def __init__(self) -> None:
        self.graph = nx.MultiGraph()
        self._routes: Dict[str, Route] = {}

    def __contains__(self, node: str) -> bool:
        return node in self.graph

    def has_node(self, node: str) -> bool:
        return node in self.graph

    def add_node(self, name: str) -> None:
        if not name:
            raise InvalidValue("Node name must not be empty")
        if name in self.graph:
            raise DuplicateName("Node", name)
        self.graph.add_node(name)

    def add_route(self, name: str, node_a: str, node_b: str, travel_time: int) -> Route:
        if not name:
            raise InvalidValue("Route name must not be empty")
        if name in self._routes:
            raise DuplicateName("Route", name)
        if node_a not in self.graph:
            raise UnknownNode(node_a, "Node1")
        if node_b not in self.graph:
            raise UnknownNode(node_b, "Node2")
        if node_a == node_b:
            raise InvalidValue(f"Route '{name}' must join two different nodes")
        if travel_time <= 0:
            raise InvalidValue(f"Route '{name}' travel time must be positive, got {travel_time}")

        route = Route(name, node_a, node_b, travel_time)
        self._routes[name] = route
        self.graph.add_edge(node_a, node_b, key=name, **{WEIGHT: travel_time})
        return route

    def nodes(self) -> List[str]:
        return sorted(self.graph.nodes)

    def routes(self) -> List[Route]:
        return [self._routes[name] for name in sorted(self._routes)]

    def route(self, name: str) -> Route:
        return self._routes[name]

    def neighbours(self, node: str) -> List[str]:
        if node not in self.graph:
            raise UnknownNode(node)
        return sorted(set(self.graph.neighbors(node)))

    def is_reachable(self, origin: str, destination: str) -> bool:
        if origin not in self.graph or destination not in self.graph:
            return False
        return nx.has_path(self.graph, origin, destination)

    def shortest_path(self, origin: str, destination: str) -> Path:
        return shortest_path(self.graph, origin, destination)

    def travel_times(self) -> Tuple[List[str], np.ndarray]:
        nodes = self.nodes()
        return nodes, travel_time_matrix(self.graph, nodes)

    def clear(self) -> None:
        self.graph.clear()
        self._routes.clear()

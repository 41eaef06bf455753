"""Minimum travel-time routing over the freight network graph."""

from __future__ import annotations

import heapq
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

import networkx as nx
import numpy as np

from .errors import UnknownNode, Unreachable
from .models import Hop

WEIGHT = "travel_time"


@dataclass(frozen=True)
class Path:
    origin: str
    destination: str
    travel_time: int
    hops: Tuple[Hop, ...] = ()

    @property
    def nodes(self) -> List[str]:
        return [self.origin] + [hop.node for hop in self.hops]

    @property
    def routes(self) -> List[str]:
        return [hop.route for hop in self.hops]


def shortest_path(graph: nx.MultiGraph, origin: str, destination: str) -> Path:
    """Dijkstra keyed by (travel time, route names).

    Among paths of equal travel time the one whose sequence of route names is
    lexicographically smallest wins, so the answer never depends on insertion
    order. The graph is only read.
    """

    for node in (origin, destination):
        if node not in graph:
            raise UnknownNode(node)
    if origin == destination:
        return Path(origin, destination, 0)

    best: Dict[str, Tuple[int, Tuple[str, ...]]] = {origin: (0, ())}
    heap: List[Tuple[int, Tuple[str, ...], str, Tuple[Hop, ...]]] = [(0, (), origin, ())]
    settled = set()

    while heap:
        cost, names, node, hops = heapq.heappop(heap)
        if node in settled:
            continue
        settled.add(node)
        if node == destination:
            return Path(origin, destination, cost, hops)

        for _, neighbour, route, data in graph.edges(node, keys=True, data=True):
            if neighbour in settled:
                continue
            candidate = (cost + data[WEIGHT], names + (route,))
            if neighbour not in best or candidate < best[neighbour]:
                best[neighbour] = candidate
                hop = Hop(route, neighbour, data[WEIGHT])
                heapq.heappush(heap, (candidate[0], candidate[1], neighbour, hops + (hop,)))

    raise Unreachable(origin, destination)


def join_paths(first: Path, second: Path) -> Path:
    if first.destination != second.origin:
        raise ValueError(
            f"Cannot join path ending at '{first.destination}' with path starting at '{second.origin}'"
        )
    return Path(
        first.origin,
        second.destination,
        first.travel_time + second.travel_time,
        first.hops + second.hops,
    )


def travel_time_matrix(graph: nx.MultiGraph, nodes: Sequence[str]) -> np.ndarray:
    """All-pairs minimum travel times; ``inf`` where no path exists."""

    n_nodes = len(nodes)
    matrix = np.full((n_nodes, n_nodes), np.inf, dtype=float)
    for i, source in enumerate(nodes):
        lengths = nx.single_source_dijkstra_path_length(graph, source, weight=WEIGHT)
        for j, target in enumerate(nodes):
            length = lengths.get(target)
            if length is not None:
                matrix[i, j] = float(length)
    return matrix

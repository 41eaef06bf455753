import math
import unittest

from freight_planner.errors import UnknownNode, Unreachable
from freight_planner.network import Network
from freight_planner.path_planner import Path, join_paths, shortest_path, travel_time_matrix


def build_network(nodes, routes) -> Network:
    network = Network()
    for node in nodes:
        network.add_node(node)
    for route in routes:
        network.add_route(*route)
    return network


class ShortestPathTests(unittest.TestCase):
    def setUp(self) -> None:
        self.network = build_network("ABC", [("E1", "A", "B", 30), ("E2", "B", "C", 10)])

    def test_path_through_intermediate_node(self) -> None:
        path = self.network.shortest_path("A", "C")
        self.assertEqual(path.travel_time, 40)
        self.assertEqual(path.routes, ["E1", "E2"])
        self.assertEqual(path.nodes, ["A", "B", "C"])

    def test_routes_are_traversable_both_ways(self) -> None:
        path = self.network.shortest_path("C", "A")
        self.assertEqual(path.travel_time, 40)
        self.assertEqual(path.nodes, ["C", "B", "A"])

    def test_same_node_is_an_empty_path(self) -> None:
        path = self.network.shortest_path("B", "B")
        self.assertEqual(path, Path("B", "B", 0))
        self.assertEqual(path.nodes, ["B"])

    def test_prefers_faster_path_with_more_hops(self) -> None:
        network = build_network(
            "ABC", [("E1", "A", "B", 5), ("E2", "B", "C", 5), ("E3", "A", "C", 11)]
        )
        self.assertEqual(network.shortest_path("A", "C").routes, ["E1", "E2"])

    def test_equal_time_paths_resolve_by_route_name_sequence(self) -> None:
        network = build_network(
            "ABCD",
            [
                ("X2", "A", "C", 5),
                ("A1", "C", "D", 5),
                ("X1", "A", "B", 5),
                ("Y", "B", "D", 5),
            ],
        )
        path = network.shortest_path("A", "D")
        self.assertEqual(path.travel_time, 10)
        self.assertEqual(path.routes, ["X1", "Y"])

    def test_parallel_routes(self) -> None:
        network = build_network("AB", [("E1", "A", "B", 10), ("E0", "A", "B", 10)])
        self.assertEqual(network.shortest_path("A", "B").routes, ["E0"])

        network.add_route("E9", "A", "B", 3)
        path = network.shortest_path("B", "A")
        self.assertEqual(path.routes, ["E9"])
        self.assertEqual(path.travel_time, 3)

    def test_unreachable(self) -> None:
        self.network.add_node("D")
        with self.assertRaises(Unreachable):
            self.network.shortest_path("A", "D")

    def test_unknown_node(self) -> None:
        with self.assertRaises(UnknownNode):
            shortest_path(self.network.graph, "A", "Z")

    def test_planner_does_not_mutate_graph(self) -> None:
        before = sorted(self.network.graph.edges(keys=True, data=True))
        self.network.shortest_path("A", "C")
        self.assertEqual(sorted(self.network.graph.edges(keys=True, data=True)), before)


class JoinPathTests(unittest.TestCase):
    def test_join(self) -> None:
        network = build_network("ABC", [("E1", "A", "B", 30), ("E2", "B", "C", 10)])
        path = join_paths(network.shortest_path("B", "A"), network.shortest_path("A", "C"))
        self.assertEqual(path.nodes, ["B", "A", "B", "C"])
        self.assertEqual(path.routes, ["E1", "E1", "E2"])
        self.assertEqual(path.travel_time, 70)

    def test_join_requires_shared_node(self) -> None:
        network = build_network("ABC", [("E1", "A", "B", 30), ("E2", "B", "C", 10)])
        with self.assertRaises(ValueError):
            join_paths(network.shortest_path("A", "B"), network.shortest_path("C", "B"))


class TravelTimeMatrixTests(unittest.TestCase):
    def test_matrix(self) -> None:
        network = build_network("ABCD", [("E1", "A", "B", 30), ("E2", "B", "C", 10)])
        nodes, matrix = network.travel_times()
        self.assertEqual(nodes, ["A", "B", "C", "D"])
        self.assertEqual(matrix.shape, (4, 4))
        self.assertEqual(matrix[0, 2], 40.0)
        self.assertEqual(matrix[2, 0], 40.0)
        self.assertEqual(matrix[1, 1], 0.0)
        self.assertTrue(math.isinf(matrix[0, 3]))

    def test_parallel_routes_use_fastest(self) -> None:
        network = build_network("AB", [("E1", "A", "B", 10), ("E2", "A", "B", 4)])
        matrix = travel_time_matrix(network.graph, ["A", "B"])
        self.assertEqual(matrix[0, 1], 4.0)


if __name__ == "__main__":
    unittest.main()

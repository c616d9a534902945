"""Indexed, mutable graph of waypoints connected by airways.

Waypoints live in an arena and are addressed by the integer index returned
when they are added. Indices are append-only and never reused. Removing a
waypoint (only done when an overlay is rolled back) leaves a tombstone, so
every index handed out earlier keeps pointing at the same slot.

Edges are directed. Each source index owns an ordered list of Edge objects;
parallel edges to the same target through different airways are allowed.

The graph does no locking. Callers that share a graph between tasks must
make sure a single writer mutates it at a time.

Typical usage:
    graph = WaypointGraph()
    a = graph.add_waypoint(Waypoint("CARPE", 55.0, -15.0))
    b = graph.add_waypoint(Waypoint("REDBY", 55.0, -14.0))
    graph.add_neighbor(a, b, Neighbor("UN544", 34.4))
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from skyroute.navigation.waypoint import Waypoint

logger = logging.getLogger(__name__)

DIRECT = "DCT"


class GraphError(Exception):
    """Raised when a graph mutation breaks the graph contract."""


@dataclass(frozen=True)
class Neighbor:
    """Edge payload.

    Attributes:
        airway: Airway label, "DCT" for a direct segment
        distance: Segment length in nautical miles, non-negative
    """

    airway: str
    distance: float

    def __post_init__(self) -> None:
        if self.distance < 0:
            raise ValueError(f"Edge distance cannot be negative: {self.distance}")


@dataclass(eq=False)
class Edge:
    """Directed edge stored in the adjacency list of its source.

    Edges compare by identity so that a specific edge can be removed even
    when an equal one (same target and airway) exists.
    """

    target: int
    neighbor: Neighbor


class WaypointGraph:
    """Arena of waypoints with a parallel adjacency table.

    Examples:
        >>> graph = WaypointGraph()
        >>> idx = graph.add_waypoint(Waypoint("CARPE", 55.0, -15.0))
        >>> graph.find_by_waypoint(Waypoint("CARPE", 55.0, -15.0)) == idx
        True
        >>> graph.find_by_waypoint(Waypoint("CARPE", 10.0, 10.0)) is None
        True
    """

    def __init__(self) -> None:
        """Initialize an empty graph."""
        self._waypoints: list[Waypoint] = []
        self._alive: list[bool] = []
        self._edges: list[list[Edge]] = []
        self._in_degree: list[int] = []
        # Overlay-created index -> number of applied overlays referencing it.
        self._overlay_refs: dict[int, int] = {}
        self._by_waypoint: dict[Waypoint, int] = {}
        self._by_ident: dict[str, list[int]] = {}
        self._live_count = 0
        self._edge_count = 0

    def __len__(self) -> int:
        """Number of live (not removed) waypoints."""
        return self._live_count

    @property
    def edge_count(self) -> int:
        """Number of live directed edges."""
        return self._edge_count

    @property
    def capacity(self) -> int:
        """Number of indices handed out so far, tombstones included."""
        return len(self._waypoints)

    def add_waypoint(self, waypoint: Waypoint) -> int:
        """Append a waypoint and return its index.

        No duplicate check is made; call find_by_waypoint() first when the
        waypoint may already exist.

        Args:
            waypoint: Waypoint to append

        Returns:
            Newly assigned index
        """
        index = len(self._waypoints)
        self._waypoints.append(waypoint)
        self._alive.append(True)
        self._edges.append([])
        self._in_degree.append(0)
        # First insertion wins for value lookups.
        self._by_waypoint.setdefault(waypoint, index)
        self._by_ident.setdefault(waypoint.ident, []).append(index)
        self._live_count += 1
        return index

    def find_by_waypoint(self, waypoint: Waypoint) -> int | None:
        """Find the index of a waypoint by identifier and coordinate.

        Returns:
            Index of the existing waypoint, or None if not present
        """
        return self._by_waypoint.get(waypoint)

    def find_or_add(self, waypoint: Waypoint) -> tuple[int, bool]:
        """Resolve a waypoint to an index, appending it if it is missing.

        Returns:
            Tuple of (index, created) where created is True if the waypoint
            was appended by this call
        """
        index = self.find_by_waypoint(waypoint)
        if index is not None:
            return index, False
        return self.add_waypoint(waypoint), True

    def find_by_ident(self, ident: str) -> list[int]:
        """All live indices whose waypoint carries the given identifier."""
        return list(self._by_ident.get(ident, []))

    def find_nearest_by_ident(self, ident: str, lat: float, lon: float) -> int | None:
        """Index of the waypoint with this identifier closest to a coordinate.

        Returns:
            Index of the closest candidate, or None if the identifier is unknown
        """
        candidates = self._by_ident.get(ident)
        if not candidates:
            return None
        reference = Waypoint(ident, lat, lon)
        return min(candidates, key=lambda i: self._waypoints[i].distance_from(reference))

    def waypoint(self, index: int) -> Waypoint:
        """Waypoint stored at an index.

        Raises:
            GraphError: If the index is out of range or has been removed.
        """
        self._check_index(index)
        return self._waypoints[index]

    def contains_index(self, index: int) -> bool:
        """Check whether an index refers to a live waypoint."""
        return 0 <= index < len(self._waypoints) and self._alive[index]

    def add_neighbor(self, from_index: int, to_index: int, neighbor: Neighbor) -> Edge:
        """Append a directed edge.

        No reciprocal edge is added.

        Args:
            from_index: Source waypoint index
            to_index: Target waypoint index
            neighbor: Airway label and distance

        Returns:
            The stored edge, usable as a handle for remove_neighbor()

        Raises:
            GraphError: If either index is invalid.
        """
        self._check_index(from_index)
        self._check_index(to_index)

        edge = Edge(to_index, neighbor)
        self._edges[from_index].append(edge)
        self._in_degree[to_index] += 1
        self._edge_count += 1
        return edge

    def edges_from(self, index: int) -> list[Edge]:
        """Outgoing edges of a waypoint, in insertion order.

        Raises:
            GraphError: If the index is invalid.
        """
        self._check_index(index)
        return list(self._edges[index])

    def neighbors(self, index: int) -> Iterator[tuple[int, Neighbor]]:
        """Iterate (target index, neighbor) pairs of a waypoint."""
        for edge in self.edges_from(index):
            yield edge.target, edge.neighbor

    def edge_count_from(self, index: int) -> int:
        self._check_index(index)
        return len(self._edges[index])

    def edge_count_to(self, index: int) -> int:
        self._check_index(index)
        return self._in_degree[index]

    def remove_neighbor(self, from_index: int, edge: Edge) -> None:
        """Remove one specific edge.

        Raises:
            GraphError: If the edge is not an outgoing edge of from_index.
        """
        self._check_index(from_index)
        edges = self._edges[from_index]
        for i, existing in enumerate(edges):
            if existing is edge:
                del edges[i]
                self._in_degree[edge.target] -= 1
                self._edge_count -= 1
                return
        raise GraphError(f"Edge to {edge.target} not found at waypoint {from_index}")

    def remove_waypoint(self, index: int) -> None:
        """Tombstone a waypoint.

        The slot stays allocated so other indices are unaffected; the
        waypoint just stops resolving through lookups.

        Raises:
            GraphError: If the index is invalid or the waypoint still has edges.
        """
        self._check_index(index)
        if self._edges[index] or self._in_degree[index]:
            raise GraphError(f"Waypoint {index} still has edges and cannot be removed")

        waypoint = self._waypoints[index]
        self._alive[index] = False
        self._live_count -= 1
        self._overlay_refs.pop(index, None)

        if self._by_waypoint.get(waypoint) == index:
            del self._by_waypoint[waypoint]
            # Promote a remaining duplicate, if any, so value lookups keep working.
            for other in self._by_ident.get(waypoint.ident, []):
                if other != index and self._waypoints[other] == waypoint:
                    self._by_waypoint[waypoint] = other
                    break

        same_ident = self._by_ident[waypoint.ident]
        same_ident.remove(index)
        if not same_ident:
            del self._by_ident[waypoint.ident]

        logger.debug("Removed waypoint %s at index %d", waypoint.ident, index)

    def retain_overlay_waypoint(self, index: int, created: bool) -> None:
        """Count one applied overlay referencing a waypoint.

        Only waypoints created by an overlay are counted; waypoints loaded
        from the airway feed are never removed on rollback.

        Args:
            index: Waypoint touched by the overlay
            created: True if the overlay appended the waypoint

        Raises:
            GraphError: If the index is invalid.
        """
        self._check_index(index)
        if created:
            self._overlay_refs[index] = 0
        if index in self._overlay_refs:
            self._overlay_refs[index] += 1

    def release_overlay_waypoint(self, index: int) -> bool:
        """Drop one overlay reference, removing the waypoint after the last one.

        Call after the overlay's edges have been removed.

        Returns:
            True if the waypoint was removed
        """
        refs = self._overlay_refs.get(index)
        if refs is None:
            return False
        if refs > 1:
            self._overlay_refs[index] = refs - 1
            return False

        if self._edges[index] or self._in_degree[index]:
            del self._overlay_refs[index]
            logger.warning(
                "Keeping waypoint %s, edges outside any overlay still use it",
                self._waypoints[index].ident,
            )
            return False

        self.remove_waypoint(index)
        return True

    def indices(self) -> Iterator[int]:
        """Iterate live indices in ascending order."""
        for index, alive in enumerate(self._alive):
            if alive:
                yield index

    def _check_index(self, index: int) -> None:
        if not self.contains_index(index):
            raise GraphError(f"Invalid waypoint index: {index}")

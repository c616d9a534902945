"""Route representation and flight plan text rendering.

A Route is an ordered list of RouteNode. Each node stores the airway and
distance to the next node; the last node has no outgoing segment.

Typical usage:
    route = Route()
    route.add_last_waypoint(carpe)
    route.add_last_waypoint(redby, "UN544")
    route.add_last_waypoint(pikil, "DCT")
    print(route.to_text(show_first=True, show_last=True))
"""

from collections.abc import Iterator
from dataclasses import dataclass

from skyroute.navigation.waypoint import Waypoint
from skyroute.navigation.waypoint_graph import DIRECT


class RouteError(Exception):
    """Raised when a route operation is not valid for the route's content."""


@dataclass
class RouteNode:
    """Waypoint of a route with its outgoing segment.

    Attributes:
        waypoint: Waypoint of this node
        airway_to_next: Airway to the next node, "" on the last node
        distance_to_next: Distance to the next node in nautical miles
    """

    waypoint: Waypoint
    airway_to_next: str = ""
    distance_to_next: float = 0.0


class Route:
    """Ordered sequence of waypoints joined by airway segments.

    Examples:
        >>> route = Route()
        >>> route.add_last_waypoint(Waypoint("CARPE", 55.0, -15.0))
        >>> route.add_last_waypoint(Waypoint("REDBY", 55.0, -14.0), "UN544", 34.4)
        >>> route.total_distance()
        34.4
    """

    def __init__(self, nodes: list[RouteNode] | None = None) -> None:
        """Initialize a route.

        Args:
            nodes: Initial nodes; copied, not shared
        """
        self.nodes: list[RouteNode] = [
            RouteNode(n.waypoint, n.airway_to_next, n.distance_to_next) for n in nodes or []
        ]

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[RouteNode]:
        return iter(self.nodes)

    def __eq__(self, other: object) -> bool:
        """Routes are equal when all segments and the final waypoint match.

        The airway/distance stored on the last node is not significant.
        """
        if not isinstance(other, Route):
            return NotImplemented
        if len(self) != len(other):
            return False
        if not self.nodes:
            return True
        return (
            self.nodes[:-1] == other.nodes[:-1]
            and self.last_waypoint == other.last_waypoint
        )

    def copy(self) -> "Route":
        return Route(self.nodes)

    @property
    def first_waypoint(self) -> Waypoint:
        """First waypoint.

        Raises:
            RouteError: If the route is empty.
        """
        if not self.nodes:
            raise RouteError("Route is empty")
        return self.nodes[0].waypoint

    @property
    def last_waypoint(self) -> Waypoint:
        """Last waypoint.

        Raises:
            RouteError: If the route is empty.
        """
        if not self.nodes:
            raise RouteError("Route is empty")
        return self.nodes[-1].waypoint

    def total_distance(self) -> float:
        """Sum of all segment distances in nautical miles.

        Raises:
            RouteError: If the route is empty.
        """
        if not self.nodes:
            raise RouteError("Route is empty")
        return sum((node.distance_to_next for node in self.nodes[:-1]), 0.0)

    def add_first_waypoint(
        self, waypoint: Waypoint, airway: str = DIRECT, distance: float | None = None
    ) -> None:
        """Insert a waypoint before the current first one.

        Args:
            waypoint: Waypoint to insert
            airway: Airway from the new waypoint to the current first one
            distance: Segment distance; great-circle distance if None
        """
        if not self.nodes:
            self.nodes.append(RouteNode(waypoint))
            return

        if distance is None:
            distance = waypoint.distance_from(self.first_waypoint)
        self.nodes.insert(0, RouteNode(waypoint, airway, distance))

    def add_last_waypoint(
        self, waypoint: Waypoint, airway: str = DIRECT, distance: float | None = None
    ) -> None:
        """Append a waypoint after the current last one.

        Args:
            waypoint: Waypoint to append
            airway: Airway from the current last waypoint to the new one
            distance: Segment distance; great-circle distance if None
        """
        if self.nodes:
            last = self.nodes[-1]
            if distance is None:
                distance = last.waypoint.distance_from(waypoint)
            last.airway_to_next = airway
            last.distance_to_next = distance
        self.nodes.append(RouteNode(waypoint))

    def add_last(self, other: "Route", airway: str = DIRECT, distance: float | None = None) -> None:
        """Append another route through a new connecting segment.

        Args:
            other: Route to append; its nodes are copied
            airway: Airway of the connecting segment
            distance: Connecting distance; great-circle distance if None
        """
        if not other.nodes:
            return
        if self.nodes:
            last = self.nodes[-1]
            if distance is None:
                distance = last.waypoint.distance_from(other.first_waypoint)
            last.airway_to_next = airway
            last.distance_to_next = distance
        self.nodes.extend(other.copy().nodes)

    def connect_route(self, other: "Route") -> None:
        """Append another route that starts where this one ends.

        The shared junction waypoint appears once in the result.

        Raises:
            RouteError: If this route's last waypoint differs from the other's first.
        """
        if not other.nodes:
            return
        if self.nodes:
            if self.last_waypoint != other.first_waypoint:
                raise RouteError(
                    f"Cannot connect route ending at {self.last_waypoint.ident} "
                    f"to route starting at {other.first_waypoint.ident}"
                )
            self.nodes.pop()
        self.nodes.extend(other.copy().nodes)

    def concat(self, other: "Route", airway: str = DIRECT, distance: float | None = None) -> None:
        """Append another route, merging at a shared junction if there is one.

        If this route ends at the waypoint the other starts with, the
        duplicate is collapsed; otherwise a connecting segment is inserted.
        """
        if self.nodes and other.nodes and self.last_waypoint == other.first_waypoint:
            self.connect_route(other)
        else:
            self.add_last(other, airway, distance)

    def to_text(self, show_first: bool = False, show_last: bool = False) -> str:
        """Render the route as flight plan text.

        Consecutive segments on the same airway collapse into one airway
        entry; direct segments never collapse.

        Args:
            show_first: Include the first waypoint identifier
            show_last: Include the last waypoint identifier

        Returns:
            Space separated route text, e.g. "CARPE UN544 REDBY DCT PIKIL"

        Raises:
            RouteError: If the route has fewer than 2 waypoints.
        """
        if len(self.nodes) < 2:
            raise RouteError("Number of waypoints in the route is less than 2")

        tokens: list[str] = []
        if show_first:
            tokens.append(self.nodes[0].waypoint.ident)

        last_index = len(self.nodes) - 1
        i = 0
        while i + 1 < last_index:
            airway = self.nodes[i].airway_to_next
            if airway != self.nodes[i + 1].airway_to_next or airway == DIRECT:
                tokens.append(airway)
                tokens.append(self.nodes[i + 1].waypoint.ident)
            i += 1

        tokens.append(self.nodes[i].airway_to_next)

        if show_last:
            tokens.append(self.nodes[last_index].waypoint.ident)

        return " ".join(tokens)

    def __str__(self) -> str:
        return self.to_text()

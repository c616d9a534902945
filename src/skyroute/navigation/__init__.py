"""Waypoint graph, airway feed loading and route representation.

Typical usage:
    from skyroute.navigation import Route, load_ats_file

    graph = load_ats_file("data/navdata/ats.txt")
    index = graph.find_by_waypoint(Waypoint("CARPE", 55.0, -15.0))
"""

from skyroute.navigation.ats_loader import (
    AtsFileLoader,
    WaypointFileReadError,
    load_ats_file,
)
from skyroute.navigation.route import Route, RouteError, RouteNode
from skyroute.navigation.waypoint import Waypoint
from skyroute.navigation.waypoint_graph import (
    DIRECT,
    Edge,
    GraphError,
    Neighbor,
    WaypointGraph,
)

__all__ = [
    "DIRECT",
    "AtsFileLoader",
    "Edge",
    "GraphError",
    "Neighbor",
    "Route",
    "RouteError",
    "RouteNode",
    "Waypoint",
    "WaypointFileReadError",
    "WaypointGraph",
    "load_ats_file",
]

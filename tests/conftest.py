"""Pytest configuration and fixtures for all tests."""

import pytest

from skyroute.navigation.waypoint import Waypoint
from skyroute.navigation.waypoint_graph import Neighbor, WaypointGraph

NATS_XML = """<?xml version="1.0" encoding="utf-8"?>
<Content>
  <TrackSystem>NATS</TrackSystem>
  <Westbound>
    <Header>NAT TRACKS VALID 1130Z TO 1900Z</Header>
    <LastUpdated>2026-10-18T09:12:00Z</LastUpdated>
    <Message>(NAT-1/1 TRACKS FLS 310/390 INCLUSIVE
A PIKIL 56/20 57/30 LOMSI
EAST LVLS NIL
WEST LVLS 320 340 360
B ETARI 5520N 5630N DORYY
EAST LVLS NIL
WEST LVLS 310 330)</Message>
  </Westbound>
  <Eastbound>
    <Header></Header>
    <LastUpdated>2026-10-18T01:30:00Z</LastUpdated>
    <Message>(NAT-1/1 TRACKS FLS 320/400 INCLUSIVE
Z LOMSI 57/30 57/20 PIKIL
EAST LVLS 320 340
WEST LVLS NIL)</Message>
  </Eastbound>
</Content>
"""


@pytest.fixture
def nats_xml() -> str:
    """NATS message with one known, one unknown and one reverse track."""
    return NATS_XML


@pytest.fixture
def pikil() -> Waypoint:
    return Waypoint("PIKIL", 56.0, -15.0)


@pytest.fixture
def lomsi() -> Waypoint:
    return Waypoint("LOMSI", 57.0, -40.0)


@pytest.fixture
def small_graph(pikil: Waypoint, lomsi: Waypoint) -> WaypointGraph:
    """Graph with PIKIL, LOMSI, a far-away PIKIL duplicate and two airway edges."""
    graph = WaypointGraph()
    a = graph.add_waypoint(pikil)
    b = graph.add_waypoint(lomsi)
    c = graph.add_waypoint(Waypoint("PIKIL", -20.0, 150.0))
    graph.add_neighbor(a, b, Neighbor("UL9", pikil.distance_from(lomsi)))
    graph.add_neighbor(b, c, Neighbor("DCT", lomsi.distance_from(graph.waypoint(c))))
    return graph

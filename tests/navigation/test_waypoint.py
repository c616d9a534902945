"""Tests for Waypoint."""

import pytest

from skyroute.geometry.earth_geometry import DegenerateGeometryError
from skyroute.navigation.waypoint import Waypoint


class TestWaypoint:
    """Test Waypoint value semantics and helpers."""

    def test_equality_uses_ident_and_coordinate(self):
        """Test waypoints are equal only if ident and position match."""
        assert Waypoint("CARPE", 55.0, -15.0) == Waypoint("CARPE", 55.0, -15.0)
        assert Waypoint("CARPE", 55.0, -15.0) != Waypoint("CARPE", 55.0, -14.0)
        assert Waypoint("CARPE", 55.0, -15.0) != Waypoint("REDBY", 55.0, -15.0)

    def test_hashable(self):
        """Test waypoints can be used as dictionary keys."""
        index = {Waypoint("CARPE", 55.0, -15.0): 3}

        assert index[Waypoint("CARPE", 55.0, -15.0)] == 3

    def test_immutable(self):
        """Test waypoints cannot be modified."""
        wpt = Waypoint("CARPE", 55.0, -15.0)

        with pytest.raises(AttributeError):
            wpt.lat = 10.0  # type: ignore[misc]

    def test_distance_from(self):
        """Test great-circle distance between waypoints."""
        a = Waypoint("A", 0.0, 0.0)
        b = Waypoint("B", 0.0, 1.0)

        assert a.distance_from(b) == pytest.approx(60.04, abs=0.01)
        assert a.distance_from(a) == 0.0

    def test_course_to(self):
        """Test initial true course between waypoints."""
        a = Waypoint("A", 0.0, 0.0)
        b = Waypoint("B", 0.0, 1.0)

        assert a.course_to(b) == pytest.approx(90.0)
        assert b.course_to(a) == pytest.approx(270.0)

    def test_course_to_same_position_raises(self):
        """Test course to the same position is undefined."""
        a = Waypoint("A", 10.0, 10.0)

        with pytest.raises(DegenerateGeometryError):
            a.course_to(Waypoint("B", 10.0, 10.0))

    def test_str(self):
        """Test string representation."""
        assert str(Waypoint("CARPE", 55.0, -15.0)) == "CARPE (55.0000, -15.0000)"

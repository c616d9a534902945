"""Tests for great-circle geometry primitives."""

import math

import pytest

from skyroute.geometry.earth_geometry import (
    LAT0_LON0,
    NORTH_POLE,
    DegenerateGeometryError,
    ZeroLengthVectorError,
    angular_separation,
    great_circle_distance_nm,
    initial_true_course,
    intermediate_points,
    interpolate,
    tangent,
    true_heading,
)
from skyroute.geometry.vectors import Vector3

COORDINATE_PAIRS = [
    ((0.0, 0.0), (0.0, 90.0)),
    ((51.47, -0.45), (40.64, -73.78)),
    ((-33.95, 151.18), (1.36, 103.99)),
    ((10.0, 170.0), (-10.0, -170.0)),
    ((89.0, 0.0), (-45.0, 120.0)),
    ((35.0, 139.0), (35.5, 139.5)),
]


def _assert_vectors_close(actual: Vector3, expected: Vector3, tol: float = 1e-7) -> None:
    assert actual.x == pytest.approx(expected.x, abs=tol)
    assert actual.y == pytest.approx(expected.y, abs=tol)
    assert actual.z == pytest.approx(expected.z, abs=tol)


class TestInterpolate:
    """Test walking along great-circle arcs."""

    @pytest.mark.parametrize("c1,c2", COORDINATE_PAIRS)
    def test_alpha_zero_returns_start(self, c1, c2):
        """Test walking by 0 stays at the start point."""
        v1 = Vector3.from_lat_lon(*c1)
        v2 = Vector3.from_lat_lon(*c2)

        _assert_vectors_close(interpolate(v1, v2, 0.0), v1)

    @pytest.mark.parametrize("c1,c2", COORDINATE_PAIRS)
    def test_alpha_beta_returns_end(self, c1, c2):
        """Test walking the full separation reaches the end point."""
        v1 = Vector3.from_lat_lon(*c1)
        v2 = Vector3.from_lat_lon(*c2)
        beta = angular_separation(v1, v2)

        _assert_vectors_close(interpolate(v1, v2, beta), v2)

    def test_midpoint_on_equator(self):
        """Test the midpoint between lon 0 and lon 90 on the equator."""
        v1 = Vector3.from_lat_lon(0.0, 0.0)
        v2 = Vector3.from_lat_lon(0.0, 90.0)

        lat, lon = interpolate(v1, v2, math.pi / 4).to_lat_lon()

        assert lat == pytest.approx(0.0, abs=1e-9)
        assert lon == pytest.approx(45.0)

    def test_result_is_unit_vector(self):
        """Test interpolated points stay on the sphere."""
        v1 = Vector3.from_lat_lon(51.47, -0.45)
        v2 = Vector3.from_lat_lon(40.64, -73.78)

        for alpha in (0.1, 0.3, 0.7, 1.2):
            assert interpolate(v1, v2, alpha).magnitude() == pytest.approx(1.0)

    def test_points_a_few_metres_apart(self):
        """Test closely spaced distinct points still define an arc."""
        v1 = Vector3.from_lat_lon(50.0, 8.0)
        v2 = Vector3.from_lat_lon(50.00005, 8.0)
        beta = angular_separation(v1, v2)

        assert beta == pytest.approx(math.radians(0.00005), rel=1e-6)
        _assert_vectors_close(interpolate(v1, v2, 0.0), v1)
        _assert_vectors_close(interpolate(v1, v2, beta), v2)

    def test_identical_points_raise(self):
        """Test identical points have no defined arc."""
        v = Vector3.from_lat_lon(10.0, 20.0)

        with pytest.raises(DegenerateGeometryError):
            interpolate(v, v, 0.5)

    def test_antipodal_routes_through_north_pole(self):
        """Test antipodal points on the equator route over the north pole."""
        v = Vector3.from_lat_lon(0.0, 30.0)

        halfway = interpolate(v, -v, math.pi / 2)

        _assert_vectors_close(halfway, NORTH_POLE)

    def test_antipodal_from_north_pole_routes_through_lat0_lon0(self):
        """Test the pole/pole case uses lat 0, lon 0 as via point."""
        halfway = interpolate(NORTH_POLE, -NORTH_POLE, math.pi / 2)

        _assert_vectors_close(halfway, LAT0_LON0)

    def test_antipodal_to_north_pole_routes_through_lat0_lon0(self):
        """Test the south pole to north pole case uses lat 0, lon 0."""
        south = Vector3.from_lat_lon(-90.0, 0.0)

        halfway = interpolate(south, NORTH_POLE, math.pi / 2)

        _assert_vectors_close(halfway, LAT0_LON0)

    @pytest.mark.parametrize("alpha", [0.0, 0.5, 1.5, math.pi])
    def test_antipodal_always_defined(self, alpha):
        """Test antipodal interpolation never raises and stays on the sphere."""
        v = Vector3.from_lat_lon(-12.0, 77.0)

        result = interpolate(v, -v, alpha)

        assert result.magnitude() == pytest.approx(1.0)
        assert angular_separation(v, result) == pytest.approx(alpha, abs=1e-6)


class TestTangent:
    """Test tangent vectors of great-circle paths."""

    def test_tangent_along_equator_points_east(self):
        """Test tangent from lon 0 towards lon 90 points east."""
        v = Vector3.from_lat_lon(0.0, 0.0)
        v2 = Vector3.from_lat_lon(0.0, 90.0)

        _assert_vectors_close(tangent(v, v2), Vector3(0.0, 1.0, 0.0))

    def test_tangent_is_unit_and_normal(self):
        """Test the tangent is a unit vector normal to the start point."""
        v = Vector3.from_lat_lon(51.47, -0.45)
        v2 = Vector3.from_lat_lon(40.64, -73.78)

        w = tangent(v, v2)

        assert w.magnitude() == pytest.approx(1.0)
        assert w.dot(v) == pytest.approx(0.0, abs=1e-12)

    def test_antipodal_tangent_points_north(self):
        """Test antipodal tangent follows the path over the north pole."""
        v = Vector3.from_lat_lon(0.0, 0.0)

        _assert_vectors_close(tangent(v, -v), Vector3(0.0, 0.0, 1.0))

    def test_identical_points_raise(self):
        """Test tangent is undefined for identical points."""
        v = Vector3.from_lat_lon(10.0, 20.0)

        with pytest.raises(DegenerateGeometryError):
            tangent(v, v)


class TestTrueHeading:
    """Test true heading computation."""

    def test_due_north(self):
        """Test a northbound direction is reported as 360, never 0."""
        assert true_heading(Vector3(0.0, 0.0, 1.0), 0.0, 0.0) == pytest.approx(360.0)

    def test_due_east(self):
        """Test an eastbound direction at lat 0/lon 0."""
        assert true_heading(Vector3(0.0, 1.0, 0.0), 0.0, 0.0) == pytest.approx(90.0)

    def test_due_south(self):
        """Test a southbound direction."""
        assert true_heading(Vector3(0.0, 0.0, -1.0), 0.0, 0.0) == pytest.approx(180.0)

    def test_due_west(self):
        """Test a westbound direction."""
        assert true_heading(Vector3(0.0, -1.0, 0.0), 0.0, 0.0) == pytest.approx(270.0)

    def test_north_pole(self):
        """Test every direction at the north pole is 180."""
        assert true_heading(Vector3(1.0, 0.0, 0.0), 90.0, 0.0) == 180.0

    def test_south_pole(self):
        """Test every direction at the south pole is 360."""
        assert true_heading(Vector3(1.0, 0.0, 0.0), -90.0, 0.0) == 360.0

    def test_vertical_direction(self):
        """Test a direction normal to the surface gives 360."""
        assert true_heading(Vector3(2.0, 0.0, 0.0), 0.0, 0.0) == 360.0

    def test_zero_vector_raises(self):
        """Test a zero-length direction is rejected."""
        with pytest.raises(ZeroLengthVectorError):
            true_heading(Vector3(0.0, 0.0, 0.0), 10.0, 10.0)

    def test_heading_range(self):
        """Test headings fall in (0, 360] for many directions and places."""
        for lat in (-60.0, -1.0, 0.0, 33.3, 80.0):
            for lon in (-170.0, -45.0, 0.0, 90.0, 179.0):
                for direction in (
                    Vector3(1.0, 0.0, 0.0),
                    Vector3(0.0, 1.0, 0.0),
                    Vector3(0.0, 0.0, 1.0),
                    Vector3(-1.0, 2.0, -3.0),
                    Vector3(0.3, -0.2, 0.1),
                ):
                    heading = true_heading(direction, lat, lon)
                    assert 0.0 < heading <= 360.0


class TestDistanceAndCourse:
    """Test distance and course helpers."""

    def test_one_degree_of_latitude_is_60nm(self):
        """Test one degree along a meridian is about 60 NM."""
        assert great_circle_distance_nm(0.0, 0.0, 1.0, 0.0) == pytest.approx(60.04, abs=0.01)

    def test_distance_is_symmetric(self):
        """Test distance does not depend on direction."""
        d1 = great_circle_distance_nm(51.47, -0.45, 40.64, -73.78)
        d2 = great_circle_distance_nm(40.64, -73.78, 51.47, -0.45)

        assert d1 == pytest.approx(d2)
        assert d1 == pytest.approx(2991, abs=5)

    def test_initial_course_east_on_equator(self):
        """Test course along the equator eastwards is 90."""
        assert initial_true_course(0.0, 0.0, 0.0, 10.0) == pytest.approx(90.0)

    def test_initial_course_south(self):
        """Test course along a meridian southwards is 180."""
        assert initial_true_course(20.0, 5.0, 10.0, 5.0) == pytest.approx(180.0)

    def test_initial_course_london_new_york(self):
        """Test the great-circle course from London to New York heads north-west."""
        course = initial_true_course(51.47, -0.45, 40.64, -73.78)

        assert course == pytest.approx(288.0, abs=1.0)


class TestIntermediatePoints:
    """Test great-circle point generation."""

    def test_points_on_equator(self):
        """Test evenly spaced points between lon 0 and lon 40."""
        points = intermediate_points(0.0, 0.0, 0.0, 40.0, 3)

        assert len(points) == 3
        for (lat, lon), expected_lon in zip(points, (10.0, 20.0, 30.0)):
            assert lat == pytest.approx(0.0, abs=1e-9)
            assert lon == pytest.approx(expected_lon)

    def test_no_points(self):
        """Test zero intermediate points."""
        assert intermediate_points(0.0, 0.0, 10.0, 10.0, 0) == []

    def test_closely_spaced_fixes(self):
        """Test a midpoint between fixes 0.00005 degrees apart."""
        points = intermediate_points(50.0, 8.0, 50.00005, 8.0, 1)

        lat, lon = points[0]
        assert lat == pytest.approx(50.000025, abs=1e-7)
        assert lon == pytest.approx(8.0, abs=1e-7)

"""Great-circle geometry on the unit sphere.

Positions are unit vectors (see skyroute.geometry.vectors). The functions in
this module walk great-circle arcs, compute tangents of arcs and convert
direction vectors into true headings.

Typical usage example:
    from skyroute.geometry import earth_geometry as eg

    v1 = Vector3.from_lat_lon(51.47, -0.45)
    v2 = Vector3.from_lat_lon(40.64, -73.78)
    midpoint = eg.interpolate(v1, v2, eg.angular_separation(v1, v2) / 2)
    course = eg.initial_true_course(51.47, -0.45, 40.64, -73.78)
"""

import math

import numpy as np

from skyroute.geometry.vectors import Vector3

EARTH_RADIUS_NM = 3440.065

# Dot products within this distance of +/-1 are treated as identical/antipodal.
PARALLEL_TOLERANCE = 1e-12

NORTH_POLE = Vector3.from_lat_lon(90.0, 0.0)
LAT0_LON0 = Vector3.from_lat_lon(0.0, 0.0)


class GeometryError(ValueError):
    """Raised when a geometry primitive is called with invalid input."""


class DegenerateGeometryError(GeometryError):
    """Raised when two points do not define a great-circle arc."""


class ZeroLengthVectorError(GeometryError):
    """Raised when a direction vector has zero length."""


def angular_separation(v1: Vector3, v2: Vector3) -> float:
    """Angle between two unit vectors in radians, in [0, pi]."""
    return math.atan2(v1.cross(v2).magnitude(), v1.dot(v2))


def _is_antipodal(v1: Vector3, v2: Vector3) -> bool:
    return v1.dot(v2) <= -1.0 + PARALLEL_TOLERANCE


def _antipode_substitute(v1: Vector3, v2: Vector3) -> Vector3:
    """Point through which an ambiguous antipodal arc is routed."""
    if v1.is_close(NORTH_POLE) or v2.is_close(NORTH_POLE):
        return LAT0_LON0
    return NORTH_POLE


def interpolate(v1: Vector3, v2: Vector3, alpha: float) -> Vector3:
    """Walk the shorter great-circle arc from v1 towards v2 by angle alpha.

    The result is the linear combination a*v1 + b*v2 whose angle from v1 is
    alpha and whose angle from v2 is beta - alpha, beta being the angular
    separation of v1 and v2. When v1 and v2 are antipodal the arc through
    the north pole is used, or the arc through lat 0/lon 0 if either point
    is the north pole.

    Args:
        v1: Start point (unit vector).
        v2: End point (unit vector), distinct from v1.
        alpha: Angle in radians measured from v1.

    Returns:
        Unit vector of the point reached.

    Raises:
        DegenerateGeometryError: If v1 and v2 are the same point.

    Examples:
        >>> v = interpolate(Vector3(1, 0, 0), Vector3(0, 1, 0), math.pi / 4)
        >>> round(v.x, 6) == round(v.y, 6)
        True
    """
    t = v1.dot(v2)
    # Closer than t can resolve, the 2x2 system is singular.
    if t >= 1.0 or (t > 0.0 and v1.cross(v2).magnitude() == 0.0):
        raise DegenerateGeometryError("Cannot interpolate between identical points")

    if _is_antipodal(v1, v2):
        return interpolate(v1, _antipode_substitute(v1, v2), alpha)

    beta = angular_separation(v1, v2)
    matrix = np.array([[1.0, t], [t, 1.0]])
    rhs = np.array([math.cos(alpha), math.cos(beta - alpha)])
    a, b = np.linalg.solve(matrix, rhs)

    return v1 * float(a) + v2 * float(b)


def tangent(v: Vector3, v2: Vector3) -> Vector3:
    """Unit tangent of the great-circle path from v to v2, taken at v.

    The result is normal to v and points in the direction of travel.
    Antipodal pairs are resolved the same way as in interpolate().

    Raises:
        DegenerateGeometryError: If v and v2 are the same point.
    """
    if _is_antipodal(v, v2):
        v2 = _antipode_substitute(v, v2)

    normal = v.cross(v2)
    if normal.magnitude() <= PARALLEL_TOLERANCE:
        raise DegenerateGeometryError("Tangent is undefined for identical points")

    return normal.cross(v).normalized()


def _project_on_plane(p: Vector3, unit_normal: Vector3) -> Vector3:
    return p - unit_normal * p.dot(unit_normal)


def true_heading(direction: Vector3, lat: float, lon: float) -> float:
    """True heading of a direction vector at the given coordinate.

    The direction is projected onto the local tangent plane and split into
    north and east components. At the poles the heading is fixed (180 at the
    north pole, 360 at the south pole), and a vertical direction yields 360.

    Args:
        direction: Direction vector (any non-zero length).
        lat: Latitude of the location in degrees.
        lon: Longitude of the location in degrees.

    Returns:
        Heading in degrees, in the range (0, 360].

    Raises:
        ZeroLengthVectorError: If direction has zero length.
    """
    if direction.magnitude() == 0:
        raise ZeroLengthVectorError("Length of direction vector cannot be 0")

    if lat >= 90.0:
        return 180.0
    if lat <= -90.0:
        return 360.0

    normal = Vector3.from_lat_lon(lat, lon)
    projection = _project_on_plane(direction, normal)

    if projection.magnitude() <= PARALLEL_TOLERANCE * direction.magnitude():
        return 360.0

    north = _project_on_plane(Vector3(0.0, 0.0, 1.0), normal).normalized()
    east = north.cross(normal)

    heading = math.degrees(math.atan2(projection.dot(east), projection.dot(north)))
    if heading <= 0.0:
        heading += 360.0
    return heading


def great_circle_distance_nm(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two coordinates in nautical miles."""
    v1 = Vector3.from_lat_lon(lat1, lon1)
    v2 = Vector3.from_lat_lon(lat2, lon2)
    return angular_separation(v1, v2) * EARTH_RADIUS_NM


def initial_true_course(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """True course at the first coordinate when flying the great circle to the second.

    Raises:
        DegenerateGeometryError: If both coordinates are the same point.
    """
    v1 = Vector3.from_lat_lon(lat1, lon1)
    v2 = Vector3.from_lat_lon(lat2, lon2)
    return true_heading(tangent(v1, v2), lat1, lon1)


def intermediate_points(
    lat1: float, lon1: float, lat2: float, lon2: float, count: int
) -> list[tuple[float, float]]:
    """Evenly spaced points strictly between two coordinates on their great circle.

    Args:
        lat1: Start latitude in degrees.
        lon1: Start longitude in degrees.
        lat2: End latitude in degrees.
        lon2: End longitude in degrees.
        count: Number of intermediate points.

    Returns:
        List of (lat, lon) tuples ordered from start to end.

    Raises:
        DegenerateGeometryError: If both coordinates are the same point.
    """
    v1 = Vector3.from_lat_lon(lat1, lon1)
    v2 = Vector3.from_lat_lon(lat2, lon2)
    if _is_antipodal(v1, v2):
        beta = math.pi
    else:
        beta = angular_separation(v1, v2)

    step = beta / (count + 1)
    return [interpolate(v1, v2, step * (i + 1)).to_lat_lon() for i in range(count)]

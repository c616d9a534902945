"""Spherical geometry used by routes, tracks and headings.

Typical usage:
    from skyroute.geometry import Vector3, interpolate, true_heading

    v1 = Vector3.from_lat_lon(51.47, -0.45)
    v2 = Vector3.from_lat_lon(40.64, -73.78)
    halfway = interpolate(v1, v2, angular_separation(v1, v2) / 2)
"""

from skyroute.geometry.earth_geometry import (
    EARTH_RADIUS_NM,
    DegenerateGeometryError,
    GeometryError,
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

__all__ = [
    "EARTH_RADIUS_NM",
    "DegenerateGeometryError",
    "GeometryError",
    "Vector3",
    "ZeroLengthVectorError",
    "angular_separation",
    "great_circle_distance_nm",
    "initial_true_course",
    "intermediate_points",
    "interpolate",
    "tangent",
    "true_heading",
]

"""Geometry helpers for area discovery.

The places provider accepts a point and a radius, not arbitrary shapes, so every
search area is reduced to a single representative center.
"""

import math

from models.area import (
    CircleArea,
    LatLng,
    MultiPolygonArea,
    PolygonArea,
    PolylineArea,
    RectangleArea,
    SearchArea,
)

DEFAULT_SEARCH_RADIUS_M = 5_000
MAX_SEARCH_RADIUS_M = 50_000


def _mean_point(points: list[LatLng]) -> LatLng | None:
    if not points:
        return None
    return LatLng(
        lat=sum(p.lat for p in points) / len(points),
        lng=sum(p.lng for p in points) / len(points),
    )


def area_center(area: SearchArea | None) -> LatLng | None:
    """
    Representative center of a search area.

    circle -> its center; rectangle -> midpoint of the bounds; polygon/polyline ->
    arithmetic mean of the vertices; multipolygon -> mean of every vertex across
    all polygons (not weighted per polygon).
    """
    if isinstance(area, CircleArea):
        return area.center
    if isinstance(area, RectangleArea):
        return LatLng(lat=(area.north + area.south) / 2, lng=(area.east + area.west) / 2)
    if isinstance(area, (PolygonArea, PolylineArea)):
        return _mean_point(area.coordinates)
    if isinstance(area, MultiPolygonArea):
        return _mean_point([point for ring in area.polygons for point in ring])
    return None


def search_radius(area: SearchArea | None) -> int:
    """Bias radius in meters: the circle's own radius capped at 50 km, else 5 km."""
    radius = getattr(area, "radius", None)
    if radius:
        return int(min(radius, MAX_SEARCH_RADIUS_M))
    return DEFAULT_SEARCH_RADIUS_M


def split_quota(total: int, shape_count: int) -> int:
    """Per-shape result quota: ceil(total / shape_count), the same for every shape."""
    if shape_count <= 0:
        raise ValueError("shape_count must be positive")
    return math.ceil(total / shape_count)


def format_coordinates(point: LatLng) -> str:
    return f"{point.lat:.4f}, {point.lng:.4f}"

# -*- coding: utf-8 -*-
"""Geometry kernel.

Pure functions on 2D points. Nothing here knows about pivots or links; the
solver and the synthesizer build on these primitives.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Iterable, List, NamedTuple, Optional, Sequence

from ..utils.constants import ORIENTATION_EPS, PARALLEL_EPS, TANGENT_EPS
from .errors import InvalidGeometry

# Relative height below which two circle intersections collapse into one.
_TANGENT_HEIGHT_REL = 1e-12


class Point(NamedTuple):
    x: float
    y: float

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


class Orientation(IntEnum):
    COLLINEAR = 0
    CLOCKWISE = 1
    COUNTERCLOCKWISE = 2


def as_point(value: Any, name: str = "point") -> Point:
    """Coerce a Point, an (x, y) pair or an {"x", "y"} dict into a Point."""
    if isinstance(value, Point):
        x, y = value
    elif isinstance(value, dict):
        if "x" not in value or "y" not in value:
            raise InvalidGeometry(f"{name} is missing a coordinate: {value!r}")
        x, y = value["x"], value["y"]
    else:
        try:
            x, y = value
        except (TypeError, ValueError):
            raise InvalidGeometry(f"{name} is not a 2D point: {value!r}") from None
    try:
        x, y = float(x), float(y)
    except (TypeError, ValueError):
        raise InvalidGeometry(f"{name} has non-numeric coordinates: {value!r}") from None
    if not (math.isfinite(x) and math.isfinite(y)):
        raise InvalidGeometry(f"{name} has non-finite coordinates: {value!r}")
    return Point(x, y)


def clamp_angle_rad(a: float) -> float:
    """Wrap angle to (-pi, pi]."""
    while a <= -math.pi:
        a += 2 * math.pi
    while a > math.pi:
        a -= 2 * math.pi
    return a


def rot2(x: float, y: float, a: float) -> tuple[float, float]:
    ca, sa = math.cos(a), math.sin(a)
    return ca * x - sa * y, sa * x + ca * y


def distance(p1: Sequence[float], p2: Sequence[float]) -> float:
    return math.hypot(p2[0] - p1[0], p2[1] - p1[1])


def midpoint(p1: Sequence[float], p2: Sequence[float]) -> Point:
    return Point((p1[0] + p2[0]) / 2.0, (p1[1] + p2[1]) / 2.0)


def bearing(p: Sequence[float], q: Sequence[float]) -> float:
    """Direction of p->q in radians."""
    return math.atan2(q[1] - p[1], q[0] - p[0])


def orientation(p: Sequence[float], q: Sequence[float], r: Sequence[float]) -> Orientation:
    """Turn direction of the ordered triple p, q, r.

    Sign of (q - p) x (r - q); positive is counterclockwise in a y-up frame.
    """
    cross = (q[0] - p[0]) * (r[1] - q[1]) - (q[1] - p[1]) * (r[0] - q[0])
    if abs(cross) < ORIENTATION_EPS:
        return Orientation.COLLINEAR
    return Orientation.COUNTERCLOCKWISE if cross > 0 else Orientation.CLOCKWISE


def on_segment(p: Sequence[float], q: Sequence[float], r: Sequence[float]) -> bool:
    """True if q lies inside the bounding box of segment p-r."""
    return (
        min(p[0], r[0]) <= q[0] <= max(p[0], r[0])
        and min(p[1], r[1]) <= q[1] <= max(p[1], r[1])
    )


def segments_intersect(
    p1: Sequence[float], q1: Sequence[float], p2: Sequence[float], q2: Sequence[float]
) -> bool:
    """Segment p1-q1 meets segment p2-q2 (touching and collinear overlap count)."""
    o1 = orientation(p1, q1, p2)
    o2 = orientation(p1, q1, q2)
    o3 = orientation(p2, q2, p1)
    o4 = orientation(p2, q2, q1)

    if o1 != o2 and o3 != o4:
        return True

    if o1 == Orientation.COLLINEAR and on_segment(p1, p2, q1):
        return True
    if o2 == Orientation.COLLINEAR and on_segment(p1, q2, q1):
        return True
    if o3 == Orientation.COLLINEAR and on_segment(p2, p1, q2):
        return True
    if o4 == Orientation.COLLINEAR and on_segment(p2, q1, q2):
        return True
    return False


def circle_circle_intersection(
    center1: Sequence[float], r1: float, center2: Sequence[float], r2: float
) -> List[Point]:
    """Intersections of two circles: 0, 1 (tangent) or 2 points.

    Empty when the circles are disjoint, one contains the other, or they are
    concentric.
    """
    x0, y0 = float(center1[0]), float(center1[1])
    x1, y1 = float(center2[0]), float(center2[1])
    r1 = float(r1)
    r2 = float(r2)

    dx = x1 - x0
    dy = y1 - y0
    d = math.hypot(dx, dy)
    if d < TANGENT_EPS:
        return []
    if d > r1 + r2 + TANGENT_EPS or d < abs(r1 - r2) - TANGENT_EPS:
        return []

    # a: distance from center1 to the chord midpoint along the center line
    a = (r1 * r1 - r2 * r2 + d * d) / (2 * d)
    h_sq = r1 * r1 - a * a

    xm = x0 + a * dx / d
    ym = y0 + a * dy / d

    if h_sq <= _TANGENT_HEIGHT_REL * max(r1, r2) ** 2:
        return [Point(xm, ym)]

    h = math.sqrt(h_sq)
    rx = -dy * (h / d)
    ry = dx * (h / d)
    return [Point(xm + rx, ym + ry), Point(xm - rx, ym - ry)]


def line_intersection(
    p1: Sequence[float], p2: Sequence[float], p3: Sequence[float], p4: Sequence[float]
) -> Optional[Point]:
    """Intersection of the infinite lines p1-p2 and p3-p4, None if parallel."""
    x1, y1 = p1[0], p1[1]
    x2, y2 = p2[0], p2[1]
    x3, y3 = p3[0], p3[1]
    x4, y4 = p4[0], p4[1]

    denom = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
    if abs(denom) < PARALLEL_EPS:
        return None

    t = ((x1 - x3) * (y3 - y4) - (y1 - y3) * (x3 - x4)) / denom
    return Point(x1 + t * (x2 - x1), y1 + t * (y2 - y1))


def rotate_about(point: Sequence[float], center: Sequence[float], angle: float) -> Point:
    rx, ry = rot2(point[0] - center[0], point[1] - center[1], angle)
    return Point(center[0] + rx, center[1] + ry)


def local_to_world(local: Sequence[float], center: Sequence[float], rotation_deg: float) -> Point:
    """Place a point given in a lid's local frame at a pose (center, rotation in degrees)."""
    rx, ry = rot2(local[0], local[1], math.radians(rotation_deg))
    return Point(center[0] + rx, center[1] + ry)


def world_to_local(world: Sequence[float], center: Sequence[float], rotation_deg: float) -> Point:
    rx, ry = rot2(world[0] - center[0], world[1] - center[1], -math.radians(rotation_deg))
    return Point(rx, ry)


@dataclass(frozen=True)
class RigidTransform:
    """Rotation about ``origin`` followed by a move of ``origin`` onto ``target``."""

    rotation: float
    origin: Point
    target: Point

    @property
    def translation(self) -> Point:
        return Point(self.target.x - self.origin.x, self.target.y - self.origin.y)

    def apply(self, point: Sequence[float]) -> Point:
        rx, ry = rot2(point[0] - self.origin.x, point[1] - self.origin.y, self.rotation)
        return Point(self.target.x + rx, self.target.y + ry)

    def apply_many(self, points: Iterable[Sequence[float]]) -> List[Point]:
        return [self.apply(p) for p in points]


def rigid_transform(
    points_from: Sequence[Sequence[float]], points_to: Sequence[Sequence[float]]
) -> RigidTransform:
    """Transform carrying the segment points_from[0]-points_from[1] onto points_to.

    The rotation is the change of bearing of the segment and the translation is
    the displacement of its midpoint, so any third point rigidly attached to
    the first pair follows it.
    """
    if len(points_from) != 2 or len(points_to) != 2:
        raise InvalidGeometry("rigid_transform needs exactly two points on each side")
    f0, f1 = as_point(points_from[0]), as_point(points_from[1])
    t0, t1 = as_point(points_to[0]), as_point(points_to[1])
    rotation = clamp_angle_rad(bearing(t0, t1) - bearing(f0, f1))
    return RigidTransform(rotation, midpoint(f0, f1), midpoint(t0, t1))

# -*- coding: utf-8 -*-
"""Three-position synthesis of the ground pivots.

Each coupler point visits three world positions as the lid moves through the
closed, intermediate and open poses. The ground pivot that carries it is the
center of the circle through those positions, i.e. the intersection of the
perpendicular bisectors of the two chords.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

import numpy as np

from ..utils.constants import BISECTOR_EXTENSION, SYNTHESIS_TOLERANCE
from .errors import InvalidGeometry, SynthesisDegenerate
from .geometry import Point, as_point, bearing, clamp_angle_rad, distance, line_intersection, midpoint
from .mechanism import AngleLimits, LidPose, LinkLengths, MechanismState

logger = logging.getLogger(__name__)

POSE_NAMES = ("closed", "intermediate", "open")

Segment = Tuple[Point, Point]


def _rotation_matrix(deg: float) -> np.ndarray:
    a = math.radians(deg)
    c, s = math.cos(a), math.sin(a)
    return np.array([[c, -s], [s, c]])


def transform_coupler_points(poses: Sequence[LidPose], coupler_points: Sequence[Point]) -> np.ndarray:
    """World positions of the coupler points, shape (n_poses, n_points, 2)."""
    local = np.array([[p.x, p.y] for p in coupler_points], dtype=float)
    out = np.empty((len(poses), len(local), 2))
    for i, pose in enumerate(poses):
        out[i] = local @ _rotation_matrix(pose.rotation).T + np.array([pose.center.x, pose.center.y])
    return out


def perpendicular_bisector(p1: Point, p2: Point) -> Segment:
    """The bisector of chord p1-p2 as a long segment centered on its midpoint."""
    length = distance(p1, p2)
    if length <= 0.0:
        raise SynthesisDegenerate(f"coupler point does not move between {p1} and {p2}")
    m = midpoint(p1, p2)
    # chord direction rotated by 90 degrees
    ux = -(p2.y - p1.y) / length
    uy = (p2.x - p1.x) / length
    return (
        Point(m.x - ux * BISECTOR_EXTENSION, m.y - uy * BISECTOR_EXTENSION),
        Point(m.x + ux * BISECTOR_EXTENSION, m.y + uy * BISECTOR_EXTENSION),
    )


def _circle_center(positions: Sequence[Point], label: str) -> Tuple[Point, List[Segment]]:
    bis1 = perpendicular_bisector(positions[0], positions[1])
    bis2 = perpendicular_bisector(positions[1], positions[2])
    center = line_intersection(bis1[0], bis1[1], bis2[0], bis2[1])
    if center is None:
        raise SynthesisDegenerate(f"bisectors for pivot {label} are parallel; the three positions are collinear")
    return center, [bis1, bis2]


@dataclass
class SynthesisResult:
    pivot_a: Point
    pivot_d: Point
    link_lengths: LinkLengths
    residuals: Dict[str, List[float]] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    transformed: List[Tuple[Point, Point]] = field(default_factory=list)
    bisectors: Dict[str, List[Segment]] = field(default_factory=dict)

    @property
    def is_consistent(self) -> bool:
        return not self.warnings

    def mechanism_state(self, pose_index: int = 0) -> MechanismState:
        """The hinge at one of the design poses (closed by default)."""
        b, c = self.transformed[pose_index]
        return MechanismState(self.pivot_a, b, c, self.pivot_d)

    def travel(self) -> AngleLimits:
        """Input rotation from the closed pose to the open pose, as limits around the closed pose."""
        b_closed = self.transformed[0][0]
        b_open = self.transformed[-1][0]
        sweep = clamp_angle_rad(bearing(self.pivot_a, b_open) - bearing(self.pivot_a, b_closed))
        return AngleLimits(min(0.0, sweep), max(0.0, sweep))

    def to_dict(self) -> Dict[str, object]:
        return {
            "A": self.pivot_a.to_dict(),
            "D": self.pivot_d.to_dict(),
            "link_lengths": self.link_lengths._asdict(),
            "residuals": {k: list(v) for k, v in self.residuals.items()},
            "warnings": list(self.warnings),
            "consistent": self.is_consistent,
        }


def synthesize(poses: Sequence[LidPose], coupler_points: Sequence[Point]) -> SynthesisResult:
    if len(poses) != 3:
        raise InvalidGeometry(f"synthesis needs exactly 3 lid poses, got {len(poses)}")
    if len(coupler_points) != 2:
        raise InvalidGeometry(f"synthesis needs exactly 2 coupler points, got {len(coupler_points)}")
    poses = [LidPose.coerce(p) for p in poses]
    coupler_points = [as_point(p, name=f"coupler point {i + 1}") for i, p in enumerate(coupler_points)]

    world = transform_coupler_points(poses, coupler_points)
    first = [Point(*world[i, 0]) for i in range(3)]
    second = [Point(*world[i, 1]) for i in range(3)]

    pivot_a, bis_a = _circle_center(first, "A")
    pivot_d, bis_d = _circle_center(second, "D")

    l_ab = distance(pivot_a, first[0])
    l_cd = distance(pivot_d, second[0])
    lengths = LinkLengths(
        ground=distance(pivot_a, pivot_d),
        input=l_ab,
        coupler=distance(first[0], second[0]),
        output=l_cd,
    )

    res_a = np.abs(np.linalg.norm(world[:, 0, :] - np.array(pivot_a), axis=1) - l_ab)
    res_d = np.abs(np.linalg.norm(world[:, 1, :] - np.array(pivot_d), axis=1) - l_cd)

    warnings: List[str] = []
    for label, res in (("A", res_a), ("D", res_d)):
        for pose, r in zip(poses, res):
            if r > SYNTHESIS_TOLERANCE:
                msg = f"pivot {label}: pose {pose.name or '?'} is off the circle by {r:.4f}"
                warnings.append(msg)
                logger.warning(msg)

    return SynthesisResult(
        pivot_a=pivot_a,
        pivot_d=pivot_d,
        link_lengths=lengths,
        residuals={"A": res_a.tolist(), "D": res_d.tolist()},
        warnings=warnings,
        transformed=[(first[i], second[i]) for i in range(3)],
        bisectors={"A": bis_a, "D": bis_d},
    )


def pose_from_state(state: MechanismState, closed: MechanismState, name: str = "") -> LidPose:
    """Lid pose carried by the coupler B-C of ``state``, relative to the ``closed`` state.

    The lid frame is centered on the coupler midpoint with zero rotation at the
    closed state.
    """
    rotation = math.degrees(clamp_angle_rad(bearing(state.b, state.c) - bearing(closed.b, closed.c)))
    return LidPose(midpoint(state.b, state.c), rotation, name)


def coupler_points_of(closed: MechanismState) -> Tuple[Point, Point]:
    """B and C in the lid frame used by :func:`pose_from_state`."""
    m = midpoint(closed.b, closed.c)
    return Point(closed.b.x - m.x, closed.b.y - m.y), Point(closed.c.x - m.x, closed.c.y - m.y)

# -*- coding: utf-8 -*-
"""Mechanism data model.

A hinge pose is the four pivots of a crossed four-bar:

- ``A``: ground pivot driven by the input link A-B
- ``D``: ground pivot of the output link C-D
- ``B``: floating joint between input link and coupler (the lid)
- ``C``: floating joint between coupler and output link

Angles of travel are expressed as offsets (radians) from the input angle of a
reference pose.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, NamedTuple, Optional

from .errors import InvalidGeometry
from .geometry import Point, as_point, bearing, distance, line_intersection, segments_intersect

PIVOT_NAMES = ("A", "B", "C", "D")


class LockMode(str, Enum):
    LOCKED = "locked"
    UNLOCKED = "unlocked"

    @classmethod
    def from_flag(cls, unlocked: bool) -> "LockMode":
        return cls.UNLOCKED if unlocked else cls.LOCKED


class LinkLengths(NamedTuple):
    ground: float   # A-D
    input: float    # A-B
    coupler: float  # B-C
    output: float   # C-D


@dataclass(frozen=True)
class MechanismState:
    a: Point
    b: Point
    c: Point
    d: Point

    def __post_init__(self):
        for name in ("a", "b", "c", "d"):
            object.__setattr__(self, name, as_point(getattr(self, name), name=name.upper()))

    @property
    def input_angle(self) -> float:
        return bearing(self.a, self.b)

    def link_lengths(self) -> LinkLengths:
        return LinkLengths(
            ground=distance(self.a, self.d),
            input=distance(self.a, self.b),
            coupler=distance(self.b, self.c),
            output=distance(self.c, self.d),
        )

    def is_crossed(self) -> bool:
        return segments_intersect(self.a, self.b, self.c, self.d)

    def crossing_point(self) -> Optional[Point]:
        """Where the lines of the two rocker links meet, None if they are parallel."""
        return line_intersection(self.a, self.b, self.c, self.d)

    def pivots(self) -> Dict[str, Point]:
        return {"A": self.a, "B": self.b, "C": self.c, "D": self.d}

    def replace(self, name: str, point: Any) -> "MechanismState":
        key = str(name).upper()
        if key not in PIVOT_NAMES:
            raise InvalidGeometry(f"Invalid pivot name: {name!r}")
        pivots = self.pivots()
        pivots[key] = as_point(point, name=key)
        return MechanismState(pivots["A"], pivots["B"], pivots["C"], pivots["D"])

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {k: p.to_dict() for k, p in self.pivots().items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MechanismState":
        if not isinstance(data, dict):
            raise InvalidGeometry(f"Pivots must be a mapping, got {type(data).__name__}")
        missing = [k for k in PIVOT_NAMES if k not in data]
        if missing:
            raise InvalidGeometry(f"Missing pivots: {', '.join(missing)}")
        return cls(*(as_point(data[k], name=k) for k in PIVOT_NAMES))


@dataclass(frozen=True)
class AngleLimits:
    """Travel range as offsets from the reference input angle, ``min <= 0 <= max``."""

    min: float = 0.0
    max: float = 0.0

    @property
    def span(self) -> float:
        return self.max - self.min

    @property
    def is_animatable(self) -> bool:
        return self.max > self.min

    def contains(self, offset: float) -> bool:
        return self.min <= offset <= self.max

    def offset_at(self, percent: float) -> float:
        """Map a 0-100 slider position onto the range."""
        t = max(0.0, min(100.0, float(percent))) / 100.0
        return self.min + t * self.span

    def percent_of(self, offset: float) -> float:
        if self.span <= 0.0:
            return 0.0
        return 100.0 * (float(offset) - self.min) / self.span

    def degrees(self) -> tuple[float, float]:
        return math.degrees(self.min), math.degrees(self.max)


@dataclass(frozen=True)
class LidPose:
    center: Point
    rotation: float = 0.0  # degrees
    name: str = ""

    def __post_init__(self):
        object.__setattr__(self, "center", as_point(self.center, name=f"pose {self.name!r} center"))
        try:
            rotation = float(self.rotation)
        except (TypeError, ValueError):
            raise InvalidGeometry(f"pose {self.name!r} has a non-numeric rotation: {self.rotation!r}") from None
        if not math.isfinite(rotation):
            raise InvalidGeometry(f"pose {self.name!r} has a non-finite rotation")
        object.__setattr__(self, "rotation", rotation)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LidPose":
        name = str(data.get("name", ""))
        if "center" not in data:
            raise InvalidGeometry(f"pose {name!r} is missing its center")
        return cls(data["center"], data.get("rotation", 0.0), name)

    @classmethod
    def coerce(cls, value: Any) -> "LidPose":
        """A LidPose, a {"center", "rotation", "name"} dict or a (center, rotation[, name]) sequence."""
        if isinstance(value, LidPose):
            return value
        if isinstance(value, dict):
            return cls.from_dict(value)
        if isinstance(value, (str, bytes)) or not hasattr(value, "__len__") or not 1 <= len(value) <= 3:
            raise InvalidGeometry(f"not a lid pose: {value!r}")
        return cls(*value)

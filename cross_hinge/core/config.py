# -*- coding: utf-8 -*-
"""Box dimensions and the serializable hinge configuration.

Design space uses screen-style coordinates: y grows downward, the closed lid
sits directly on top of the base.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..utils.constants import DEFAULT_ORIGIN
from .errors import InvalidGeometry
from .geometry import Point, as_point
from .mechanism import MechanismState

logger = logging.getLogger(__name__)

# Default pivot placement as fractions of the box: x across the width, y as a
# depth into the base (A, D) or up from the bottom of the lid (B, C).
_PIVOT_X_FRACTIONS = {"A": 5.0 / 18.0, "B": 10.0 / 18.0, "C": 6.0 / 18.0, "D": 11.0 / 18.0}
_BASE_DEPTH_FRACTION = 1.0 / 15.0
_LID_RISE_FRACTION = 3.0 / 8.0


@dataclass(frozen=True)
class Rect:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def corners(self) -> list[Point]:
        return [
            Point(self.min_x, self.min_y),
            Point(self.max_x, self.min_y),
            Point(self.max_x, self.max_y),
            Point(self.min_x, self.max_y),
        ]

    def contains(self, p) -> bool:
        return self.min_x <= p[0] <= self.max_x and self.min_y <= p[1] <= self.max_y

    def clamp(self, p) -> Point:
        return Point(
            max(self.min_x, min(self.max_x, p[0])),
            max(self.min_y, min(self.max_y, p[1])),
        )


def _positive(name: str, value: Any, allow_zero: bool = False) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise InvalidGeometry(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(v) or v < 0.0 or (v == 0.0 and not allow_zero):
        raise InvalidGeometry(f"{name} must be {'>= 0' if allow_zero else '> 0'}, got {value!r}")
    return v


@dataclass(frozen=True)
class BoxDimensions:
    width: float = 900.0
    base_height: float = 300.0
    lid_height: float = 80.0
    lid_gap: float = 0.0
    origin: Point = field(default_factory=lambda: Point(*DEFAULT_ORIGIN))

    def __post_init__(self):
        object.__setattr__(self, "width", _positive("width", self.width))
        object.__setattr__(self, "base_height", _positive("base_height", self.base_height))
        object.__setattr__(self, "lid_height", _positive("lid_height", self.lid_height))
        object.__setattr__(self, "lid_gap", _positive("lid_gap", self.lid_gap, allow_zero=True))
        object.__setattr__(self, "origin", as_point(self.origin, name="origin"))

    def lid_rect(self) -> Rect:
        x, y = self.origin
        return Rect(x, y, x + self.width, y + self.lid_height)

    def base_rect(self) -> Rect:
        x, y = self.origin
        top = y + self.lid_height + self.lid_gap
        return Rect(x, top, x + self.width, top + self.base_height)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "base_height": self.base_height,
            "lid_height": self.lid_height,
            "lid_gap": self.lid_gap,
            "origin": self.origin.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "BoxDimensions":
        data = data or {}
        default = cls()
        return cls(
            width=data.get("width", default.width),
            base_height=data.get("base_height", default.base_height),
            lid_height=data.get("lid_height", default.lid_height),
            lid_gap=data.get("lid_gap", default.lid_gap),
            origin=data.get("origin", default.origin),
        )


def default_pivots(box: BoxDimensions) -> MechanismState:
    """Ground pivots just inside the base, floating pivots inside the closed lid."""
    lid = box.lid_rect()
    base = box.base_rect()
    ground_y = base.min_y + base.height * _BASE_DEPTH_FRACTION
    floating_y = lid.max_y - lid.height * _LID_RISE_FRACTION

    def x_at(name: str) -> float:
        return lid.min_x + lid.width * _PIVOT_X_FRACTIONS[name]

    return MechanismState(
        a=Point(x_at("A"), ground_y),
        b=Point(x_at("B"), floating_y),
        c=Point(x_at("C"), floating_y),
        d=Point(x_at("D"), ground_y),
    )


@dataclass(frozen=True)
class HingeConfig:
    box: BoxDimensions = field(default_factory=BoxDimensions)
    pivots: Optional[MechanismState] = None
    unlocked: bool = False

    def __post_init__(self):
        if self.pivots is None:
            object.__setattr__(self, "pivots", default_pivots(self.box))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "box": self.box.to_dict(),
            "pivots": self.pivots.to_dict(),
            "unlocked": bool(self.unlocked),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "HingeConfig":
        data = data or {}
        box = BoxDimensions.from_dict(data.get("box"))
        pivots = data.get("pivots")
        return cls(
            box=box,
            pivots=MechanismState.from_dict(pivots) if pivots is not None else None,
            unlocked=bool(data.get("unlocked", False)),
        )

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, text: str) -> "HingeConfig":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise InvalidGeometry(f"configuration is not valid JSON: {e}") from None
        if not isinstance(data, dict):
            raise InvalidGeometry("configuration must be a JSON object")
        config = cls.from_dict(data)
        logger.info("loaded configuration: box %.0fx%.0f, unlocked=%s",
                    config.box.width, config.box.base_height, config.unlocked)
        return config

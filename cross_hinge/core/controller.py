# -*- coding: utf-8 -*-
"""Hinge controller: the caller-side owner of the mechanism state.

The solver functions are stateless. This object keeps everything that has to
persist between calls:

- ``reference``: the pose at the last user edit, all travel is measured from it
- ``last_valid_c``: the continuity point threaded through every solve
- ``limits``: travel range of the reference in the current lock mode
- ``current`` / ``offset``: the pose last produced by :meth:`animate`

Views hook in through the ``on_change`` / ``on_limits`` callbacks given at
construction.
"""

from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from dataclasses import replace
from typing import Any, Callable, Dict, Iterator, List, Optional

from ..utils.constants import CLAMP_MAX_ITERATIONS, CLAMP_PRECISION
from .commands import EditCommand, EditHistory
from .config import BoxDimensions, HingeConfig, default_pivots
from .geometry import Point, as_point, rigid_transform
from .mechanism import AngleLimits, LockMode, MechanismState
from .range_finder import find_range
from .solver import check_linkage, solve_angle
from .synthesis import SynthesisResult

logger = logging.getLogger(__name__)


class HingeController:
    def __init__(
        self,
        config: Optional[HingeConfig] = None,
        on_change: Optional[Callable[["HingeController"], None]] = None,
        on_limits: Optional[Callable[[AngleLimits], None]] = None,
    ):
        self._on_change = on_change
        self._on_limits = on_limits
        self.history = EditHistory()

        self.config: HingeConfig = HingeConfig()
        self.reference: MechanismState = self.config.pivots
        self.lock_mode = LockMode.LOCKED
        self.last_valid_c: Point = self.reference.c
        self.limits = AngleLimits()
        self.current: MechanismState = self.reference
        self.offset = 0.0
        self.last_valid_percent = 0.0

        self._apply_config(config or HingeConfig())

    # ---------------- state ----------------
    @property
    def box(self) -> BoxDimensions:
        return self.config.box

    @property
    def unlocked(self) -> bool:
        return self.lock_mode == LockMode.UNLOCKED

    def _apply_config(self, config: HingeConfig):
        check_linkage(config.pivots)
        self.config = config
        self.reference = config.pivots
        self.lock_mode = LockMode.from_flag(config.unlocked)
        self.last_valid_c = self.reference.c
        self.current = self.reference
        self.offset = 0.0
        self.recompute_limits()
        self.last_valid_percent = self.limits.percent_of(0.0)
        self._changed()

    def _edit(self, desc: str, config: HingeConfig):
        # validate before touching anything so a failed edit leaves no trace
        check_linkage(config.pivots)
        logger.info("%s", desc)
        if config == self.config:
            # nothing to record, but the hinge still returns to its reference pose
            self._apply_config(config)
            return
        self.history.push(EditCommand(desc, self.config, config, self._apply_config))

    def _changed(self):
        if self._on_change:
            self._on_change(self)

    def recompute_limits(self) -> AngleLimits:
        with self.probing():
            self.limits = find_range(self.reference, self.lock_mode)
        if self._on_limits:
            self._on_limits(self.limits)
        return self.limits

    @contextmanager
    def probing(self) -> Iterator["HingeController"]:
        """Evaluate speculative solves without moving the continuity point."""
        saved = self.last_valid_c
        try:
            yield self
        finally:
            self.last_valid_c = saved

    # ---------------- edits ----------------
    def move_pivot(self, name: str, point: Any) -> MechanismState:
        key = str(name).upper()
        p = as_point(point, name=key)
        if key in ("A", "D"):
            p = self.box.base_rect().clamp(p)
        pivots = self.reference.replace(key, p)
        self._edit(f"Move pivot {key}", replace(self.config, pivots=pivots))
        return self.reference

    def set_box(self, box: BoxDimensions):
        base = box.base_rect()
        pivots = self.reference.replace("A", base.clamp(self.reference.a)).replace("D", base.clamp(self.reference.d))
        self._edit("Resize box", replace(self.config, box=box, pivots=pivots))

    def reset(self):
        self._edit("Reset pivots", replace(self.config, pivots=default_pivots(self.box)))

    def set_unlocked(self, unlocked: bool):
        self._edit("Unlock hinge" if unlocked else "Lock hinge", replace(self.config, unlocked=bool(unlocked)))

    def apply_synthesis(self, result: SynthesisResult):
        self._edit("Apply synthesis", replace(self.config, pivots=result.mechanism_state()))

    def load_config(self, config: HingeConfig):
        self._edit("Load configuration", config)

    def undo(self) -> bool:
        return self.history.undo()

    def redo(self) -> bool:
        return self.history.redo()

    # ---------------- motion ----------------
    def _solve(self, offset: float) -> Optional[MechanismState]:
        state = solve_angle(self.reference, self.lock_mode, self.last_valid_c, offset)
        if state is not None:
            self.last_valid_c = state.c
        return state

    def animate(self, offset: float) -> Optional[MechanismState]:
        """Move the input link to ``offset``; on failure nothing changes."""
        state = self._solve(float(offset))
        if state is None:
            return None
        self.current = state
        self.offset = float(offset)
        self._changed()
        return state

    def _percent_is_valid(self, percent: float) -> bool:
        offset = self.limits.offset_at(percent)
        return solve_angle(self.reference, self.lock_mode, self.last_valid_c, offset) is not None

    def clamp_to_valid_percent(self, target: float) -> float:
        """Nearest reachable slider position between the last valid one and ``target``."""
        with self.probing():
            pct = max(0.0, min(100.0, float(target)))
            if self._percent_is_valid(pct):
                return float(round(pct))

            lo = min(pct, self.last_valid_percent)
            hi = max(pct, self.last_valid_percent)
            lo_valid = self._percent_is_valid(lo)
            hi_valid = self._percent_is_valid(hi)
            if not lo_valid and not hi_valid:
                return self.last_valid_percent

            # left stays valid, right stays invalid
            left, right = (hi, lo) if hi_valid and not lo_valid else (lo, hi)
            for _ in range(CLAMP_MAX_ITERATIONS):
                mid = (left + right) / 2.0
                if self._percent_is_valid(mid):
                    left = mid
                else:
                    right = mid
                if abs(right - left) < CLAMP_PRECISION:
                    break

            for cand in (round(left), math.floor(left), math.ceil(left)):
                if self._percent_is_valid(cand):
                    return float(cand)
            return left

    def set_percent(self, percent: float) -> Optional[MechanismState]:
        pct = self.clamp_to_valid_percent(percent)
        state = self.animate(self.limits.offset_at(pct))
        if state is not None:
            self.last_valid_percent = pct
        return state

    # ---------------- queries ----------------
    def lid_outline(self, state: Optional[MechanismState] = None) -> List[Point]:
        """Corners of the closed lid carried along with the coupler of ``state``."""
        state = state or self.current
        xf = rigid_transform((self.reference.b, self.reference.c), (state.b, state.c))
        return xf.apply_many(self.box.lid_rect().corners())

    def pivots_in_base(self) -> bool:
        base = self.box.base_rect()
        return base.contains(self.reference.a) and base.contains(self.reference.d)

    def analysis(self) -> Dict[str, Any]:
        ref = self.reference
        crossing = ref.crossing_point()
        lo, hi = self.limits.degrees()
        crossed = ref.is_crossed()
        return {
            "pivots": ref.to_dict(),
            "link_lengths": ref.link_lengths()._asdict(),
            "crossed": crossed,
            "crossing_point": crossing.to_dict() if crossing is not None else None,
            "pivots_in_base": self.pivots_in_base(),
            "valid": crossed and self.pivots_in_base(),
            "lock_mode": self.lock_mode.value,
            "limits_deg": {"min": lo, "max": hi},
            "animatable": self.limits.is_animatable,
        }

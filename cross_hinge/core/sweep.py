# -*- coding: utf-8 -*-
"""Headless evaluation of a hinge over its travel."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np

from .mechanism import AngleLimits, LockMode, MechanismState
from .range_finder import find_range
from .solver import solve_angle_detailed


@dataclass
class SweepFrame:
    offset: float
    success: bool
    state: Optional[MechanismState] = None
    length_error: float = 0.0
    reason: str = ""

    def to_dict(self) -> Dict[str, Any]:
        rec: Dict[str, Any] = {
            "offset_deg": float(np.degrees(self.offset)),
            "success": self.success,
            "length_error": self.length_error,
        }
        if self.state is not None:
            rec["pivots"] = self.state.to_dict()
        if self.reason:
            rec["reason"] = self.reason
        return rec


@dataclass
class SweepReport:
    limits: AngleLimits
    frames: List[SweepFrame] = field(default_factory=list)

    @property
    def n_steps(self) -> int:
        return len(self.frames)

    @property
    def success(self) -> bool:
        return bool(self.frames) and all(f.success for f in self.frames)

    @property
    def success_rate(self) -> float:
        if not self.frames:
            return 0.0
        return float(np.mean([f.success for f in self.frames]))

    @property
    def max_length_error(self) -> float:
        errors = [f.length_error for f in self.frames if f.success]
        return float(np.max(errors)) if errors else 0.0

    def states(self) -> List[MechanismState]:
        return [f.state for f in self.frames if f.state is not None]

    def summary(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "success_rate": self.success_rate,
            "n_steps": self.n_steps,
            "max_length_error": self.max_length_error,
        }


def sweep(
    reference: MechanismState,
    lock_mode: LockMode,
    limits: Optional[AngleLimits] = None,
    steps: int = 50,
) -> SweepReport:
    """Step the input angle evenly across ``limits`` (found if not given).

    The continuity point is threaded frame to frame, starting from the
    reference C. A failed frame keeps the previous continuity point.
    """
    if limits is None:
        limits = find_range(reference, lock_mode)
    steps = max(int(steps), 1)

    ref_lengths = np.array(reference.link_lengths())
    last_valid_c = reference.c
    report = SweepReport(limits=limits)

    for offset in np.linspace(limits.min, limits.max, steps):
        outcome = solve_angle_detailed(reference, lock_mode, last_valid_c, float(offset))
        if outcome.state is None:
            report.frames.append(SweepFrame(float(offset), False, reason=outcome.reason.value))
            continue
        err = float(np.max(np.abs(np.array(outcome.state.link_lengths()) - ref_lengths)))
        report.frames.append(SweepFrame(float(offset), True, outcome.state, err))
        last_valid_c = outcome.state.c

    return report

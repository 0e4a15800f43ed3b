# -*- coding: utf-8 -*-
"""Travel limits of a hinge by binary search on the input angle offset."""

from __future__ import annotations

import logging
import math
from typing import Optional

from ..utils.constants import (
    RANGE_MAX_ITERATIONS,
    RANGE_PATH_STEP,
    RANGE_PRECISION,
    RANGE_SPAN_LOCKED,
    RANGE_SPAN_UNLOCKED,
)
from .geometry import Point
from .mechanism import AngleLimits, LockMode, MechanismState
from .solver import is_degenerate, solve_angle

logger = logging.getLogger(__name__)


def _walk(
    reference: MechanismState, lock_mode: LockMode, start: float, start_c: Point, end: float
) -> Optional[Point]:
    """C reached by stepping from ``start`` to ``end``, None if any step fails.

    Offsets a full turn apart are the same pose, so solving the end offset alone cannot
    tell a reachable far offset from one behind an unreachable gap.
    """
    n = max(1, int(math.ceil(abs(end - start) / RANGE_PATH_STEP)))
    c = start_c
    for i in range(1, n + 1):
        state = solve_angle(reference, lock_mode, c, start + (end - start) * i / n)
        if state is None:
            return None
        c = state.c
    return c


def _search_limit(reference: MechanismState, lock_mode: LockMode, high: float) -> float:
    # Every solve is anchored on the reference C or on a C walked out from it,
    # so the search never moves the caller's continuity point.
    low = 0.0
    low_c = reference.c
    best = 0.0
    for _ in range(RANGE_MAX_ITERATIONS):
        if abs(high - low) < RANGE_PRECISION:
            break
        mid = (low + high) / 2.0
        mid_c = None
        if solve_angle(reference, lock_mode, reference.c, mid) is not None:
            mid_c = _walk(reference, lock_mode, low, low_c, mid)
        if mid_c is not None:
            best = low = mid
            low_c = mid_c
        else:
            high = mid
    return best


def find_range(reference: MechanismState, lock_mode: LockMode) -> AngleLimits:
    """Largest contiguous interval of offsets around 0 the hinge can reach.

    A gap narrower than the path step between two accepted bisection
    points is not detected.
    """
    if is_degenerate(reference):
        logger.info("degenerate linkage, no travel")
        return AngleLimits(0.0, 0.0)

    span = RANGE_SPAN_UNLOCKED if LockMode(lock_mode) == LockMode.UNLOCKED else RANGE_SPAN_LOCKED
    limits = AngleLimits(
        min=_search_limit(reference, lock_mode, -span),
        max=_search_limit(reference, lock_mode, span),
    )
    lo, hi = limits.degrees()
    logger.info("range (%s): %.3f deg .. %.3f deg", LockMode(lock_mode).value, lo, hi)
    return limits

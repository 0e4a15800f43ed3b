# -*- coding: utf-8 -*-
"""Closed-form position solver for the crossed four-bar.

The input link A-B is rotated by an angle offset from the reference pose and
the floating joint C is recovered from the two circles it must lie on. The
solver is stateless: branch continuity comes from ``last_valid_c``, which the
caller owns and threads from one call to the next.

Unreachable angles are not errors. They return ``None`` (or a
:class:`SolveOutcome` carrying the reason), the way the sketch constraint
primitives return ``False`` instead of raising.
"""

from __future__ import annotations

import logging
import math
from typing import List, NamedTuple, Optional, Sequence

from ..utils.constants import MIN_LINK_LENGTH
from .errors import DegenerateLinkage, FailureReason
from .geometry import Orientation, Point, as_point, circle_circle_intersection, distance, orientation, segments_intersect
from .mechanism import LockMode, MechanismState

logger = logging.getLogger(__name__)


class SolveOutcome(NamedTuple):
    state: Optional[MechanismState]
    reason: Optional[FailureReason] = None

    @property
    def ok(self) -> bool:
        return self.state is not None


def is_degenerate(reference: MechanismState) -> bool:
    lengths = reference.link_lengths()
    return min(lengths.input, lengths.coupler, lengths.output) < MIN_LINK_LENGTH


def check_linkage(reference: MechanismState) -> None:
    """Raise DegenerateLinkage if a moving link is too short to define a rotation."""
    lengths = reference.link_lengths()
    for name in ("input", "coupler", "output"):
        value = getattr(lengths, name)
        if value < MIN_LINK_LENGTH:
            raise DegenerateLinkage(f"{name} link is {value:.4g} long (minimum {MIN_LINK_LENGTH})")


def _flipped(before: Orientation, after: Orientation) -> bool:
    # A collinear value on either side does not count as a flip.
    if before == Orientation.COLLINEAR or after == Orientation.COLLINEAR:
        return False
    return before != after


def _pick_branch(
    candidates: List[Point],
    d: Point,
    b: Point,
    last_valid_c: Optional[Point],
    initial_orientation: Orientation,
) -> Point:
    if len(candidates) == 1:
        return candidates[0]
    if last_valid_c is not None:
        return min(candidates, key=lambda p: distance(p, last_valid_c))
    for cand in candidates:
        if orientation(d, b, cand) == initial_orientation:
            return cand
    return candidates[0]


def _is_valid(reference: MechanismState, new_b: Point, new_c: Point) -> bool:
    a, d = reference.a, reference.d
    if not segments_intersect(a, new_b, new_c, d):
        return False
    if _flipped(orientation(a, d, reference.b), orientation(a, d, new_b)):
        return False
    if _flipped(orientation(reference.c, a, d), orientation(new_c, a, d)):
        return False
    return True


def solve_angle_detailed(
    reference: MechanismState,
    lock_mode: LockMode,
    last_valid_c: Optional[Sequence[float]],
    angle_offset: float,
    initial_orientation: Optional[Orientation] = None,
) -> SolveOutcome:
    """Solve the pose at ``reference.input_angle + angle_offset``.

    Failure is reported through :attr:`SolveOutcome.reason`. The chosen C branch
    is never swapped for its mirror image when it fails the locked checks.
    """
    if is_degenerate(reference):
        return SolveOutcome(None, FailureReason.DEGENERATE_LINKAGE)

    lengths = reference.link_lengths()
    a, d = reference.a, reference.d

    theta = reference.input_angle + float(angle_offset)
    new_b = Point(a.x + lengths.input * math.cos(theta), a.y + lengths.input * math.sin(theta))

    candidates = circle_circle_intersection(new_b, lengths.coupler, d, lengths.output)
    if not candidates:
        return SolveOutcome(None, FailureReason.UNREACHABLE)

    if initial_orientation is None:
        initial_orientation = orientation(d, reference.b, reference.c)
    prev_c = as_point(last_valid_c, name="last_valid_c") if last_valid_c is not None else None
    new_c = _pick_branch(candidates, d, new_b, prev_c, initial_orientation)

    if LockMode(lock_mode) == LockMode.LOCKED and not _is_valid(reference, new_b, new_c):
        return SolveOutcome(None, FailureReason.CONFIGURATION_INVALID)

    return SolveOutcome(MechanismState(a, new_b, new_c, d))


def solve_angle(
    reference: MechanismState,
    lock_mode: LockMode,
    last_valid_c: Optional[Sequence[float]],
    angle_offset: float,
    initial_orientation: Optional[Orientation] = None,
) -> Optional[MechanismState]:
    """Return the solved state, or None if the angle cannot be reached."""
    outcome = solve_angle_detailed(reference, lock_mode, last_valid_c, angle_offset, initial_orientation)
    if outcome.state is None:
        logger.debug("offset %.6f rad rejected: %s", angle_offset, outcome.reason.value)
    return outcome.state

import math

import numpy as np
import pytest

from cross_hinge.core.errors import DegenerateLinkage, FailureReason
from cross_hinge.core.geometry import Orientation, orientation
from cross_hinge.core.mechanism import LockMode, MechanismState
from cross_hinge.core.range_finder import find_range
from cross_hinge.core.solver import check_linkage, solve_angle, solve_angle_detailed


def assert_same_pivots(state, other):
    for p, q in zip((state.a, state.b, state.c, state.d), (other.a, other.b, other.c, other.d)):
        assert p == pytest.approx(q, abs=1e-9)


@pytest.mark.parametrize("mode", [LockMode.LOCKED, LockMode.UNLOCKED])
def test_zero_offset_reproduces_reference(reference, mode):
    state = solve_angle(reference, mode, reference.c, 0.0)
    assert state is not None
    assert_same_pivots(state, reference)


def test_first_solve_follows_reference_branch(reference):
    state = solve_angle(reference, LockMode.LOCKED, None, 0.0)
    assert state is not None
    assert state.c == pytest.approx(reference.c, abs=1e-9)


def test_links_stay_rigid(reference):
    lengths = reference.link_lengths()
    last_c = reference.c
    for offset in np.linspace(-0.25, 0.08, 34):
        state = solve_angle(reference, LockMode.LOCKED, last_c, float(offset))
        assert state is not None
        assert state.link_lengths() == pytest.approx(lengths, abs=1e-6)
        assert state.a == reference.a and state.d == reference.d
        assert state.is_crossed()
        last_c = state.c


def test_unreachable_angle(reference):
    # B swings to the far side of A, too far from D for the coupler to close
    outcome = solve_angle_detailed(reference, LockMode.UNLOCKED, reference.c, math.pi)
    assert outcome.state is None
    assert outcome.reason == FailureReason.UNREACHABLE
    assert solve_angle(reference, LockMode.LOCKED, reference.c, math.pi) is None


def test_lock_mode_gates_uncrossed_pose(reference):
    locked = solve_angle_detailed(reference, LockMode.LOCKED, reference.c, -0.6)
    assert locked.state is None
    assert locked.reason == FailureReason.CONFIGURATION_INVALID

    unlocked = solve_angle(reference, LockMode.UNLOCKED, reference.c, -0.6)
    assert unlocked is not None
    assert unlocked.link_lengths() == pytest.approx(reference.link_lengths(), abs=1e-6)


def test_degenerate_linkage_reported_not_raised():
    state = MechanismState((0, 0), (0.5, 0), (100, 0), (200, 0))
    outcome = solve_angle_detailed(state, LockMode.LOCKED, state.c, 0.1)
    assert outcome.state is None
    assert outcome.reason == FailureReason.DEGENERATE_LINKAGE
    with pytest.raises(DegenerateLinkage):
        check_linkage(state)


def test_check_linkage_accepts_reference(reference):
    check_linkage(reference)


@pytest.mark.parametrize("direction", [1, -1])
def test_stepping_stops_at_reported_limit(reference, direction):
    limits = find_range(reference, LockMode.LOCKED)
    step = 0.005
    last_c = reference.c
    offset = 0.0
    while True:
        state = solve_angle(reference, LockMode.LOCKED, last_c, offset + direction * step)
        if state is None:
            break
        assert state.link_lengths().coupler == pytest.approx(reference.link_lengths().coupler, abs=1e-6)
        offset += direction * step
        last_c = state.c
        assert abs(offset) < 2 * math.pi

    limit = limits.max if direction > 0 else limits.min
    assert abs(offset - limit) <= step + 1e-3


def test_initial_orientation_selects_mirror_branch(reference):
    ref_turn = orientation(reference.d, reference.b, reference.c)
    mirror_turn = Orientation.CLOCKWISE if ref_turn == Orientation.COUNTERCLOCKWISE else Orientation.COUNTERCLOCKWISE
    state = solve_angle(reference, LockMode.UNLOCKED, None, 0.0, initial_orientation=mirror_turn)
    assert state is not None
    assert state.c == pytest.approx((500, 250), abs=1e-6)

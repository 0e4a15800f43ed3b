import math

import pytest

from cross_hinge.core.mechanism import AngleLimits, LockMode, MechanismState
from cross_hinge.core.range_finder import find_range
from cross_hinge.core.solver import solve_angle


def test_locked_limits_bracket_reference(reference):
    limits = find_range(reference, LockMode.LOCKED)
    assert limits.min < 0.0 < limits.max
    # B closes to within |l_cd - l_bc| of D just past the reference
    assert limits.max == pytest.approx(0.0836, abs=1e-3)


def test_limits_are_tight(reference):
    limits = find_range(reference, LockMode.LOCKED)
    for edge, beyond in ((limits.max, limits.max + 1e-3), (limits.min, limits.min - 1e-3)):
        assert solve_angle(reference, LockMode.LOCKED, reference.c, edge) is not None
        assert solve_angle(reference, LockMode.LOCKED, reference.c, beyond) is None


def _walk_out(reference, mode, limit, step=0.01):
    n = max(1, int(abs(limit) / step))
    last_c = reference.c
    for i in range(1, n + 1):
        state = solve_angle(reference, mode, last_c, limit * i / n)
        assert state is not None, f"offset {limit * i / n:.4f} inside the range is unreachable"
        last_c = state.c


def test_unlocked_range_is_reachable_throughout(reference):
    locked = find_range(reference, LockMode.LOCKED)
    unlocked = find_range(reference, LockMode.UNLOCKED)
    assert unlocked.min <= locked.min
    assert unlocked.max >= locked.max
    # the input link of this hinge cannot turn past B-D full extension
    assert unlocked.span < 2 * math.pi
    assert not unlocked.contains(math.pi) and not unlocked.contains(-math.pi)
    _walk_out(reference, LockMode.UNLOCKED, unlocked.max)
    _walk_out(reference, LockMode.UNLOCKED, unlocked.min)


def test_full_turn_crank_uses_wide_bracket():
    # Grashof crank: the 10-unit input link turns all the way round
    crank = MechanismState((0, 0), (10, 0), (86.1, 48.05), (100, 0))
    limits = find_range(crank, LockMode.UNLOCKED)
    assert limits.max > 3.9 * math.pi
    assert limits.min < -3.9 * math.pi
    _walk_out(crank, LockMode.UNLOCKED, limits.max, step=0.05)


def test_degenerate_reference_has_no_travel():
    state = MechanismState((0, 0), (0, 0.2), (50, 0), (100, 0))
    assert find_range(state, LockMode.LOCKED) == AngleLimits(0.0, 0.0)


def test_range_search_leaves_reference_untouched(reference):
    before = reference.to_dict()
    find_range(reference, LockMode.LOCKED)
    assert reference.to_dict() == before


def test_angle_limits_slider_mapping():
    limits = AngleLimits(-0.5, 1.5)
    assert limits.span == 2.0
    assert limits.offset_at(0) == -0.5
    assert limits.offset_at(100) == 1.5
    assert limits.offset_at(25) == 0.0
    assert limits.percent_of(0.0) == pytest.approx(25.0)
    assert limits.contains(1.0) and not limits.contains(2.0)
    assert AngleLimits().percent_of(0.0) == 0.0

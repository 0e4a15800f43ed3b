import math

from cross_hinge.core.mechanism import AngleLimits, LockMode
from cross_hinge.core.sweep import sweep


def test_sweep_over_found_range_is_rigid(reference):
    report = sweep(reference, LockMode.LOCKED, steps=30)
    assert report.n_steps == 30
    assert report.success
    assert report.success_rate == 1.0
    assert report.max_length_error < 1e-6
    assert report.frames[0].offset == report.limits.min
    assert report.frames[-1].offset == report.limits.max
    assert all(s.is_crossed() for s in report.states())


def test_sweep_reports_unreachable_frames(reference):
    report = sweep(reference, LockMode.UNLOCKED, AngleLimits(0.0, math.pi), steps=5)
    assert not report.success
    assert 0.0 < report.success_rate < 1.0
    last = report.frames[-1]
    assert not last.success and last.state is None
    assert last.reason == "unreachable"

    summary = report.summary()
    assert summary["n_steps"] == 5
    assert set(summary) == {"success", "success_rate", "n_steps", "max_length_error"}
    assert last.to_dict()["reason"] == "unreachable"


def test_unlocked_sweep_over_found_range_succeeds(reference):
    report = sweep(reference, LockMode.UNLOCKED, steps=50)
    assert report.success
    assert report.success_rate == 1.0
    assert report.max_length_error < 1e-6

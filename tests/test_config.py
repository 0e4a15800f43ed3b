import pytest

from cross_hinge.core.config import BoxDimensions, HingeConfig, Rect, default_pivots
from cross_hinge.core.errors import InvalidGeometry


def test_default_pivots_match_reference_fixture(reference):
    pivots = default_pivots(BoxDimensions())
    for name, expected in reference.pivots().items():
        assert pivots.pivots()[name] == pytest.approx(expected)


def test_default_pivots_sit_in_their_regions():
    box = BoxDimensions(width=600, base_height=120, lid_height=50, lid_gap=5)
    pivots = default_pivots(box)
    assert box.base_rect().contains(pivots.a) and box.base_rect().contains(pivots.d)
    assert box.lid_rect().contains(pivots.b) and box.lid_rect().contains(pivots.c)
    assert pivots.is_crossed()


def test_box_rects_stack_lid_on_base():
    box = BoxDimensions(width=100, base_height=40, lid_height=10, lid_gap=2, origin=(0, 0))
    assert box.lid_rect() == Rect(0, 0, 100, 10)
    assert box.base_rect() == Rect(0, 12, 100, 52)


def test_rect_clamp():
    r = Rect(0, 0, 10, 5)
    assert r.clamp((20, -3)) == (10, 0)
    assert r.contains((5, 5))
    assert not r.contains((5, 5.1))


@pytest.mark.parametrize("kwargs", [{"width": 0}, {"base_height": -1}, {"lid_height": "tall"}, {"lid_gap": -0.5}])
def test_box_rejects_bad_dimensions(kwargs):
    with pytest.raises(InvalidGeometry):
        BoxDimensions(**kwargs)


def test_json_round_trip():
    config = HingeConfig(
        box=BoxDimensions(width=640, base_height=200, lid_height=60, lid_gap=1.5),
        pivots=default_pivots(BoxDimensions(width=640, base_height=200, lid_height=60, lid_gap=1.5)),
        unlocked=True,
    )
    assert HingeConfig.from_json(config.to_json()) == config


def test_from_dict_fills_defaults():
    config = HingeConfig.from_dict({})
    assert config.box == BoxDimensions()
    assert config.pivots == default_pivots(BoxDimensions())
    assert config.unlocked is False


def test_missing_pivot_is_rejected(reference):
    data = HingeConfig(pivots=reference).to_dict()
    del data["pivots"]["C"]
    with pytest.raises(InvalidGeometry):
        HingeConfig.from_dict(data)


@pytest.mark.parametrize("text", ["not json", "[1, 2]"])
def test_from_json_rejects_bad_documents(text):
    with pytest.raises(InvalidGeometry):
        HingeConfig.from_json(text)

import pytest

from honk.core.constants import RectAnchor
from honk.modules.vision.zone import Zone, ZoneError

SCREEN = Zone(0, 0, 400, 300)


def test_zone_rejects_non_positive_size():
    with pytest.raises(ZoneError):
        Zone(0, 0, 0, 10)
    with pytest.raises(ZoneError):
        Zone(0, 0, 10, -1)


def test_from_corners_and_edges():
    z = Zone.from_corners(10, 20, 50, 40)
    assert z.as_tuple() == (10, 20, 40, 20)
    assert (z.right, z.bottom) == (50, 40)
    assert z.center == (30, 30)
    assert z.area == 800


def test_contains_point_is_half_open():
    z = Zone(10, 10, 10, 10)
    assert z.contains_point((10, 10))
    assert z.contains_point((19, 19))
    assert not z.contains_point((20, 10))


def test_expand_clips_to_bounds():
    box = Zone(100, 100, 40, 20)
    assert box.expand(20, SCREEN) == Zone(80, 80, 80, 60)
    assert Zone(5, 5, 10, 10).expand(20, SCREEN) == Zone(0, 0, 35, 35)


def test_intersect_and_clip():
    a = Zone(0, 0, 50, 50)
    assert a.intersect(Zone(40, 40, 50, 50)) == Zone(40, 40, 10, 10)
    assert a.intersect(Zone(60, 60, 5, 5)) is None
    with pytest.raises(ZoneError):
        Zone(500, 500, 10, 10).clip_to(SCREEN)


def test_local_to_requires_containment():
    outer = Zone(100, 100, 50, 50)
    assert Zone(110, 120, 10, 10).local_to(outer) == Zone(10, 20, 10, 10)
    with pytest.raises(ZoneError):
        Zone(90, 120, 20, 10).local_to(outer)


@pytest.mark.parametrize(
    "anchor, expected",
    [
        (RectAnchor.TOP_LEFT, Zone(100, 100, 20, 10)),
        (RectAnchor.TOP_RIGHT, Zone(80, 100, 20, 10)),
        (RectAnchor.BOTTOM_LEFT, Zone(100, 90, 20, 10)),
        (RectAnchor.BOTTOM_RIGHT, Zone(80, 90, 20, 10)),
        (RectAnchor.CENTER, Zone(90, 95, 20, 10)),
    ],
)
def test_from_anchor(anchor, expected):
    assert Zone.from_anchor((100, 100), 20, 10, anchor, SCREEN) == expected


def test_from_anchor_center_is_clipped_near_edge():
    z = Zone.from_anchor((30, 150), 150, 150, RectAnchor.CENTER, SCREEN)
    assert z == Zone(0, 75, 105, 150)
    assert z.contains_point((30, 150))


@pytest.mark.parametrize(
    "point, anchor, expected",
    [
        ((0, 150), RectAnchor.CENTER, Zone(0, 140, 10, 20)),
        ((0, 0), RectAnchor.CENTER, Zone(0, 0, 10, 10)),
        ((0, 50), RectAnchor.TOP_RIGHT, Zone(0, 50, 1, 20)),
        ((50, 0), RectAnchor.BOTTOM_LEFT, Zone(50, 0, 20, 1)),
        ((0, 0), RectAnchor.BOTTOM_RIGHT, Zone(0, 0, 1, 1)),
    ],
)
def test_from_anchor_on_screen_edge_keeps_the_point(point, anchor, expected):
    z = Zone.from_anchor(point, 20, 20, anchor, SCREEN)
    assert z == expected
    assert z.contains_point(point)


def test_from_anchor_point_outside_bounds():
    with pytest.raises(ZoneError):
        Zone.from_anchor((400, 10), 10, 10, RectAnchor.CENTER, SCREEN)

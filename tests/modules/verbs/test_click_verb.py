import pytest

from honk.core.constants import MouseButton, Outcome
from honk.modules.capture.base import CaptureError
from honk.modules.templates.registry import UnknownTemplateError
from honk.modules.verbs.types import VerbRequest
from honk.modules.vision.zone import Zone, ZoneError

BUTTON = Zone(100, 100, 40, 20)
GREEN = (0, 255, 0)


@pytest.fixture()
def button_screen(screen, registry, patch_factory):
    patch = patch_factory(BUTTON.w, BUTTON.h, seed=11)
    screen.paste(patch, BUTTON.x, BUTTON.y)
    registry.add("button-A", patch)
    return screen


def test_click_turns_check_zone_green(button_screen, fake_input, make_engine):
    fake_input.on_click = lambda x, y: button_screen.paint(BUTTON, GREEN)

    result = make_engine().execute(VerbRequest.click("button-A"))

    assert result.outcome == Outcome.SUCCEEDED
    assert result.ok
    # match box (100,100)-(140,120) grown by the 20px margin
    assert result.zone == Zone(80, 80, 80, 60)
    assert result.match.location == (100, 100)
    assert result.steps == 1
    assert fake_input.kinds() == ["move", "click"]
    assert fake_input.calls[1] == ("click", 120, 110, MouseButton.LEFT, 1)


def test_click_on_absent_template_has_no_side_effects(screen, registry, fake_input, make_engine, patch_factory):
    registry.add("button-A", patch_factory(40, 20, seed=11))

    result = make_engine().execute(VerbRequest.click("button-A"))

    assert result.outcome == Outcome.TARGET_NOT_FOUND
    assert not result.ok
    assert fake_input.calls == []
    assert result.snapshot is not None
    assert result.elapsed >= 1.0


def test_click_without_visible_effect_is_no_state_change(button_screen, fake_input, make_engine, clock):
    result = make_engine().execute(VerbRequest.click("button-A"))

    assert result.outcome == Outcome.NO_STATE_CHANGE
    assert result.ok
    assert fake_input.kinds() == ["move", "click"]
    assert result.elapsed >= 0.5


def test_double_right_click(button_screen, fake_input, make_engine):
    make_engine().execute(VerbRequest.click("button-A", button=MouseButton.RIGHT, double=True))
    assert fake_input.calls[1] == ("click", 120, 110, MouseButton.RIGHT, 2)


def test_click_absolute_point_uses_square_check_zone(screen, fake_input, make_engine):
    fake_input.on_click = lambda x, y: screen.paint(Zone(x - 5, y - 5, 10, 10), GREEN)

    result = make_engine().execute(VerbRequest.click(point=(200, 150)))

    assert result.outcome == Outcome.SUCCEEDED
    assert result.zone == Zone(125, 75, 150, 150)
    assert fake_input.calls[1][:3] == ("click", 200, 150)


def test_explicit_check_zone_is_watched(button_screen, fake_input, make_engine):
    status = Zone(300, 250, 60, 20)
    fake_input.on_click = lambda x, y: button_screen.paint(status, GREEN)

    result = make_engine().execute(VerbRequest.click("button-A", check_zone=status))

    assert result.outcome == Outcome.SUCCEEDED
    assert result.zone == status


@pytest.mark.parametrize("point", [(0, 150), (200, 0), (399, 299)])
def test_click_point_on_screen_edge_is_observed(screen, fake_input, make_engine, point):
    result = make_engine().execute(VerbRequest.click(point=point))

    assert result.outcome == Outcome.NO_STATE_CHANGE
    assert result.zone.contains_point(point)
    assert fake_input.calls[1][:3] == ("click",) + point


def test_check_zone_outside_screen_rejected_before_input(screen, fake_input, make_engine):
    with pytest.raises(ZoneError):
        make_engine().execute(VerbRequest.click(point=(200, 150), check_zone=Zone(380, 290, 50, 50)))
    assert fake_input.calls == []
    assert screen.grabs == []


def test_unknown_template_raises_before_touching_screen(screen, fake_input, make_engine):
    with pytest.raises(UnknownTemplateError):
        make_engine().execute(VerbRequest.click("nope"))
    assert screen.grabs == []
    assert fake_input.calls == []


def test_capture_failure_propagates(button_screen, make_engine):
    def _broken(zone):
        raise OSError("display locked")

    button_screen._grab = _broken
    with pytest.raises(CaptureError):
        make_engine().execute(VerbRequest.click("button-A"))


def test_not_found_writes_debug_images(screen, registry, make_engine, patch_factory, tmp_path):
    registry.add("button-A", patch_factory(40, 20, seed=11))

    engine = make_engine(save_debug_images=True, debug_dir=str(tmp_path))
    result = engine.execute(VerbRequest.click("button-A"))

    assert result.outcome == Outcome.TARGET_NOT_FOUND
    written = sorted(p.name for p in tmp_path.iterdir())
    assert any(name.endswith("_click_button-A.png") for name in written)
    assert any(name.endswith("_heatmap.png") for name in written)

import pytest

from honk.core.constants import Outcome, ScrollDirection
from honk.modules.verbs.types import VerbRequest
from honk.modules.vision.zone import Zone

VIEWPORT = Zone(0, 0, 200, 200)


class _FakeList:
    """Viewport content that advances one row per scroll until ``length`` rows have gone by."""

    def __init__(self, screen, length, marker=None, marker_from=None):
        self.screen = screen
        self.length = length
        self.position = 0
        self.marker = marker
        self.marker_from = marker_from
        self.render()

    def scroll(self, x, y):
        if self.length is None or self.position < self.length:
            self.position += 1
        self.render()

    def render(self):
        self.screen.paint(VIEWPORT, (self.position * 20) % 250)
        if self.marker is not None and self.position >= self.marker_from:
            self.screen.paste(self.marker, 50, 80)


@pytest.mark.parametrize("length", [0, 1, 3, 6])
def test_scroll_converges_in_length_plus_one_steps(screen, fake_input, make_engine, length):
    feed = _FakeList(screen, length)
    fake_input.on_scroll = feed.scroll

    result = make_engine().execute(VerbRequest.scroll(VIEWPORT, timeout=60))

    assert result.outcome == Outcome.CONVERGED
    assert result.steps == length + 1
    assert fake_input.kinds().count("scroll") == length + 1
    assert result.zone == VIEWPORT


def test_scroll_anchors_pointer_in_viewport(screen, fake_input, make_engine):
    fake_input.on_scroll = _FakeList(screen, 1).scroll

    make_engine().execute(VerbRequest.scroll(VIEWPORT, direction=ScrollDirection.UP, clicks=5, timeout=60))

    assert fake_input.calls[0] == ("move", 100, 100)
    assert fake_input.calls[1] == ("scroll", 100, 100, ScrollDirection.UP, 5)


def test_scroll_still_moving_after_max_steps_times_out(screen, fake_input, make_engine):
    fake_input.on_scroll = _FakeList(screen, None).scroll

    result = make_engine().execute(VerbRequest.scroll(VIEWPORT, max_steps=5, timeout=60))

    assert result.outcome == Outcome.TIMED_OUT
    assert result.steps == 5


def test_scroll_deadline(screen, fake_input, make_engine):
    fake_input.on_scroll = _FakeList(screen, 0).scroll

    # one unchanged step needs the full 0.5s verification window
    result = make_engine().execute(VerbRequest.scroll(VIEWPORT, timeout=0.2))

    assert result.outcome == Outcome.TIMED_OUT
    assert result.elapsed >= 0.2


def test_seek_stops_when_template_appears(screen, registry, fake_input, make_engine, patch_factory):
    marker = patch_factory(30, 20, seed=21)
    registry.add("row-target", marker)
    fake_input.on_scroll = _FakeList(screen, 10, marker=marker, marker_from=3).scroll

    result = make_engine().execute(VerbRequest.scroll(VIEWPORT, seek_template="row-target", timeout=60))

    assert result.outcome == Outcome.SUCCEEDED
    assert result.steps == 3
    assert result.match.location == (50, 80)


def test_seek_reaching_list_end_is_not_found(screen, registry, fake_input, make_engine, patch_factory):
    registry.add("row-target", patch_factory(30, 20, seed=21))
    fake_input.on_scroll = _FakeList(screen, 3).scroll

    result = make_engine().execute(VerbRequest.scroll(VIEWPORT, seek_template="row-target", timeout=60))

    assert result.outcome == Outcome.TARGET_NOT_FOUND
    assert result.steps == 4


def test_seek_already_visible_does_not_scroll(screen, registry, fake_input, make_engine, patch_factory):
    marker = patch_factory(30, 20, seed=21)
    registry.add("row-target", marker)
    screen.paste(marker, 50, 80)

    result = make_engine().execute(VerbRequest.scroll(VIEWPORT, seek_template="row-target"))

    assert result.outcome == Outcome.SUCCEEDED
    assert "scroll" not in fake_input.kinds()


def test_viewport_from_point_is_resolved_once(screen, fake_input, make_engine):
    result = make_engine().execute(VerbRequest.scroll(point=(100, 100), timeout=60))

    assert result.outcome == Outcome.CONVERGED
    assert result.zone == Zone(25, 25, 150, 150)
    assert set(screen.grabs) == {Zone(25, 25, 150, 150)}

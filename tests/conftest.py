import os

# keep test runs from writing log files into the working tree
os.environ.setdefault("HONK_LOG_FILE_ENABLED", "false")

import numpy as np
import pytest

from honk.core.config import Settings
from honk.core.thread_pool import shutdown_pools
from honk.core.timeutils import Clock
from honk.modules.capture.base import BaseCapture
from honk.modules.desktop.base import BaseInput
from honk.modules.ocr.condition import evaluate
from honk.modules.templates.registry import TemplateRegistry
from honk.modules.verbs.engine import VerbEngine
from honk.modules.vision.zone import Zone

SCREEN_W, SCREEN_H = 400, 300
GRAY = (128, 128, 128)


class FakeClock(Clock):
    """Manual clock: sleeping advances time instantly."""

    def __init__(self, start: float = 0.0):
        self.t = start
        self.sleeps = []

    def now(self) -> float:
        return self.t

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            self.sleeps.append(seconds)
            self.t += seconds


class FakeScreen(BaseCapture):
    """Capture backed by a mutable numpy BGR frame."""

    def __init__(self, clock, w: int = SCREEN_W, h: int = SCREEN_H, fill=GRAY):
        super().__init__(clock)
        self.pixels = np.full((h, w, 3), fill, dtype=np.uint8)
        self.grabs = []

    def screen_zone(self) -> Zone:
        h, w = self.pixels.shape[:2]
        return Zone(0, 0, w, h)

    def _grab(self, zone: Zone) -> np.ndarray:
        self.grabs.append(zone)
        return self.pixels[zone.y : zone.bottom, zone.x : zone.right].copy()

    def paint(self, zone: Zone, color) -> None:
        self.pixels[zone.y : zone.bottom, zone.x : zone.right] = color

    def paste(self, image: np.ndarray, x: int, y: int) -> None:
        h, w = image.shape[:2]
        self.pixels[y : y + h, x : x + w] = image


class FakeInput(BaseInput):
    """Records every injected event; optional hooks let a test mutate the screen."""

    def __init__(self):
        self.calls = []
        self.on_move = None
        self.on_click = None
        self.on_scroll = None
        self.on_type = None
        self.on_key = None

    def _fire(self, hook, *args):
        if hook is not None:
            hook(*args)

    def move_to(self, x, y):
        self.calls.append(("move", x, y))
        self._fire(self.on_move, x, y)

    def click(self, x, y, button="left", clicks=1):
        self.calls.append(("click", x, y, button, clicks))
        self._fire(self.on_click, x, y)

    def scroll(self, x, y, direction, clicks):
        self.calls.append(("scroll", x, y, direction, clicks))
        self._fire(self.on_scroll, x, y)

    def type_text(self, text):
        self.calls.append(("type", text))
        self._fire(self.on_type, text)

    def press_key(self, key):
        self.calls.append(("key", key))
        self._fire(self.on_key, key)

    def kinds(self):
        return [c[0] for c in self.calls]


class StubTextBackend:
    """Deterministic text backend: returns fixed text, evaluates with the built-in grammar."""

    def __init__(self, text: str = ""):
        self.text = text
        self.zones = []

    def extract_text(self, snapshot):
        self.zones.append(snapshot.zone)
        return self.text

    def evaluate_condition(self, text, condition):
        return evaluate(text, condition)


def textured(w: int, h: int, seed: int = 0) -> np.ndarray:
    """Random BGR patch; unique enough to match only where it was pasted."""
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=(h, w, 3), dtype=np.uint8)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def screen(clock):
    return FakeScreen(clock)


@pytest.fixture()
def fake_input():
    return FakeInput()


@pytest.fixture()
def registry():
    return TemplateRegistry()


@pytest.fixture()
def test_settings():
    return Settings(
        poll_interval_ms=100,
        verb_timeout_ms=1000,
        verify_window_ms=500,
        hover_poll_ms=100,
        check_timeout_ms=2000,
        match_scale_steps=0,
        log_file_enabled=False,
        save_debug_images=False,
    )


@pytest.fixture()
def make_engine(screen, fake_input, registry, test_settings, clock):
    def _make(text_backend=None, **overrides):
        settings = test_settings.model_copy(update=overrides) if overrides else test_settings
        return VerbEngine(
            screen,
            fake_input,
            registry,
            text_backend=text_backend,
            settings=settings,
            clock=clock,
        )

    return _make


@pytest.fixture()
def patch_factory():
    return textured


@pytest.fixture(autouse=True)
def _shutdown_pools():
    yield
    shutdown_pools()


@pytest.fixture()
def stub_backend():
    return StubTextBackend

import threading

import pytest

from honk.core.constants import Outcome
from honk.modules.ocr.backend import TextBackendError
from honk.modules.verbs.types import VerbRequest
from honk.modules.vision.zone import Zone

LABEL = Zone(50, 50, 40, 20)
STATUS = Zone(200, 20, 120, 30)


def test_check_reads_zone_and_evaluates(screen, make_engine, stub_backend):
    backend = stub_backend("Saved 3 items")

    result = make_engine(text_backend=backend).execute(
        VerbRequest.check(condition='contains "saved" and >= 3', check_zone=STATUS)
    )

    assert result.outcome == Outcome.SUCCEEDED
    assert result.value == "Saved 3 items"
    assert result.verdict is True
    assert backend.zones == [STATUS]
    assert result.snapshot.zone == STATUS


def test_check_false_condition_is_still_a_completed_check(screen, make_engine, stub_backend):
    backend = stub_backend("Error")
    result = make_engine(text_backend=backend).execute(
        VerbRequest.check(condition='contains "saved"', check_zone=STATUS)
    )
    assert result.outcome == Outcome.SUCCEEDED
    assert result.verdict is False


def test_check_without_condition_only_extracts(screen, make_engine, stub_backend):
    backend = stub_backend("123")
    result = make_engine(text_backend=backend).execute(VerbRequest.check(check_zone=STATUS))
    assert result.value == "123"
    assert result.verdict is None


def test_check_zone_relative_to_template(screen, registry, make_engine, patch_factory, stub_backend):
    patch = patch_factory(LABEL.w, LABEL.h, seed=41)
    screen.paste(patch, LABEL.x, LABEL.y)
    registry.add("price-label", patch)
    backend = stub_backend("$12")

    result = make_engine(text_backend=backend).execute(
        VerbRequest.check("price-label", condition="> 10", relative_zone=Zone(45, 0, 60, 20))
    )

    assert result.outcome == Outcome.SUCCEEDED
    assert backend.zones == [Zone(95, 50, 60, 20)]
    assert result.verdict is True


def test_check_template_absent(screen, registry, make_engine, patch_factory, stub_backend):
    registry.add("price-label", patch_factory(40, 20, seed=41))
    backend = stub_backend("x")

    result = make_engine(text_backend=backend).execute(
        VerbRequest.check("price-label", condition="not empty", timeout=1.0)
    )

    assert result.outcome == Outcome.TARGET_NOT_FOUND
    assert backend.zones == []


def test_check_backend_timeout(screen, make_engine, stub_backend):
    release = threading.Event()

    class _SlowBackend(stub_backend):
        def extract_text(self, snapshot):
            release.wait(5)
            return "late"

    try:
        result = make_engine(text_backend=_SlowBackend(), check_timeout_ms=50).execute(
            VerbRequest.check(condition="not empty", check_zone=STATUS)
        )
    finally:
        release.set()

    assert result.outcome == Outcome.TIMED_OUT
    assert result.value is None


def test_check_backend_error_propagates(screen, make_engine, stub_backend):
    class _BrokenBackend(stub_backend):
        def extract_text(self, snapshot):
            raise TextBackendError("model missing")

    with pytest.raises(TextBackendError):
        make_engine(text_backend=_BrokenBackend()).execute(VerbRequest.check(check_zone=STATUS))


def test_check_requires_backend(screen, make_engine):
    with pytest.raises(TextBackendError):
        make_engine().execute(VerbRequest.check(check_zone=STATUS))

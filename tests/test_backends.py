import numpy as np
import pytest

from detrack.errors import ConfigurationError, TrackerInitError
from detrack.tracking.backends import StaticBackend, TemplateMatchBackend, make_backend_factory
from detrack.tracking.backends.opencv import resolve_tracker_factory
from detrack.utils.types import BoundingBox, VideoMetadata


def noise_frame(seed=0, size=64):
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=(size, size, 3), dtype=np.uint8)


def test_template_backend_follows_shifted_patch():
    frame = noise_frame()
    moved = np.roll(frame, shift=(2, 3), axis=(0, 1))
    backend = TemplateMatchBackend(64, 64, search_scale=2.0)
    backend.initialize(frame, BoundingBox(20, 20, 36, 36))
    box, confidence = backend.update(moved)
    assert box == (23.0, 22.0, 39.0, 38.0)
    assert confidence > 0.99


def test_template_backend_loses_unrelated_content():
    backend = TemplateMatchBackend(64, 64)
    backend.initialize(noise_frame(0), BoundingBox(20, 20, 36, 36))
    _, confidence = backend.update(noise_frame(1))
    assert 0.0 <= confidence < 0.5


def test_template_backend_rejects_tiny_or_offscreen_boxes():
    backend = TemplateMatchBackend(64, 64)
    with pytest.raises(TrackerInitError):
        backend.initialize(noise_frame(), BoundingBox(10, 10, 12, 12))
    with pytest.raises(TrackerInitError):
        backend.initialize(noise_frame(), BoundingBox(62, 62, 80, 80))


def test_update_before_initialize_is_an_error():
    with pytest.raises(RuntimeError):
        TemplateMatchBackend(64, 64).update(noise_frame())
    with pytest.raises(RuntimeError):
        StaticBackend().update(noise_frame())


def test_factory_builds_independent_instances():
    factory = make_backend_factory("static", VideoMetadata(64, 64), {"confidence": 0.6})
    a, b = factory(), factory()
    assert a is not b
    a.initialize(noise_frame(), BoundingBox(0, 0, 5, 5))
    assert a.update(noise_frame()) == ((0, 0, 5, 5), 0.6)


def test_template_factory_uses_frame_geometry():
    backend = make_backend_factory("template", VideoMetadata(40, 30), {"search_scale": 3.0})()
    assert (backend.frame_width, backend.frame_height, backend.search_scale) == (40, 30, 3.0)


def test_unknown_backends_are_rejected():
    with pytest.raises(ConfigurationError):
        make_backend_factory("struck", VideoMetadata(64, 64))
    with pytest.raises(ConfigurationError):
        resolve_tracker_factory("boosting")


def test_template_backend_rejects_flat_patch():
    frame = noise_frame()
    frame[20:36, 20:36] = 128
    with pytest.raises(TrackerInitError, match="flat"):
        TemplateMatchBackend(64, 64).initialize(frame, BoundingBox(20, 20, 36, 36))


def test_template_backend_reports_zero_on_blank_frame():
    backend = TemplateMatchBackend(64, 64)
    backend.initialize(noise_frame(), BoundingBox(20, 20, 36, 36))
    box, confidence = backend.update(np.zeros((64, 64, 3), dtype=np.uint8))
    assert box == (20.0, 20.0, 36.0, 36.0)
    assert confidence == 0.0

import pytest

from detrack.errors import ConfigurationError
from detrack.tracking.track_store import TrackingConfig
from detrack.utils.config import get, load_yaml


def test_tracking_config_reads_yaml_section(tmp_path):
    path = tmp_path / "tracker.yaml"
    path.write_text(
        "tracking:\n"
        "  iou_threshold: 0.3\n"
        "  undetected_window: 4\n"
        "  backend: static\n"
        "  backend_options:\n"
        "    confidence: 0.9\n",
        encoding="utf-8",
    )
    cfg = TrackingConfig.from_dict(load_yaml(path))
    assert cfg.iou_threshold == 0.3
    assert cfg.undetected_window == 4
    assert cfg.track_score_threshold == 0.1
    assert cfg.backend == "static"
    assert cfg.backend_options == {"confidence": 0.9}


def test_defaults_when_section_missing():
    cfg = TrackingConfig.from_dict({})
    assert (cfg.iou_threshold, cfg.device, cfg.backend) == (0.5, "cpu", "template")


@pytest.mark.parametrize("kwargs", [{"iou_threshold": 1.5}, {"iou_threshold": -0.1}, {"undetected_window": -1}])
def test_invalid_options_are_rejected(kwargs):
    with pytest.raises(ConfigurationError):
        TrackingConfig(**kwargs)


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_yaml(tmp_path / "nope.yaml")


def test_dot_get():
    cfg = {"runtime": {"overlay": {"enabled": False}}}
    assert get(cfg, "runtime.overlay.enabled", True) is False
    assert get(cfg, "runtime.batch_size", 8) == 8

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from detrack.errors import ConfigurationError
from detrack.tracking.backends.base import TrackerBackend
from detrack.tracking.backends.opencv import FACTORY_NAMES, OpenCVBackend, resolve_tracker_factory
from detrack.tracking.backends.static import StaticBackend
from detrack.tracking.backends.template import TemplateMatchBackend
from detrack.utils.types import VideoMetadata

BackendFactory = Callable[[], TrackerBackend]

BACKENDS = ("template", "static") + tuple(FACTORY_NAMES)


def make_backend_factory(
    name: str,
    metadata: VideoMetadata,
    options: Optional[Dict[str, Any]] = None,
) -> BackendFactory:
    """
    Build a zero-argument constructor for one backend kind.

    Availability is checked here, so a missing OpenCV tracker fails when the
    evaluator is configured rather than on the first spawn.
    """
    options = dict(options or {})
    name = str(name).lower()
    if name == "template":
        return lambda: TemplateMatchBackend(metadata.width, metadata.height, **options)
    if name == "static":
        return lambda: StaticBackend(**options)
    if name in FACTORY_NAMES:
        resolve_tracker_factory(name)
        return lambda: OpenCVBackend(kind=name)
    raise ConfigurationError(f"Unknown tracker backend '{name}'. Expected one of: {', '.join(BACKENDS)}")


__all__ = [
    "BACKENDS",
    "BackendFactory",
    "OpenCVBackend",
    "StaticBackend",
    "TemplateMatchBackend",
    "TrackerBackend",
    "make_backend_factory",
]

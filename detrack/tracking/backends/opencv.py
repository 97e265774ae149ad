from __future__ import annotations

from typing import Any, Optional, Tuple

import cv2
import numpy as np

from detrack.errors import ConfigurationError, TrackerInitError
from detrack.tracking.backends.base import XYXY, TrackerBackend
from detrack.utils.types import BoundingBox

FACTORY_NAMES = {
    "csrt": "TrackerCSRT_create",
    "kcf": "TrackerKCF_create",
    "mil": "TrackerMIL_create",
}


def resolve_tracker_factory(kind: str) -> Any:
    """Resolve the OpenCV constructor, falling back to the cv2.legacy namespace."""
    factory_func = FACTORY_NAMES.get(kind)
    if factory_func is None:
        raise ConfigurationError(f"Unsupported OpenCV tracker: {kind}")
    if hasattr(cv2, factory_func):
        return getattr(cv2, factory_func)
    legacy = getattr(cv2, "legacy", None)
    if legacy is not None and hasattr(legacy, factory_func):
        return getattr(legacy, factory_func)
    raise ConfigurationError(
        f"OpenCV tracker '{kind}' not available. Install opencv-contrib-python (or opencv-contrib-python-headless)."
    )


class OpenCVBackend(TrackerBackend):
    """
    Wraps one of OpenCV's single-object trackers.
    OpenCV only reports success/failure, so confidence is 1.0 or 0.0.
    """

    def __init__(self, kind: str = "csrt"):
        self.kind = kind
        self._factory = resolve_tracker_factory(kind)
        self._tracker: Optional[Any] = None
        self._box: Optional[XYXY] = None

    def initialize(self, frame: np.ndarray, box: BoundingBox) -> None:
        if box.width <= 0 or box.height <= 0:
            raise TrackerInitError(f"cannot track empty box {box.xyxy()}")
        self._tracker = self._factory()
        rect = tuple(int(round(v)) for v in box.xywh())
        bgr = cv2.cvtColor(frame, cv2.COLOR_RGB2BGR)
        try:
            ok = self._tracker.init(bgr, rect)
        except cv2.error as exc:
            raise TrackerInitError(f"OpenCV {self.kind} init failed: {exc}") from exc
        # Older builds return None from init().
        if ok is False:
            raise TrackerInitError(f"OpenCV {self.kind} refused box {box.xyxy()}")
        self._box = box.xyxy()

    def update(self, frame: np.ndarray) -> Tuple[XYXY, float]:
        if self._tracker is None or self._box is None:
            raise RuntimeError("OpenCVBackend.update called before initialize")
        bgr = cv2.cvtColor(frame, cv2.COLOR_RGB2BGR)
        ok, rect = self._tracker.update(bgr)
        if not ok:
            return self._box, 0.0
        x, y, w, h = (float(v) for v in rect)
        self._box = (x, y, x + w, y + h)
        return self._box, 1.0

    def close(self) -> None:
        self._tracker = None

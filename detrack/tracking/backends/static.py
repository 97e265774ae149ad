from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from detrack.tracking.backends.base import XYXY, TrackerBackend
from detrack.utils.types import BoundingBox


class StaticBackend(TrackerBackend):
    """Holds the initial box with a fixed confidence. Useful when no pixels are available."""

    def __init__(self, confidence: float = 1.0):
        self.confidence = float(confidence)
        self._box: Optional[XYXY] = None

    def initialize(self, frame: np.ndarray, box: BoundingBox) -> None:
        self._box = box.xyxy()

    def update(self, frame: np.ndarray) -> Tuple[XYXY, float]:
        if self._box is None:
            raise RuntimeError("StaticBackend.update called before initialize")
        return self._box, self.confidence

from __future__ import annotations

import math
from typing import Optional, Tuple

import cv2
import numpy as np

from detrack.errors import TrackerInitError
from detrack.tracking.backends.base import XYXY, TrackerBackend
from detrack.utils.types import BoundingBox


def _clip_box(box: XYXY, width: int, height: int) -> Tuple[int, int, int, int]:
    x1, y1, x2, y2 = box
    x1 = int(max(0, min(math.floor(x1), width)))
    y1 = int(max(0, min(math.floor(y1), height)))
    x2 = int(max(0, min(math.ceil(x2), width)))
    y2 = int(max(0, min(math.ceil(y2), height)))
    return x1, y1, x2, y2


class TemplateMatchBackend(TrackerBackend):
    """
    Normalized cross-correlation tracker.

    The template is the grayscale patch under the initial box. Each update
    searches a window around the last position (box size scaled by
    search_scale) and moves the box to the correlation peak. The peak value,
    clamped to [0, 1], is the confidence.
    """

    def __init__(self, frame_width: int, frame_height: int, search_scale: float = 2.0, min_size: int = 4, min_std: float = 1.0):
        self.frame_width = int(frame_width)
        self.frame_height = int(frame_height)
        self.search_scale = max(1.0, float(search_scale))
        self.min_size = int(min_size)
        self.min_std = float(min_std)
        self._template: Optional[np.ndarray] = None
        self._box: Optional[XYXY] = None

    def _gray(self, frame: np.ndarray) -> np.ndarray:
        if frame.ndim == 2:
            return frame
        return cv2.cvtColor(frame, cv2.COLOR_RGB2GRAY)

    def initialize(self, frame: np.ndarray, box: BoundingBox) -> None:
        x1, y1, x2, y2 = _clip_box(box.xyxy(), self.frame_width, self.frame_height)
        if x2 - x1 < self.min_size or y2 - y1 < self.min_size:
            raise TrackerInitError(
                f"box {box.xyxy()} is smaller than {self.min_size}px inside a "
                f"{self.frame_width}x{self.frame_height} frame"
            )
        gray = self._gray(frame)
        template = gray[y1:y2, x1:x2].copy()
        # Normalized correlation is undefined for a constant patch.
        if float(template.std()) < self.min_std:
            raise TrackerInitError(f"box {box.xyxy()} covers a flat patch (std < {self.min_std})")
        self._template = template
        self._box = (float(x1), float(y1), float(x2), float(y2))

    def update(self, frame: np.ndarray) -> Tuple[XYXY, float]:
        if self._template is None or self._box is None:
            raise RuntimeError("TemplateMatchBackend.update called before initialize")

        tpl_h, tpl_w = self._template.shape[:2]
        x1, y1, x2, y2 = self._box
        cx = 0.5 * (x1 + x2)
        cy = 0.5 * (y1 + y2)
        half_w = 0.5 * tpl_w * self.search_scale
        half_h = 0.5 * tpl_h * self.search_scale
        sx1, sy1, sx2, sy2 = _clip_box(
            (cx - half_w, cy - half_h, cx + half_w, cy + half_h), self.frame_width, self.frame_height
        )

        gray = self._gray(frame)
        search = gray[sy1:sy2, sx1:sx2]
        if search.shape[0] < tpl_h or search.shape[1] < tpl_w:
            # Object pushed against the frame border; nothing to match.
            return self._box, 0.0
        if float(search.std()) < self.min_std:
            return self._box, 0.0

        res = cv2.matchTemplate(search, self._template, cv2.TM_CCOEFF_NORMED)
        _, max_val, _, max_loc = cv2.minMaxLoc(res)
        confidence = float(max_val)
        if not math.isfinite(confidence):
            confidence = 0.0
        confidence = min(1.0, max(0.0, confidence))

        nx1 = float(sx1 + max_loc[0])
        ny1 = float(sy1 + max_loc[1])
        self._box = (nx1, ny1, nx1 + tpl_w, ny1 + tpl_h)
        return self._box, confidence

    def close(self) -> None:
        self._template = None

from __future__ import annotations

import abc
from typing import Tuple

import numpy as np

from detrack.utils.types import BoundingBox

XYXY = Tuple[float, float, float, float]


class TrackerBackend(abc.ABC):
    """
    Single-object visual tracker owned by exactly one track.

    initialize() is called once, on the frame where the track is born.
    update() is then called once per later frame the track survives.
    """

    @abc.abstractmethod
    def initialize(self, frame: np.ndarray, box: BoundingBox) -> None:
        """
        Input:
            frame: RGB image (H, W, 3), uint8
            box: detection to follow
        Raises TrackerInitError when the box cannot be tracked.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def update(self, frame: np.ndarray) -> Tuple[XYXY, float]:
        """
        Output:
            ((x1, y1, x2, y2), confidence)
        """
        raise NotImplementedError

    def close(self) -> None:
        return

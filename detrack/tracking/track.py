from __future__ import annotations

from dataclasses import dataclass

from detrack.tracking.backends.base import TrackerBackend
from detrack.utils.types import BoundingBox


@dataclass(eq=False)
class Track:
    id: int
    box: BoundingBox  # last detection or refined estimate, carries id
    tracker: TrackerBackend
    frames_since_last_detection: int = 0
    score: float = 0.0  # last detection confidence

    def mark_detected(self, detection: BoundingBox) -> None:
        self.box = detection.with_track(self.id)
        self.score = detection.score
        self.frames_since_last_detection = 0

    def close(self) -> None:
        self.tracker.close()

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple

NO_TRACK = -1


@dataclass(frozen=True)
class BoundingBox:
    x1: float
    y1: float
    x2: float
    y2: float
    score: float = 0.0
    track_id: int = NO_TRACK
    track_score: float = 0.0

    @property
    def width(self) -> float:
        return self.x2 - self.x1

    @property
    def height(self) -> float:
        return self.y2 - self.y1

    def xyxy(self) -> Tuple[float, float, float, float]:
        return (self.x1, self.y1, self.x2, self.y2)

    def xywh(self) -> Tuple[float, float, float, float]:
        return (self.x1, self.y1, self.width, self.height)

    def with_track(self, track_id: int, track_score: Optional[float] = None) -> "BoundingBox":
        if track_score is None:
            return replace(self, track_id=track_id)
        return replace(self, track_id=track_id, track_score=track_score)

    def moved_to(self, xyxy: Tuple[float, float, float, float]) -> "BoundingBox":
        x1, y1, x2, y2 = xyxy
        return replace(self, x1=float(x1), y1=float(y1), x2=float(x2), y2=float(y2))


@dataclass(frozen=True)
class VideoMetadata:
    width: int
    height: int
    fps: float = 30.0
    frame_count: int = 0

    @property
    def frame_nbytes(self) -> int:
        # packed RGB
        return self.width * self.height * 3


@dataclass
class FramePacket:
    frame: object  # numpy.ndarray (OpenCV BGR frame)
    timestamp: float

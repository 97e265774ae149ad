from __future__ import annotations

import itertools
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Sequence, Tuple

import numpy as np

from detrack.errors import ConfigurationError, TrackerInitError
from detrack.tracking.associator import GreedyAssociator
from detrack.tracking.backends.base import TrackerBackend
from detrack.tracking.track import Track
from detrack.utils.config import get
from detrack.utils.logger import get_logger
from detrack.utils.types import BoundingBox


@dataclass
class TrackingConfig:
    iou_threshold: float = 0.5
    undetected_window: int = 10  # frames a track may go without a matching detection
    track_score_threshold: float = 0.1  # lower = tracks survive weaker backend matches
    device: str = "cpu"
    backend: str = "template"
    backend_options: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not 0.0 <= float(self.iou_threshold) <= 1.0:
            raise ConfigurationError(f"iou_threshold must be in [0, 1], got {self.iou_threshold}")
        if int(self.undetected_window) < 0:
            raise ConfigurationError(f"undetected_window must be >= 0, got {self.undetected_window}")
        self.iou_threshold = float(self.iou_threshold)
        self.undetected_window = int(self.undetected_window)
        self.track_score_threshold = float(self.track_score_threshold)

    @classmethod
    def from_dict(cls, cfg: Dict[str, Any]) -> "TrackingConfig":
        """Read the `tracking` section of a loaded YAML document."""
        defaults = cls()
        return cls(
            iou_threshold=get(cfg, "tracking.iou_threshold", defaults.iou_threshold),
            undetected_window=get(cfg, "tracking.undetected_window", defaults.undetected_window),
            track_score_threshold=get(cfg, "tracking.track_score_threshold", defaults.track_score_threshold),
            device=str(get(cfg, "tracking.device", defaults.device)),
            backend=str(get(cfg, "tracking.backend", defaults.backend)),
            backend_options=dict(get(cfg, "tracking.backend_options", {}) or {}),
        )


@dataclass
class SpawnFailure:
    detection: BoundingBox
    error: TrackerInitError


class TrackStore:
    """
    Sole owner of live tracks. Every creation and destruction of a Track goes
    through this class; ids come from a per-store counter and are never reused.
    """

    def __init__(self, backend_factory: Callable[[], TrackerBackend], cfg: TrackingConfig | None = None):
        self.cfg = cfg or TrackingConfig()
        self.backend_factory = backend_factory
        self.associator = GreedyAssociator(self.cfg.iou_threshold)
        self.logger = get_logger(__name__)
        self._tracks: List[Track] = []
        self._ids = itertools.count(1)

    @property
    def tracks(self) -> Tuple[Track, ...]:
        return tuple(self._tracks)

    def __len__(self) -> int:
        return len(self._tracks)

    def associate(self, detections: Sequence[BoundingBox]) -> List[BoundingBox]:
        """Apply matched detections to their tracks. Returns the unmatched detections."""
        result = self.associator.associate(detections, self._tracks)
        for det, track in result.matches:
            track.mark_detected(det)
        return result.unmatched

    def expire(self) -> List[Track]:
        window = self.cfg.undetected_window
        expired = [t for t in self._tracks if t.frames_since_last_detection > window]
        for track in expired:
            self._remove(track, reason="undetected")
        return expired

    def advance(self, frame: np.ndarray) -> List[BoundingBox]:
        """Step every live track's backend on `frame`; drop tracks below the score threshold."""
        out: List[BoundingBox] = []
        for track in list(self._tracks):
            xyxy, confidence = track.tracker.update(frame)
            confidence = float(confidence)
            if not math.isfinite(confidence):
                confidence = 0.0
            if confidence < self.cfg.track_score_threshold:
                self._remove(track, reason=f"score {confidence:.3f}")
                continue
            # box.score keeps the last detection confidence
            track.box = track.box.moved_to(xyxy)
            track.frames_since_last_detection += 1
            out.append(track.box.with_track(track.id, confidence))
        return out

    def spawn(self, frame: np.ndarray, detections: Sequence[BoundingBox]) -> Tuple[List[BoundingBox], List[SpawnFailure]]:
        born: List[BoundingBox] = []
        failures: List[SpawnFailure] = []
        for det in detections:
            backend = self.backend_factory()
            try:
                backend.initialize(frame, det)
            except TrackerInitError as exc:
                backend.close()
                self.logger.error("Dropping detection %s: %s", det.xyxy(), exc)
                failures.append(SpawnFailure(detection=det, error=exc))
                continue
            track_id = next(self._ids)
            track = Track(id=track_id, box=det.with_track(track_id), tracker=backend, score=det.score)
            self._tracks.append(track)
            self.logger.debug("Track %d born at %s", track.id, det.xyxy())
            born.append(track.box)
        return born, failures

    def clear(self) -> None:
        """Close every backend and start a fresh id sequence."""
        tracks, self._tracks = self._tracks, []
        for track in tracks:
            track.close()
        self._ids = itertools.count(1)

    def _remove(self, track: Track, reason: str) -> None:
        self._tracks.remove(track)
        track.close()
        self.logger.debug("Track %d removed (%s)", track.id, reason)

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

import numpy as np

from detrack.tracking.track_store import SpawnFailure, TrackStore
from detrack.utils.timing import StageTimer
from detrack.utils.types import BoundingBox


@dataclass
class FrameResult:
    frame: np.ndarray
    detections: List[BoundingBox]
    tracked: List[BoundingBox]  # advanced tracks first, then newly spawned ones
    failures: List[SpawnFailure] = field(default_factory=list)
    expired_ids: List[int] = field(default_factory=list)
    stages_ms: Dict[str, float] = field(default_factory=dict)


class FrameCycle:
    """
    Runs one frame through the store: associate, expire, advance, spawn.

    Holds no state besides the store, so frames must be fed in order.
    """

    def __init__(self, store: TrackStore):
        self.store = store

    def step(self, frame: np.ndarray, detections: Sequence[BoundingBox]) -> FrameResult:
        timer = StageTimer()
        detections = list(detections)

        with timer.stage("associate"):
            unmatched = self.store.associate(detections)
        with timer.stage("expire"):
            expired = self.store.expire()
        with timer.stage("advance"):
            tracked = self.store.advance(frame)
        with timer.stage("spawn"):
            born, failures = self.store.spawn(frame, unmatched)

        return FrameResult(
            frame=frame,
            detections=detections,
            tracked=tracked + born,
            failures=failures,
            expired_ids=[t.id for t in expired],
            stages_ms=timer.stages_ms,
        )

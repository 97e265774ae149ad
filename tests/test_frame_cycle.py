import numpy as np

from detrack.tracking.backends.base import TrackerBackend
from detrack.tracking.frame_cycle import FrameCycle
from detrack.tracking.track_store import TrackingConfig, TrackStore
from detrack.utils.types import BoundingBox

FRAME = np.zeros((32, 32, 3), dtype=np.uint8)


class CountingBackend(TrackerBackend):
    def __init__(self, scores=None):
        self.scores = list(scores or [])
        self.box = None
        self.updates = 0

    def initialize(self, frame, box):
        self.box = box.xyxy()

    def update(self, frame):
        self.updates += 1
        score = self.scores.pop(0) if self.scores else 1.0
        return self.box, score


def make_cycle(window=2, threshold=0.5, scores=None):
    backends = []

    def factory():
        backend = CountingBackend(scores)
        backends.append(backend)
        return backend

    store = TrackStore(factory, TrackingConfig(undetected_window=window, track_score_threshold=threshold))
    return FrameCycle(store), backends


def test_first_detection_spawns_track_one():
    cycle, _ = make_cycle()
    result = cycle.step(FRAME, [BoundingBox(0, 0, 10, 10, score=0.9)])
    assert result.tracked == [BoundingBox(0, 0, 10, 10, score=0.9, track_id=1)]
    assert result.detections == [BoundingBox(0, 0, 10, 10, score=0.9)]
    assert cycle.store.tracks[0].frames_since_last_detection == 0


def test_redetected_track_is_matched_then_advanced():
    cycle, backends = make_cycle()
    cycle.step(FRAME, [BoundingBox(0, 0, 10, 10)])
    result = cycle.step(FRAME, [BoundingBox(1, 1, 11, 11)])
    assert [b.track_id for b in result.tracked] == [1]
    assert len(cycle.store) == 1
    assert cycle.store.tracks[0].frames_since_last_detection == 1
    assert backends[0].updates == 1


def test_advanced_boxes_precede_spawned_boxes():
    cycle, _ = make_cycle()
    cycle.step(FRAME, [BoundingBox(0, 0, 10, 10)])
    result = cycle.step(FRAME, [BoundingBox(20, 20, 30, 30), BoundingBox(0, 0, 10, 10)])
    assert [b.track_id for b in result.tracked] == [1, 2]


def test_undetected_track_expires_before_advance():
    cycle, backends = make_cycle(window=2)
    cycle.step(FRAME, [BoundingBox(0, 0, 10, 10)])
    for _ in range(3):
        result = cycle.step(FRAME, [])
        assert [b.track_id for b in result.tracked] == [1]
    assert cycle.store.tracks[0].frames_since_last_detection == 3
    result = cycle.step(FRAME, [])
    assert result.tracked == []
    assert result.expired_ids == [1]
    assert backends[0].updates == 3
    assert cycle.step(FRAME, []).tracked == []


def test_track_past_window_gets_no_update_call():
    cycle, backends = make_cycle(window=2)
    cycle.step(FRAME, [BoundingBox(0, 0, 10, 10)])
    cycle.store.tracks[0].frames_since_last_detection = 3
    result = cycle.step(FRAME, [])
    assert result.tracked == []
    assert backends[0].updates == 0


def test_low_confidence_track_is_lost_and_later_detection_gets_new_id():
    cycle, _ = make_cycle(scores=[0.9, 0.1])
    cycle.step(FRAME, [BoundingBox(0, 0, 10, 10)])
    assert [b.track_id for b in cycle.step(FRAME, []).tracked] == [1]
    assert cycle.step(FRAME, []).tracked == []
    result = cycle.step(FRAME, [BoundingBox(0, 0, 10, 10)])
    assert [b.track_id for b in result.tracked] == [2]


def test_reset_behaves_like_fresh_instance():
    frames = [
        [BoundingBox(0, 0, 10, 10), BoundingBox(20, 20, 30, 30)],
        [BoundingBox(1, 1, 11, 11)],
        [],
    ]
    used, _ = make_cycle()
    for dets in frames:
        used.step(FRAME, dets)
    used.store.clear()
    assert len(used.store) == 0

    fresh, _ = make_cycle()
    for dets in frames:
        assert used.step(FRAME, dets).tracked == fresh.step(FRAME, dets).tracked

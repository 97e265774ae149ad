from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from detrack.tracking.geometry import iou
from detrack.tracking.track import Track
from detrack.utils.types import BoundingBox


@dataclass
class AssociationResult:
    matches: List[Tuple[BoundingBox, Track]] = field(default_factory=list)
    unmatched: List[BoundingBox] = field(default_factory=list)


class GreedyAssociator:
    """
    Greedy first-match association.

    Detections are visited in input order; each takes the first track, in
    store order, whose box overlaps it by more than iou_threshold and that
    has not already been taken this frame. No global optimisation is
    attempted, so dense overlapping scenes can under-associate.
    """

    def __init__(self, iou_threshold: float = 0.5):
        self.iou_threshold = float(iou_threshold)

    def associate(self, detections: Sequence[BoundingBox], tracks: Sequence[Track]) -> AssociationResult:
        result = AssociationResult()
        consumed = set()
        for det in detections:
            match = None
            for track in tracks:
                if track.id in consumed:
                    continue
                if iou(det, track.box) > self.iou_threshold:
                    match = track
                    break
            if match is None:
                result.unmatched.append(det)
            else:
                consumed.add(match.id)
                result.matches.append((det, match))
        return result

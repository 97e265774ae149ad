from detrack.tracking.associator import AssociationResult, GreedyAssociator
from detrack.tracking.frame_cycle import FrameCycle, FrameResult
from detrack.tracking.geometry import iou
from detrack.tracking.track import Track
from detrack.tracking.track_store import SpawnFailure, TrackStore, TrackingConfig

__all__ = [
    "AssociationResult",
    "FrameCycle",
    "FrameResult",
    "GreedyAssociator",
    "SpawnFailure",
    "Track",
    "TrackStore",
    "TrackingConfig",
    "iou",
]

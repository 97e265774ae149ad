from __future__ import annotations

from typing import List, Sequence

import numpy as np

from detrack.errors import BufferDecodeError
from detrack.utils.types import BoundingBox

# Packed little-endian box record.
BOX_DTYPE = np.dtype(
    [
        ("x1", "<f4"),
        ("y1", "<f4"),
        ("x2", "<f4"),
        ("y2", "<f4"),
        ("score", "<f4"),
        ("track_id", "<i4"),
        ("track_score", "<f4"),
    ]
)
BOX_RECORD_SIZE = BOX_DTYPE.itemsize


def boxes_to_records(boxes: Sequence[BoundingBox]) -> np.ndarray:
    records = np.zeros(len(boxes), dtype=BOX_DTYPE)
    for i, b in enumerate(boxes):
        records[i] = (b.x1, b.y1, b.x2, b.y2, b.score, b.track_id, b.track_score)
    return records


def records_to_boxes(records: np.ndarray) -> List[BoundingBox]:
    if records.dtype != BOX_DTYPE:
        raise BufferDecodeError(f"unexpected record dtype {records.dtype}")
    return [
        BoundingBox(
            x1=float(r["x1"]),
            y1=float(r["y1"]),
            x2=float(r["x2"]),
            y2=float(r["y2"]),
            score=float(r["score"]),
            track_id=int(r["track_id"]),
            track_score=float(r["track_score"]),
        )
        for r in records
    ]

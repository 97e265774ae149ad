"""
Detection channel framing.

    uint64 count | int32 record_size | count * record_size bytes

All fields little-endian. Box records use BOX_DTYPE from records.py.
"""

from __future__ import annotations

from typing import List, Sequence

import numpy as np

from detrack.codec.records import BOX_DTYPE, BOX_RECORD_SIZE, boxes_to_records, records_to_boxes
from detrack.errors import BufferDecodeError
from detrack.utils.types import BoundingBox, VideoMetadata

COUNT_DTYPE = np.dtype("<u8")
SIZE_DTYPE = np.dtype("<i4")
HEADER_SIZE = COUNT_DTYPE.itemsize + SIZE_DTYPE.itemsize


def encode_boxes(boxes: Sequence[BoundingBox]) -> bytes:
    header = np.array([len(boxes)], dtype=COUNT_DTYPE).tobytes() + np.array([BOX_RECORD_SIZE], dtype=SIZE_DTYPE).tobytes()
    return header + boxes_to_records(boxes).tobytes()


def decode_boxes(buffer: bytes | bytearray | memoryview) -> List[BoundingBox]:
    data = memoryview(buffer).cast("B")
    if len(data) < HEADER_SIZE:
        raise BufferDecodeError(
            f"detection buffer is {len(data)} bytes, shorter than its {HEADER_SIZE}-byte header",
            expected=HEADER_SIZE,
            actual=len(data),
        )
    count = int(np.frombuffer(data, dtype=COUNT_DTYPE, count=1, offset=0)[0])
    record_size = int(np.frombuffer(data, dtype=SIZE_DTYPE, count=1, offset=COUNT_DTYPE.itemsize)[0])
    if record_size != BOX_RECORD_SIZE:
        raise BufferDecodeError(
            f"declared box record size {record_size} does not match codec size {BOX_RECORD_SIZE}",
            expected=BOX_RECORD_SIZE,
            actual=record_size,
        )
    payload = len(data) - HEADER_SIZE
    if count * record_size != payload:
        raise BufferDecodeError(
            f"declared {count} boxes need {count * record_size} bytes, buffer holds {payload}",
            expected=count * record_size,
            actual=payload,
        )
    records = np.frombuffer(data, dtype=BOX_DTYPE, count=count, offset=HEADER_SIZE)
    return records_to_boxes(records)


def decode_frame(buffer: bytes | bytearray | memoryview, metadata: VideoMetadata) -> np.ndarray:
    """View a packed RGB buffer as an (H, W, 3) uint8 array without copying."""
    data = memoryview(buffer).cast("B")
    if len(data) != metadata.frame_nbytes:
        raise BufferDecodeError(
            f"frame buffer is {len(data)} bytes, expected {metadata.height}x{metadata.width}x3",
            expected=metadata.frame_nbytes,
            actual=len(data),
        )
    return np.frombuffer(data, dtype=np.uint8).reshape(metadata.height, metadata.width, 3)

import numpy as np
import pytest

from detrack.codec import BOX_RECORD_SIZE, HEADER_SIZE, decode_boxes, decode_frame, encode_boxes
from detrack.errors import BufferDecodeError
from detrack.utils.types import NO_TRACK, BoundingBox, VideoMetadata


def test_empty_box_list_is_header_only():
    buf = encode_boxes([])
    assert len(buf) == HEADER_SIZE
    assert decode_boxes(buf) == []


def test_tracked_box_survives_encoding():
    box = BoundingBox(1.5, 2.0, 30.25, 40.0, score=0.5, track_id=7, track_score=0.75)
    buf = encode_boxes([box, BoundingBox(0, 0, 1, 1)])
    assert len(buf) == HEADER_SIZE + 2 * BOX_RECORD_SIZE
    out = decode_boxes(bytearray(buf))
    assert out[0] == box
    assert out[1].track_id == NO_TRACK


def test_short_header_is_rejected():
    with pytest.raises(BufferDecodeError):
        decode_boxes(b"\x01\x00")


def test_truncated_payload_is_rejected():
    buf = encode_boxes([BoundingBox(0, 0, 1, 1), BoundingBox(2, 2, 3, 3)])
    with pytest.raises(BufferDecodeError) as exc:
        decode_boxes(buf[:-1])
    assert exc.value.expected == 2 * BOX_RECORD_SIZE


def test_inflated_count_is_rejected():
    buf = bytearray(encode_boxes([BoundingBox(0, 0, 1, 1)]))
    buf[0:8] = np.array([1000], dtype="<u8").tobytes()
    with pytest.raises(BufferDecodeError):
        decode_boxes(bytes(buf))


def test_record_size_mismatch_is_rejected():
    buf = bytearray(encode_boxes([BoundingBox(0, 0, 1, 1)]))
    buf[8:12] = np.array([BOX_RECORD_SIZE + 4], dtype="<i4").tobytes()
    with pytest.raises(BufferDecodeError):
        decode_boxes(bytes(buf))


def test_decode_frame_checks_size():
    meta = VideoMetadata(width=4, height=2)
    frame = decode_frame(bytes(range(24)), meta)
    assert frame.shape == (2, 4, 3)
    assert frame[1, 3, 2] == 23
    with pytest.raises(BufferDecodeError):
        decode_frame(bytes(23), meta)

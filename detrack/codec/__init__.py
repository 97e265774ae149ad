from detrack.codec.framing import HEADER_SIZE, decode_boxes, decode_frame, encode_boxes
from detrack.codec.records import BOX_DTYPE, BOX_RECORD_SIZE

__all__ = ["BOX_DTYPE", "BOX_RECORD_SIZE", "HEADER_SIZE", "decode_boxes", "decode_frame", "encode_boxes"]

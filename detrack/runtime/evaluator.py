from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import List, Optional, Sequence

from detrack.codec import decode_boxes, decode_frame, encode_boxes
from detrack.runtime.device import DeviceType, resolve_device
from detrack.tracking.backends import make_backend_factory
from detrack.tracking.frame_cycle import FrameCycle, FrameResult
from detrack.tracking.track_store import TrackingConfig, TrackStore
from detrack.utils.logger import get_logger
from detrack.utils.types import VideoMetadata

Column = List[bytes]

OUTPUT_NAMES = ["image", "before_bboxes", "after_bboxes"]


class Evaluator(abc.ABC):
    """Contract between a pipeline host and a per-batch kernel."""

    @abc.abstractmethod
    def configure(self, metadata: VideoMetadata) -> None:
        ...

    @abc.abstractmethod
    def reset(self) -> None:
        ...

    @abc.abstractmethod
    def evaluate(self, input_columns: Sequence[Sequence[bytes]]) -> List[Column]:
        ...


class TrackerEvaluator(Evaluator):
    """
    Inputs:  [frame pixels (packed RGB), detection boxes]
    Outputs: [frame pixels passthrough, input detections, tracked boxes]

    One instance owns one TrackStore. Batches are processed frame by frame in
    order; run separate instances for independent videos.
    """

    def __init__(self, cfg: TrackingConfig | None = None, device: str | DeviceType | None = None, device_id: int = 0):
        self.cfg = cfg or TrackingConfig()
        self.device_type = resolve_device(device if device is not None else self.cfg.device)
        self.device_id = device_id
        self.logger = get_logger(__name__)
        self.metadata: Optional[VideoMetadata] = None
        self.store: Optional[TrackStore] = None
        self.cycle: Optional[FrameCycle] = None
        self.last_results: List[FrameResult] = []

    def configure(self, metadata: VideoMetadata) -> None:
        self.logger.info("Tracker configure %dx%d backend=%s", metadata.width, metadata.height, self.cfg.backend)
        factory = make_backend_factory(self.cfg.backend, metadata, self.cfg.backend_options)
        if self.store is not None:
            self.store.clear()
        self.metadata = metadata
        self.store = TrackStore(factory, self.cfg)
        self.cycle = FrameCycle(self.store)

    def reset(self) -> None:
        self.logger.info("Tracker reset")
        if self.store is not None:
            self.store.clear()

    def evaluate(self, input_columns: Sequence[Sequence[bytes]]) -> List[Column]:
        if self.metadata is None or self.cycle is None:
            raise RuntimeError("TrackerEvaluator.configure must be called before evaluate")
        if len(input_columns) < 2:
            raise ValueError(f"expected frame and detection columns, got {len(input_columns)} column(s)")
        frames, detection_buffers = input_columns[0], input_columns[1]
        if len(frames) != len(detection_buffers):
            raise ValueError(f"column length mismatch: {len(frames)} frames, {len(detection_buffers)} detection buffers")

        self.logger.info("Tracker evaluate on %d inputs", len(frames))
        # Decode the whole batch first so a bad buffer leaves the store untouched.
        decoded = [
            (decode_frame(frame_buf, self.metadata), decode_boxes(det_buf))
            for frame_buf, det_buf in zip(frames, detection_buffers)
        ]

        outputs: List[Column] = [[], [], []]
        results: List[FrameResult] = []
        for frame_buf, (frame, detections) in zip(frames, decoded):
            result = self.cycle.step(frame, detections)
            results.append(result)

            outputs[0].append(bytes(frame_buf))
            outputs[1].append(encode_boxes(result.detections))
            outputs[2].append(encode_boxes(result.tracked))

        self.last_results = results
        return outputs


@dataclass(frozen=True)
class EvaluatorCapabilities:
    device_type: DeviceType
    max_devices: int = 1
    warmup_size: int = 0


class TrackerEvaluatorFactory:
    def __init__(self, device: str | DeviceType = DeviceType.CPU, warmup_count: int = 0):
        self.device_type = resolve_device(device)
        self.warmup_count = int(warmup_count)

    def get_capabilities(self) -> EvaluatorCapabilities:
        return EvaluatorCapabilities(device_type=self.device_type, max_devices=1, warmup_size=self.warmup_count)

    def get_output_names(self) -> List[str]:
        return list(OUTPUT_NAMES)

    def new_evaluator(self, cfg: TrackingConfig | None = None) -> TrackerEvaluator:
        return TrackerEvaluator(cfg, device=self.device_type)

from __future__ import annotations

from typing import Iterable, List, Optional

import numpy as np
import torch
from ultralytics import YOLO

from detrack.utils.types import BoundingBox


class YOLODetector:
    """
    YOLOv8 wrapper producing untracked BoundingBoxes for the tracker.
    Class labels are dropped; the tracker is class-agnostic.
    """

    def __init__(self, model_name: str = "yolov8n.pt", device: str | None = None, classes: Optional[Iterable[int]] = None):
        self.device = device or ("mps" if torch.backends.mps.is_available() else "cpu")
        self.model = YOLO(model_name)
        self.model.to(self.device)
        self.classes = set(classes) if classes is not None else None

    def infer(self, frame: np.ndarray, conf_thres: float = 0.25) -> List[BoundingBox]:
        """
        Run YOLO inference on a single BGR frame.
        """
        results = self.model(
            frame,
            device=self.device,
            conf=conf_thres,
            verbose=False,
        )[0]

        detections: List[BoundingBox] = []

        if results.boxes is None:
            return detections

        for box in results.boxes:
            cls_id = int(box.cls.item())
            if self.classes is not None and cls_id not in self.classes:
                continue
            x1, y1, x2, y2 = box.xyxy[0].tolist()
            detections.append(BoundingBox(float(x1), float(y1), float(x2), float(y2), score=float(box.conf.item())))

        return detections

from __future__ import annotations

from typing import Dict, Sequence, Tuple

import cv2
import numpy as np

from detrack.utils.types import BoundingBox


def _pt(x: float, y: float) -> Tuple[int, int]:
    return int(round(x)), int(round(y))


def track_color(track_id: int) -> Tuple[int, int, int]:
    # Stable per-id color, BGR
    rng = np.random.default_rng(track_id)
    b, g, r = rng.integers(64, 256, size=3)
    return int(b), int(g), int(r)


def draw_hud(frame: np.ndarray, fps: float, stages_ms: Dict[str, float]) -> np.ndarray:
    """Minimal HUD overlay with FPS and stage timings."""
    render = frame.copy()
    y = 25
    cv2.putText(render, f"detrack | FPS: {fps:5.1f}", (15, y), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2)
    y += 28

    for name, ms in list(stages_ms.items())[:6]:
        cv2.putText(render, f"{name}: {ms:5.1f} ms", (15, y), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (220, 220, 220), 2)
        y += 22

    return render


def draw_detections(frame: np.ndarray, detections: Sequence[BoundingBox]) -> np.ndarray:
    render = frame.copy()
    for det in detections:
        cv2.rectangle(render, _pt(det.x1, det.y1), _pt(det.x2, det.y2), (0, 255, 0), 1)
    return render


def draw_tracks(frame: np.ndarray, tracked: Sequence[BoundingBox]) -> np.ndarray:
    render = frame.copy()
    for box in tracked:
        color = track_color(box.track_id)
        cv2.rectangle(render, _pt(box.x1, box.y1), _pt(box.x2, box.y2), color, 2)
        label = f"ID {box.track_id} | {box.track_score:.2f}"
        cv2.putText(render, label, _pt(box.x1, box.y1 - 6), cv2.FONT_HERSHEY_SIMPLEX, 0.55, color, 2)
    return render

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List

from detrack.utils.types import BoundingBox


def load_detections(path: str | Path) -> Dict[int, List[BoundingBox]]:
    """
    Read per-frame detections from a JSON-lines file, one frame per line:
      {"frame": 1, "boxes": [[x1, y1, x2, y2, score], ...]}
    Frames are 1-based like VideoInput. The score column is optional.
    """
    det_path = Path(path)
    if not det_path.exists():
        raise FileNotFoundError(f"Detections not found: {det_path.resolve()}")

    out: Dict[int, List[BoundingBox]] = {}
    with det_path.open("r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            row = json.loads(line)
            try:
                frame_id = int(row["frame"])
                boxes = [
                    BoundingBox(float(b[0]), float(b[1]), float(b[2]), float(b[3]), score=float(b[4]) if len(b) > 4 else 1.0)
                    for b in row.get("boxes", [])
                ]
            except (KeyError, IndexError, TypeError, ValueError) as exc:
                raise ValueError(f"{det_path}:{lineno}: malformed detection row: {exc}") from exc
            out.setdefault(frame_id, []).extend(boxes)
    return out

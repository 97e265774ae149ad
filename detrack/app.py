from __future__ import annotations

import argparse
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Tuple

import cv2
import numpy as np
from rich.console import Console
from tqdm import tqdm

from detrack.codec import decode_boxes, encode_boxes
from detrack.inputs.detections_file import load_detections
from detrack.inputs.video_input import VideoInput
from detrack.runtime.evaluator import TrackerEvaluator, TrackerEvaluatorFactory
from detrack.tracking.track_store import TrackingConfig
from detrack.utils.config import get, load_yaml
from detrack.utils.logger import setup_logger
from detrack.utils.timing import FPSMeter
from detrack.utils.types import BoundingBox
from detrack.visualization.overlay import draw_detections, draw_hud, draw_tracks

Pending = Tuple[int, np.ndarray, List[BoundingBox]]


def make_run_dir(base_dir: str | Path) -> Path:
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    run_dir = Path(base_dir) / f"run_{ts}"
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir


def run_batch(evaluator: TrackerEvaluator, batch: List[Pending]) -> List[Tuple[Pending, List[BoundingBox], Dict[str, float]]]:
    """Feed one batch through the evaluator the way a pipeline host would."""
    frames = [cv2.cvtColor(frame, cv2.COLOR_BGR2RGB).tobytes() for _, frame, _ in batch]
    dets = [encode_boxes(boxes) for _, _, boxes in batch]
    outputs = evaluator.evaluate([frames, dets])
    out = []
    for item, tracked_buf, result in zip(batch, outputs[2], evaluator.last_results):
        out.append((item, decode_boxes(tracked_buf), result.stages_ms))
    return out


def main():
    parser = argparse.ArgumentParser(description="detrack - tracking-by-detection over a video")
    parser.add_argument("--config", default="configs/tracker.yaml", help="Path to YAML config")
    parser.add_argument("--input", required=True, help="Path to input video")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--detections", help="JSON-lines detections file")
    source.add_argument("--model", help="Ultralytics YOLO weights used to detect on the fly")
    args = parser.parse_args()

    cfg: Dict[str, Any] = load_yaml(args.config)
    tracking_cfg = TrackingConfig.from_dict(cfg)

    output_base = get(cfg, "runtime.output_dir", "results")
    run_dir = make_run_dir(output_base)
    logger = setup_logger(log_dir=run_dir, level=get(cfg, "runtime.log_level", "INFO"))

    console = Console()
    console.print(f"[bold]detrack[/bold] run dir: {run_dir}")

    vin = VideoInput(args.input)
    if vin.meta is None:
        raise RuntimeError(f"Could not read video metadata from {args.input}")
    logger.info("Input video: %s", args.input)

    factory = TrackerEvaluatorFactory(device=tracking_cfg.device, warmup_count=int(get(cfg, "runtime.warmup", 0)))
    evaluator = factory.new_evaluator(tracking_cfg)
    evaluator.configure(vin.meta)

    if args.detections:
        detections_by_frame = load_detections(args.detections)
        detector = None
    else:
        from detrack.detection.yolo import YOLODetector

        detections_by_frame = {}
        detector = YOLODetector(model_name=args.model, device=get(cfg, "detector.device"))
    conf_thres = float(get(cfg, "detector.conf_thres", 0.25))

    batch_size = max(1, int(get(cfg, "runtime.batch_size", 8)))
    save_video = bool(get(cfg, "runtime.save_video", True))
    overlay_enabled = bool(get(cfg, "runtime.overlay.enabled", True))

    writer = None
    if save_video:
        fourcc = cv2.VideoWriter_fourcc(*"mp4v")
        writer = cv2.VideoWriter(str(run_dir / "output.mp4"), fourcc, vin.meta.fps, (vin.meta.width, vin.meta.height))
        if not writer.isOpened():
            raise RuntimeError("Could not open VideoWriter (mp4v). Try a different codec/container.")

    fps_meter = FPSMeter()
    metrics: Dict[str, Any] = {
        "input": {"path": args.input, "meta": vin.meta.__dict__},
        "tracking": tracking_cfg.__dict__,
        "output_names": factory.get_output_names(),
        "frames": [],
    }
    seen_ids = set()
    tracks_path = run_dir / "tracks.jsonl"

    def flush(batch: List[Pending], tracks_f) -> None:
        for (frame_id, frame, boxes), tracked, stages in run_batch(evaluator, batch):
            fps = fps_meter.tick()
            seen_ids.update(b.track_id for b in tracked)
            tracks_f.write(
                json.dumps({"frame": frame_id, "tracks": [[b.track_id, b.x1, b.y1, b.x2, b.y2, b.score, b.track_score] for b in tracked]})
                + "\n"
            )
            metrics["frames"].append(
                {
                    "frame_id": frame_id,
                    "fps": fps,
                    "stages_ms": stages,
                    "detection_count": len(boxes),
                    "track_count": len(tracked),
                }
            )
            if writer is not None:
                render = frame
                if overlay_enabled:
                    render = draw_detections(render, boxes)
                    render = draw_tracks(render, tracked)
                    render = draw_hud(render, fps, stages)
                writer.write(render)

    total = vin.meta.frame_count if vin.meta.frame_count > 0 else None
    batch: List[Pending] = []
    with vin, tracks_path.open("w", encoding="utf-8") as tracks_f:
        for frame_id, packet in tqdm(vin.frames(), total=total, desc="Tracking"):
            if detector is not None:
                boxes = detector.infer(packet.frame, conf_thres=conf_thres)
            else:
                boxes = detections_by_frame.get(frame_id, [])
            batch.append((frame_id, packet.frame, boxes))
            if len(batch) >= batch_size:
                flush(batch, tracks_f)
                batch = []
        if batch:
            flush(batch, tracks_f)

    if writer is not None:
        writer.release()
        logger.info("Saved video: %s", run_dir / "output.mp4")

    metrics["unique_tracks"] = len(seen_ids)
    metrics_path = run_dir / "metrics.json"
    metrics_path.write_text(json.dumps(metrics, indent=2), encoding="utf-8")
    logger.info("Saved metrics: %s", metrics_path)
    logger.info("Saved tracks: %s", tracks_path)
    logger.info("Done. %d unique tracks over %d frames.", len(seen_ids), len(metrics["frames"]))


if __name__ == "__main__":
    main()

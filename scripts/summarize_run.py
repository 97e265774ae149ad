#!/usr/bin/env python3
import json
import sys
from pathlib import Path
from statistics import mean, median


def safe_mean(xs):
    xs = [x for x in xs if x is not None]
    return mean(xs) if xs else None


def pct(n, d):
    return (100.0 * n / d) if d else 0.0


def main():
    if len(sys.argv) < 2:
        print("Usage: python scripts/summarize_run.py results/run_YYYYMMDD_HHMMSS")
        sys.exit(1)

    run_dir = Path(sys.argv[1])
    metrics_path = run_dir / "metrics.json"
    if not metrics_path.exists():
        raise FileNotFoundError(f"Missing: {metrics_path}")

    m = json.loads(metrics_path.read_text())
    frames = m.get("frames", [])
    n = len(frames)
    if n == 0:
        print("No frames found in metrics.json")
        return

    fps_vals = [f.get("fps") for f in frames if f.get("fps") is not None]
    det_counts = [f.get("detection_count", 0) for f in frames]
    track_counts = [f.get("track_count", 0) for f in frames]
    tracked_frames = sum(1 for c in track_counts if c > 0)

    print("\n================ DETRACK RUN SUMMARY ================")
    print(f"Run dir: {run_dir}")
    print(f"Frames: {n}")
    if fps_vals:
        print(f"FPS  avg={mean(fps_vals):.2f}  med={median(fps_vals):.2f}  min={min(fps_vals):.2f}  max={max(fps_vals):.2f}")
    else:
        print("FPS: (missing)")

    print("\nStage latency (ms) (avg):")
    for stage in ("associate", "expire", "advance", "spawn"):
        sm = safe_mean([f.get("stages_ms", {}).get(stage) for f in frames])
        print(f"  {stage + ':':14s}{sm:.3f}" if sm is not None else f"  {stage + ':':14s}(missing)")

    print("\nCounts:")
    print(f"  detections/frame: avg={mean(det_counts):.2f}  max={max(det_counts)}")
    print(f"  tracks/frame:     avg={mean(track_counts):.2f}  max={max(track_counts)}")
    print(f"  frames with tracks: {tracked_frames}/{n} ({pct(tracked_frames, n):.1f}%)")
    print(f"  unique tracks: {m.get('unique_tracks', '(missing)')}")
    print("=====================================================\n")


if __name__ == "__main__":
    main()

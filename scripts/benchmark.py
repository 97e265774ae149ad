import argparse
import time

import numpy as np

from detrack.codec import encode_boxes
from detrack.runtime.evaluator import TrackerEvaluator
from detrack.tracking.track_store import TrackingConfig
from detrack.utils.types import BoundingBox, VideoMetadata


def synthetic_batch(meta: VideoMetadata, n_frames: int, n_objects: int, seed: int = 0):
    """Noise background with n_objects patches drifting one pixel per frame."""
    rng = np.random.default_rng(seed)
    base = rng.integers(0, 256, size=(meta.height, meta.width, 3), dtype=np.uint8)
    frames, dets = [], []
    for i in range(n_frames):
        frame = np.roll(base, shift=(i, i), axis=(0, 1))
        boxes = []
        for k in range(n_objects):
            x = 20 + 60 * k + i
            y = 20 + 40 * (k % 3) + i
            # detector fires every third frame
            if i % 3 == 0:
                boxes.append(BoundingBox(x, y, x + 32, y + 32, score=0.9))
        frames.append(frame.tobytes())
        dets.append(encode_boxes(boxes))
    return [frames, dets]


def main():
    parser = argparse.ArgumentParser(description="Tracker evaluator throughput on synthetic frames")
    parser.add_argument("--backend", default="template")
    parser.add_argument("--frames", type=int, default=120)
    parser.add_argument("--objects", type=int, default=5)
    args = parser.parse_args()

    meta = VideoMetadata(width=640, height=360)
    evaluator = TrackerEvaluator(TrackingConfig(backend=args.backend))
    evaluator.configure(meta)
    inputs = synthetic_batch(meta, args.frames, args.objects)

    start = time.perf_counter()
    outputs = evaluator.evaluate(inputs)
    elapsed = time.perf_counter() - start

    results = {
        "backend": args.backend,
        "frames": len(outputs[0]),
        "fps": len(outputs[0]) / max(elapsed, 1e-9),
        "live_tracks": len(evaluator.store),
    }
    print("Benchmark results", results)
    print("Elapsed", elapsed)


if __name__ == "__main__":
    main()

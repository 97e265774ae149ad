"""Tracking-by-detection evaluator: greedy IOU association plus per-track visual trackers."""

__version__ = "0.1.0"

from detrack.runtime.device import DeviceType, resolve_device
from detrack.runtime.evaluator import (
    OUTPUT_NAMES,
    Evaluator,
    EvaluatorCapabilities,
    TrackerEvaluator,
    TrackerEvaluatorFactory,
)

__all__ = [
    "OUTPUT_NAMES",
    "DeviceType",
    "Evaluator",
    "EvaluatorCapabilities",
    "TrackerEvaluator",
    "TrackerEvaluatorFactory",
    "resolve_device",
]

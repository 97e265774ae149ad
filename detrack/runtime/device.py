from __future__ import annotations

from enum import Enum

from detrack.errors import ConfigurationError


class DeviceType(str, Enum):
    CPU = "cpu"
    GPU = "gpu"


SUPPORTED_DEVICES = frozenset({DeviceType.CPU})

_ALIASES = {
    "cpu": DeviceType.CPU,
    "gpu": DeviceType.GPU,
    "cuda": DeviceType.GPU,
    "mps": DeviceType.GPU,
}


def resolve_device(device: str | DeviceType) -> DeviceType:
    """
    Map a configured device to a supported DeviceType.
    Accelerator devices raise ConfigurationError; tracking runs on the CPU only.
    """
    if isinstance(device, DeviceType):
        kind = device
    else:
        key = str(device).strip().lower().split(":", 1)[0]
        if key not in _ALIASES:
            raise ConfigurationError(f"Unknown device '{device}'")
        kind = _ALIASES[key]
    if kind not in SUPPORTED_DEVICES:
        raise ConfigurationError(f"GPU tracker support not implemented (requested device '{device}')")
    return kind

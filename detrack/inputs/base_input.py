from __future__ import annotations

import abc
from typing import Iterator, Optional, Tuple

from detrack.utils.types import FramePacket, VideoMetadata


class BaseInput(abc.ABC):
    """Frame source for the tracker. `meta` is None while the source is inert."""

    meta: Optional[VideoMetadata] = None

    @abc.abstractmethod
    def frames(self) -> Iterator[Tuple[int, FramePacket]]:
        """Yield (1-based frame index, packet) in decode order."""
        ...

    @abc.abstractmethod
    def stop(self) -> None:
        ...

    def __enter__(self) -> "BaseInput":
        return self

    def __exit__(self, *exc) -> None:
        self.stop()

"""The common interface of every stream of samples."""

from __future__ import annotations

import abc
import collections.abc
from datetime import timedelta
from typing import Optional, Tuple

from pcmkit.sample import SampleFormat


class Source(collections.abc.Iterator):
    """An iterator of interleaved samples that also describes its stream.

    Samples come one channel after another: for stereo, left then right.
    """

    @abc.abstractmethod
    def current_frame_len(self) -> Optional[int]:
        """Samples left before the channel count or sample rate may change.

        ``None`` means the parameters stay the same until the end.
        """

    @abc.abstractmethod
    def channels(self) -> int:
        """Number of interleaved channels."""

    @abc.abstractmethod
    def sample_rate(self) -> int:
        """Frames per second."""

    @abc.abstractmethod
    def total_duration(self) -> Optional[timedelta]:
        """Total length of the source, or ``None`` if unknown or infinite."""

    @abc.abstractmethod
    def sample_format(self) -> SampleFormat:
        """The data type of the samples produced."""

    def size_hint(self) -> Tuple[int, Optional[int]]:
        """Lower bound and optional upper bound of the samples left."""
        return (0, None)

    def __iter__(self) -> "Source":
        return self
"""A source of samples held in memory."""

from __future__ import annotations

import operator
from datetime import timedelta
from typing import Iterable, Optional, Tuple

from pcmkit.sample import Number, SampleFormat
from pcmkit.source import Source


class SamplesBuffer(Source):
    """A list of interleaved samples played as a source."""

    def __init__(
        self,
        channels: int,
        sample_rate: int,
        data: Iterable[Number],
        sample_format: SampleFormat = SampleFormat.I16,
    ) -> None:
        if channels == 0:
            raise ValueError("channels must not be zero")
        if sample_rate == 0:
            raise ValueError("sample_rate must not be zero")

        samples = list(data)
        duration_ns = 1_000_000_000 * len(samples) // sample_rate // channels
        self._duration = timedelta(microseconds=duration_ns // 1000)
        self._data = iter(samples)
        self._channels = channels
        self._sample_rate = sample_rate
        self._format = sample_format

    def __next__(self) -> Number:
        return next(self._data)

    def size_hint(self) -> Tuple[int, Optional[int]]:
        remaining = operator.length_hint(self._data)
        return (remaining, remaining)

    def current_frame_len(self) -> Optional[int]:
        return None

    def channels(self) -> int:
        return self._channels

    def sample_rate(self) -> int:
        return self._sample_rate

    def total_duration(self) -> Optional[timedelta]:
        return self._duration

    def sample_format(self) -> SampleFormat:
        return self._format
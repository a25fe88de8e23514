"""A mixer that plays several sources at the same time."""

from __future__ import annotations

import threading
from datetime import timedelta
from typing import Any, List, Optional, Tuple

from pcmkit.channels import ChannelCountConverter
from pcmkit.sample import DataConverter, Number, SampleFormat
from pcmkit.sample_rate import SampleRateConverter
from pcmkit.source import Source


class _FrameTake:
    """Yields at most ``limit`` samples of a source; ``None`` means no limit."""

    def __init__(self, source: Source, limit: Optional[int]) -> None:
        self.source = source
        self._remaining = limit

    def __iter__(self) -> "_FrameTake":
        return self

    def __next__(self) -> Any:
        if self._remaining is None:
            return next(self.source)
        if self._remaining == 0:
            raise StopIteration
        value = next(self.source)
        self._remaining -= 1
        return value

    def size_hint(self) -> Tuple[int, Optional[int]]:
        low, high = self.source.size_hint()
        if self._remaining is None:
            return (low, high)
        high = self._remaining if high is None else min(high, self._remaining)
        return (min(low, self._remaining), high)


class _UniformSource(Source):
    """Converts a source to fixed channels, sample rate and sample format."""

    def __init__(
        self, source: Source, channels: int, sample_rate: int, sample_format: SampleFormat
    ) -> None:
        self._channels = channels
        self._sample_rate = sample_rate
        self._format = sample_format
        self._inner, self._take = self._bootstrap(source)

    def _bootstrap(self, source: Source) -> Tuple[DataConverter, _FrameTake]:
        take = _FrameTake(source, source.current_frame_len())
        source_format = source.sample_format()
        resampled = SampleRateConverter(
            take, source.sample_rate(), self._sample_rate, source.channels(), source_format
        )
        rechanneled = ChannelCountConverter(resampled, source.channels(), self._channels)
        return DataConverter(rechanneled, source_format, self._format), take

    def __next__(self) -> Number:
        try:
            return next(self._inner)
        except StopIteration:
            pass
        # The current frame is over; its parameters may have changed.
        self._inner, self._take = self._bootstrap(self._take.source)
        return next(self._inner)

    def size_hint(self) -> Tuple[int, Optional[int]]:
        return self._inner.size_hint()

    def current_frame_len(self) -> Optional[int]:
        return None

    def channels(self) -> int:
        return self._channels

    def sample_rate(self) -> int:
        return self._sample_rate

    def total_duration(self) -> Optional[timedelta]:
        return self._take.source.total_duration()

    def sample_format(self) -> SampleFormat:
        return self._format


class DynamicMixerController:
    """The input of a mixer: sources added here are played together."""

    def __init__(self, channels: int, sample_rate: int, sample_format: SampleFormat) -> None:
        self.channels = channels
        self.sample_rate = sample_rate
        self.sample_format = sample_format
        self._lock = threading.Lock()
        self._pending: List[Source] = []
        self._has_pending = False

    def add(self, source: Source) -> None:
        """Adds a source to mix with the ones already playing."""
        uniform = _UniformSource(source, self.channels, self.sample_rate, self.sample_format)
        with self._lock:
            self._pending.append(uniform)
            self._has_pending = True


class DynamicMixer(Source):
    """The output of a mixer: the sum of every source added to its controller."""

    def __init__(self, controller: DynamicMixerController) -> None:
        self._input = controller
        self._current_sources: List[Source] = []
        self._sample_count = 0

    def __next__(self) -> Number:
        if self._input._has_pending:
            self._start_pending_sources()

        self._sample_count += 1
        total = self._sum_current_sources()

        if not self._current_sources:
            raise StopIteration
        return total

    def _start_pending_sources(self) -> None:
        # Samples are interleaved, so a source may only start on a frame
        # boundary; otherwise its channels would be swapped.
        with self._input._lock:
            still_pending = []
            for source in self._input._pending:
                if self._sample_count % source.channels() == 0:
                    self._current_sources.append(source)
                else:
                    still_pending.append(source)
            self._input._pending = still_pending
            self._input._has_pending = bool(still_pending)

    def _sum_current_sources(self) -> Number:
        sample_format = self._input.sample_format
        total = sample_format.zero_value()
        still_current = []
        for source in self._current_sources:
            try:
                value = next(source)
            except StopIteration:
                continue
            total = sample_format.saturating_add(total, value)
            still_current.append(source)
        self._current_sources = still_current
        return total

    def size_hint(self) -> Tuple[int, Optional[int]]:
        return (0, None)

    def current_frame_len(self) -> Optional[int]:
        return None

    def channels(self) -> int:
        return self._input.channels

    def sample_rate(self) -> int:
        return self._input.sample_rate

    def total_duration(self) -> Optional[timedelta]:
        return None

    def sample_format(self) -> SampleFormat:
        return self._input.sample_format


def mixer(
    channels: int, sample_rate: int, sample_format: SampleFormat = SampleFormat.I16
) -> Tuple[DynamicMixerController, DynamicMixer]:
    """Builds a mixer and returns its controller and output.

    Every source added is converted to the given channels, rate and format.
    """
    controller = DynamicMixerController(channels, sample_rate, sample_format)
    return controller, DynamicMixer(controller)
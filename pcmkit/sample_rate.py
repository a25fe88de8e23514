"""Conversion of interleaved samples between sample rates."""

from __future__ import annotations

import math
import operator
from typing import Any, Iterable, Iterator, List, Optional, Tuple

from pcmkit.sample import SampleFormat


def _size_hint(iterator: object) -> Tuple[int, Optional[int]]:
    hint = getattr(iterator, "size_hint", None)
    if callable(hint):
        return hint()
    length = operator.length_hint(iterator, -1)
    if length < 0:
        return (0, None)
    return (length, length)


class SampleRateConverter:
    """Iterator resampling ``from_rate`` to ``to_rate`` by linear interpolation.

    Chunks of ``from`` input frames become chunks of ``to`` output frames,
    where both rates have been reduced by their greatest common divisor.
    """

    def __init__(
        self,
        input: Iterable[Any],
        from_rate: int,
        to_rate: int,
        channels: int,
        sample_format: SampleFormat = SampleFormat.I16,
    ) -> None:
        if from_rate < 1:
            raise ValueError("from_rate must be at least 1")
        if to_rate < 1:
            raise ValueError("to_rate must be at least 1")
        if channels < 1:
            raise ValueError("channels must be at least 1")

        self._input = iter(input)
        self._format = sample_format
        self._channels = channels

        divisor = math.gcd(from_rate, to_rate)
        self._from = from_rate // divisor
        self._to = to_rate // divisor

        if self._from == self._to:
            self._current_frame: List[Any] = []
            self._next_frame: List[Any] = []
        else:
            self._current_frame = self._read_frame()
            self._next_frame = self._read_frame()

        self._current_frame_pos_in_chunk = 0
        self._next_output_frame_pos_in_chunk = 0
        self._output_buffer: List[Any] = []

    def _read_frame(self) -> List[Any]:
        frame = []
        for _ in range(self._channels):
            value = next(self._input, None)
            if value is None:
                break
            frame.append(value)
        return frame

    def _next_input_frame(self) -> None:
        self._current_frame_pos_in_chunk += 1
        self._current_frame = self._next_frame
        self._next_frame = self._read_frame()

    def __iter__(self) -> "SampleRateConverter":
        return self

    def __next__(self) -> Any:
        if self._from == self._to:
            return next(self._input)

        if self._output_buffer:
            return self._output_buffer.pop(0)

        if self._next_output_frame_pos_in_chunk == self._to:
            self._next_output_frame_pos_in_chunk = 0
            self._next_input_frame()
            while self._current_frame_pos_in_chunk != self._from:
                self._next_input_frame()
            self._current_frame_pos_in_chunk = 0
        else:
            req_left_sample = (
                self._from * self._next_output_frame_pos_in_chunk // self._to
            ) % self._from
            while self._current_frame_pos_in_chunk != req_left_sample:
                self._next_input_frame()

        numerator = (self._from * self._next_output_frame_pos_in_chunk) % self._to
        result = None
        for offset, (current, following) in enumerate(
            zip(self._current_frame, self._next_frame)
        ):
            sample = self._format.lerp(current, following, numerator, self._to)
            if offset == 0:
                result = sample
            else:
                self._output_buffer.append(sample)

        self._next_output_frame_pos_in_chunk += 1

        if result is not None:
            return result
        if self._current_frame:
            first = self._current_frame.pop(0)
            self._output_buffer = self._current_frame
            self._current_frame = []
            return first
        raise StopIteration

    def size_hint(self) -> Tuple[int, Optional[int]]:
        """Lower and optional upper bound of the samples left."""
        low, high = _size_hint(self._input)
        if self._from == self._to:
            return (low, high)

        def apply(samples: int) -> int:
            after_chunk = samples
            if self._current_frame_pos_in_chunk == self._from - 1:
                after_chunk += len(self._next_frame)
            unread = max(0, self._from - (self._current_frame_pos_in_chunk + 2))
            after_chunk = max(0, after_chunk - unread * self._channels)
            after_chunk = after_chunk * self._to // self._from
            current_chunk = (
                self._to - self._next_output_frame_pos_in_chunk
            ) * self._channels
            return current_chunk + after_chunk + len(self._output_buffer)

        return (apply(low), None if high is None else apply(high))

    def __len__(self) -> int:
        low, high = self.size_hint()
        if high != low:
            raise TypeError("length of the input is not known exactly")
        return low

    def into_inner(self) -> Iterator[Any]:
        """Returns the underlying iterator."""
        return self._input
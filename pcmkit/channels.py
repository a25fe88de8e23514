"""Conversion of interleaved samples between channel counts."""

from __future__ import annotations

import operator
from typing import Any, Iterable, Iterator, Optional, Tuple


def _size_hint(iterator: object) -> Tuple[int, Optional[int]]:
    hint = getattr(iterator, "size_hint", None)
    if callable(hint):
        return hint()
    length = operator.length_hint(iterator, -1)
    if length < 0:
        return (0, None)
    return (length, length)


class ChannelCountConverter:
    """Iterator that turns ``from_channels`` interleaved channels into ``to_channels``.

    Extra input channels are dropped; missing output channels repeat the last
    input channel of the frame.
    """

    def __init__(self, input: Iterable[Any], from_channels: int, to_channels: int) -> None:
        if from_channels < 1:
            raise ValueError("from_channels must be at least 1")
        if to_channels < 1:
            raise ValueError("to_channels must be at least 1")
        self._input = iter(input)
        self._from = from_channels
        self._to = to_channels
        self._sample_repeat: Any = None
        self._next_output_sample_pos = 0

    def __iter__(self) -> "ChannelCountConverter":
        return self

    def __next__(self) -> Any:
        pos = self._next_output_sample_pos
        if pos == self._from - 1:
            value = next(self._input, None)
            self._sample_repeat = value
        elif pos < self._from:
            value = next(self._input, None)
        else:
            value = self._sample_repeat

        pos += 1
        if pos == self._to:
            pos = 0
            for _ in range(self._to, self._from):
                next(self._input, None)
        self._next_output_sample_pos = pos

        if value is None:
            raise StopIteration
        return value

    def size_hint(self) -> Tuple[int, Optional[int]]:
        """Lower and optional upper bound of the samples left."""
        low, high = _size_hint(self._input)
        pos = self._next_output_sample_pos

        def scale(count: int) -> int:
            return (count // self._from) * self._to + pos

        return (scale(low), None if high is None else scale(high))

    def __len__(self) -> int:
        low, high = self.size_hint()
        if high != low:
            raise TypeError("length of the input is not known exactly")
        return low

    def into_inner(self) -> Iterator[Any]:
        """Returns the underlying iterator."""
        return self._input
"""Sample formats and conversion between them."""

from __future__ import annotations

import enum
import math
import operator
from typing import Iterable, Iterator, Optional, Tuple, Union

Number = Union[int, float]

_I16_MIN = -32768
_I16_MAX = 32767
_U16_MIN = 0
_U16_MAX = 65535
_U16_ZERO = 32768
_I16_SCALE = 32768.0


def _trunc_div(numerator: int, denominator: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator < 0) == (denominator < 0) else -quotient


def _wrap(value: int, bits: int, signed: bool) -> int:
    """Reduce an integer to the given width, wrapping on overflow."""
    mask = (1 << bits) - 1
    value &= mask
    if signed and value >= 1 << (bits - 1):
        value -= 1 << bits
    return value


def _saturating_int(value: float, low: int, high: int) -> int:
    """Truncate a float to an integer, saturating at the bounds; NaN gives 0."""
    if math.isnan(value):
        return 0
    if value <= low:
        return low
    if value >= high:
        return high
    return int(value)


def _f32_to_i16(value: float) -> int:
    return _saturating_int(value * _I16_SCALE, _I16_MIN, _I16_MAX)


def _size_hint(iterator: object) -> Tuple[int, Optional[int]]:
    hint = getattr(iterator, "size_hint", None)
    if callable(hint):
        return hint()
    length = operator.length_hint(iterator, -1)
    if length < 0:
        return (0, None)
    return (length, length)


class SampleFormat(enum.Enum):
    """The data type of a single sample.

    ``I16`` is silent at 0 and spans the signed 16-bit range, ``U16`` is
    silent at 32768 and spans 0..65535, ``F32`` is silent at 0.0 and spans
    -1.0..1.0.
    """

    I16 = "i16"
    U16 = "u16"
    F32 = "f32"

    def lerp(self, first: Number, second: Number, numerator: int, denominator: int) -> Number:
        """Linear interpolation from ``first`` toward ``second`` by numerator/denominator."""
        if self is SampleFormat.F32:
            return first + (second - first) * numerator / denominator
        result = first + _trunc_div((second - first) * numerator, denominator)
        return _wrap(result, 16, signed=self is SampleFormat.I16)

    def amplify(self, value: Number, factor: float) -> Number:
        """Multiplies a sample by ``factor``."""
        product = value * factor
        if self is SampleFormat.F32:
            return product
        if self is SampleFormat.I16:
            return _saturating_int(product, _I16_MIN, _I16_MAX)
        return _saturating_int(product, _U16_MIN, _U16_MAX)

    def saturating_add(self, first: Number, second: Number) -> Number:
        """Adds two samples, clamping integer formats to their range."""
        total = first + second
        if self is SampleFormat.F32:
            return total
        if self is SampleFormat.I16:
            return max(_I16_MIN, min(_I16_MAX, total))
        return max(_U16_MIN, min(_U16_MAX, total))

    def zero_value(self) -> Number:
        """The value that stands for silence."""
        if self is SampleFormat.F32:
            return 0.0
        if self is SampleFormat.I16:
            return 0
        return _U16_ZERO

    def convert(self, value: Number, target: "SampleFormat") -> Number:
        """Converts a sample of this format into the ``target`` format."""
        if self is target:
            return value
        if target is SampleFormat.F32:
            if self is SampleFormat.I16:
                return value / _I16_SCALE
            return (value - _U16_ZERO) / _I16_SCALE
        if self is SampleFormat.F32:
            as_i16 = _f32_to_i16(value)
            return as_i16 if target is SampleFormat.I16 else as_i16 + _U16_ZERO
        if self is SampleFormat.I16:
            return value + _U16_ZERO
        return value - _U16_ZERO


class DataConverter:
    """Iterator converting every sample of ``input`` to another format."""

    def __init__(
        self,
        input: Iterable[Number],
        source_format: SampleFormat,
        target_format: SampleFormat,
    ) -> None:
        self._input = iter(input)
        self.source_format = source_format
        self.target_format = target_format

    def __iter__(self) -> "DataConverter":
        return self

    def __next__(self) -> Number:
        return self.source_format.convert(next(self._input), self.target_format)

    def size_hint(self) -> Tuple[int, Optional[int]]:
        """Lower and upper bound of the samples left, taken from the input."""
        return _size_hint(self._input)

    def into_inner(self) -> Iterator[Number]:
        """Returns the underlying iterator."""
        return self._input
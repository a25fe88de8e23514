"""Decoding of RIFF/WAVE data into 16-bit samples."""

from __future__ import annotations

import enum
import math
import struct
from dataclasses import dataclass
from datetime import timedelta
from typing import BinaryIO, Optional, Tuple

from pcmkit.sample import SampleFormat
from pcmkit.source import Source

_WAVE_FORMAT_PCM = 0x0001
_WAVE_FORMAT_IEEE_FLOAT = 0x0003
_WAVE_FORMAT_EXTENSIBLE = 0xFFFE

_I16_MAX = 32767


class WavFormatError(ValueError):
    """The data is not a well-formed WAVE stream."""


class UnsupportedWavSpecError(ValueError):
    """The WAVE stream uses a sample encoding that cannot be decoded."""


class _Encoding(enum.Enum):
    INT = "int"
    FLOAT = "float"


@dataclass(frozen=True)
class _Header:
    channels: int
    sample_rate: int
    bits_per_sample: int
    encoding: _Encoding
    bytes_per_sample: int
    num_samples: int


def _read_exact(stream: BinaryIO, count: int) -> bytes:
    chunk = stream.read(count)
    if chunk is None or len(chunk) != count:
        raise WavFormatError("unexpected end of data")
    return chunk


def _skip(stream: BinaryIO, count: int) -> None:
    if count:
        _read_exact(stream, count)


def _parse_fmt(body: bytes) -> Tuple[int, int, int, int, _Encoding]:
    if len(body) < 16:
        raise WavFormatError("fmt chunk is too short")
    tag, channels, sample_rate, _byte_rate, block_align, bits = struct.unpack_from(
        "<HHIIHH", body
    )
    if tag == _WAVE_FORMAT_EXTENSIBLE:
        if len(body) < 40:
            raise WavFormatError("extensible fmt chunk is too short")
        valid_bits, _mask = struct.unpack_from("<HI", body, 18)
        (tag,) = struct.unpack_from("<H", body, 24)
        if valid_bits:
            bits = valid_bits
    if tag == _WAVE_FORMAT_PCM:
        encoding = _Encoding.INT
    elif tag == _WAVE_FORMAT_IEEE_FLOAT:
        encoding = _Encoding.FLOAT
    else:
        raise WavFormatError(f"unsupported format tag {tag:#06x}")
    if channels == 0:
        raise WavFormatError("channel count is zero")
    if sample_rate == 0:
        raise WavFormatError("sample rate is zero")
    if bits == 0:
        raise WavFormatError("bits per sample is zero")
    if block_align == 0 or block_align % channels:
        raise WavFormatError("block alignment does not match the channel count")
    bytes_per_sample = block_align // channels
    if bits > bytes_per_sample * 8:
        raise WavFormatError("bits per sample exceed the sample container")
    return channels, sample_rate, bits, bytes_per_sample, encoding


def _parse_header(stream: BinaryIO) -> _Header:
    """Reads the header and leaves the stream at the first sample."""
    riff = _read_exact(stream, 12)
    if riff[:4] != b"RIFF" or riff[8:12] != b"WAVE":
        raise WavFormatError("missing RIFF/WAVE signature")

    fmt: Optional[Tuple[int, int, int, int, _Encoding]] = None
    while True:
        chunk_id, size = struct.unpack("<4sI", _read_exact(stream, 8))
        if chunk_id == b"fmt ":
            fmt = _parse_fmt(_read_exact(stream, size))
            _skip(stream, size & 1)
        elif chunk_id == b"data":
            if fmt is None:
                raise WavFormatError("data chunk precedes fmt chunk")
            channels, sample_rate, bits, bytes_per_sample, encoding = fmt
            return _Header(
                channels=channels,
                sample_rate=sample_rate,
                bits_per_sample=bits,
                encoding=encoding,
                bytes_per_sample=bytes_per_sample,
                num_samples=size // bytes_per_sample,
            )
        else:
            _skip(stream, size + (size & 1))


def is_wave(data: BinaryIO) -> bool:
    """Tells whether the stream holds WAVE data, leaving its position unchanged."""
    position = data.tell()
    try:
        _parse_header(data)
    except (WavFormatError, struct.error):
        return False
    finally:
        data.seek(position)
    return True


def _to_f32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def f32_to_i16(value: float) -> int:
    """Scales a float sample in -1.0..1.0 to 16 bits, clipping outside that range."""
    clipped = -1.0 if math.isnan(value) else max(-1.0, min(1.0, value))
    return int(_to_f32(clipped * float(_I16_MAX)))


def _as_i16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value >= 0x8000 else value


def i8_to_i16(value: int) -> int:
    """Scales a signed 8-bit sample to 16 bits."""
    return value * 256


def i24_to_i16(value: int) -> int:
    """Reduces a signed 24-bit sample to 16 bits."""
    return _as_i16(value >> 8)


def i32_to_i16(value: int) -> int:
    """Reduces a signed 32-bit sample to 16 bits."""
    return _as_i16(value >> 16)


class WavDecoder(Source):
    """Source of 16-bit samples read from a WAVE stream."""

    def __init__(self, data: BinaryIO) -> None:
        position = data.tell()
        try:
            header = _parse_header(data)
        except (WavFormatError, struct.error) as exc:
            data.seek(position)
            if isinstance(exc, WavFormatError):
                raise
            raise WavFormatError(str(exc)) from exc
        self._data = data
        self._header = header
        self._samples_read = 0
        self._total_duration = timedelta(
            microseconds=1_000_000
            * header.num_samples
            // (header.sample_rate * header.channels)
        )

    def into_inner(self) -> BinaryIO:
        """Returns the underlying stream."""
        return self._data

    def _convert(self, raw: bytes) -> int:
        header = self._header
        key = (header.encoding, header.bits_per_sample)
        if key == (_Encoding.FLOAT, 32):
            return f32_to_i16(struct.unpack("<f", raw)[0])
        if header.bytes_per_sample == 1:
            value = raw[0] - 128
        else:
            value = int.from_bytes(raw, "little", signed=True)
        if key == (_Encoding.INT, 8):
            return i8_to_i16(value)
        if key == (_Encoding.INT, 16):
            return value
        if key == (_Encoding.INT, 24):
            return i24_to_i16(value)
        return i32_to_i16(value)

    def __next__(self) -> int:
        header = self._header
        supported = {
            (_Encoding.FLOAT, 32),
            (_Encoding.INT, 8),
            (_Encoding.INT, 16),
            (_Encoding.INT, 24),
            (_Encoding.INT, 32),
        }
        if (header.encoding, header.bits_per_sample) not in supported:
            raise UnsupportedWavSpecError(
                f"unsupported wav spec: {header.encoding.value}, {header.bits_per_sample}"
            )
        if self._samples_read >= header.num_samples:
            raise StopIteration
        self._samples_read += 1
        raw = self._data.read(header.bytes_per_sample)
        if raw is None or len(raw) != header.bytes_per_sample:
            # A sample that cannot be read plays as silence.
            return 0
        return self._convert(raw)

    def size_hint(self) -> Tuple[int, Optional[int]]:
        remaining = self._header.num_samples - self._samples_read
        return (remaining, remaining)

    def current_frame_len(self) -> Optional[int]:
        return None

    def channels(self) -> int:
        return self._header.channels

    def sample_rate(self) -> int:
        return self._header.sample_rate

    def total_duration(self) -> Optional[timedelta]:
        return self._total_duration

    def sample_format(self) -> SampleFormat:
        return SampleFormat.I16
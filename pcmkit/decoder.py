"""Decoding of audio data into a source of 16-bit samples."""

from __future__ import annotations

import enum
from datetime import timedelta
from typing import BinaryIO, Optional, Tuple

from pcmkit.sample import SampleFormat
from pcmkit.source import Source
from pcmkit.wav import WavDecoder, WavFormatError, is_wave


class DecoderError(Exception):
    """The data could not be turned into a decoder."""

    def __init__(self, message: str = "Unrecognized format") -> None:
        super().__init__(message)


class Mp4Type(enum.Enum):
    """The file extensions of the MP4 container family."""

    MP4 = "mp4"
    M4A = "m4a"
    M4P = "m4p"
    M4B = "m4b"
    M4R = "m4r"
    M4V = "m4v"
    MOV = "mov"

    @classmethod
    def from_str(cls, text: str) -> "Mp4Type":
        """Parses an extension, ignoring case."""
        try:
            return cls(text.lower())
        except ValueError:
            raise ValueError(f"{text} is not a valid mp4 extension") from None

    def __str__(self) -> str:
        return self.value


class Decoder(Source):
    """Source of samples decoded from a stream whose format is detected."""

    def __init__(self, data: BinaryIO) -> None:
        try:
            self._inner: WavDecoder = WavDecoder(data)
        except WavFormatError:
            raise DecoderError() from None

    @classmethod
    def new_looped(cls, data: BinaryIO) -> "LoopedDecoder":
        """Builds a decoder that starts over each time the data ends."""
        return LoopedDecoder(cls(data))

    @classmethod
    def new_wav(cls, data: BinaryIO) -> "Decoder":
        """Builds a decoder from WAVE data."""
        if not is_wave(data):
            raise DecoderError()
        return cls(data)

    def __next__(self) -> int:
        return next(self._inner)

    def size_hint(self) -> Tuple[int, Optional[int]]:
        return self._inner.size_hint()

    def current_frame_len(self) -> Optional[int]:
        return self._inner.current_frame_len()

    def channels(self) -> int:
        return self._inner.channels()

    def sample_rate(self) -> int:
        return self._inner.sample_rate()

    def total_duration(self) -> Optional[timedelta]:
        return self._inner.total_duration()

    def sample_format(self) -> SampleFormat:
        return self._inner.sample_format()


class LoopedDecoder(Source):
    """Source that plays decoded data over and over without end."""

    def __init__(self, decoder: Decoder) -> None:
        self._inner: Optional[WavDecoder] = decoder._inner

    def __next__(self) -> int:
        if self._inner is None:
            raise StopIteration
        try:
            return next(self._inner)
        except StopIteration:
            pass
        reader = self._inner.into_inner()
        self._inner = None
        try:
            reader.seek(0)
            restarted = WavDecoder(reader)
        except (OSError, ValueError):
            raise StopIteration from None
        self._inner = restarted
        return next(restarted)

    def size_hint(self) -> Tuple[int, Optional[int]]:
        if self._inner is None:
            return (0, None)
        return (self._inner.size_hint()[0], None)

    def current_frame_len(self) -> Optional[int]:
        if self._inner is None:
            return 0
        return self._inner.current_frame_len()

    def channels(self) -> int:
        if self._inner is None:
            return 0
        return self._inner.channels()

    def sample_rate(self) -> int:
        if self._inner is None:
            return 1
        return self._inner.sample_rate()

    def total_duration(self) -> Optional[timedelta]:
        return None

    def sample_format(self) -> SampleFormat:
        return SampleFormat.I16
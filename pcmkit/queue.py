"""A queue that plays sources one after the other."""

from __future__ import annotations

import threading
from datetime import timedelta
from typing import List, Optional, Tuple

from pcmkit.sample import Number, SampleFormat
from pcmkit.source import Source

THRESHOLD = 512
"""Largest frame reported when nothing better is known, and the length of filler silence."""


class _Empty(Source):
    """A source that produces nothing."""

    def __init__(self, sample_format: SampleFormat) -> None:
        self._format = sample_format

    def __next__(self) -> Number:
        raise StopIteration

    def current_frame_len(self) -> Optional[int]:
        return None

    def channels(self) -> int:
        return 1

    def sample_rate(self) -> int:
        return 48000

    def total_duration(self) -> Optional[timedelta]:
        return timedelta(0)

    def sample_format(self) -> SampleFormat:
        return self._format


class _Silence(Source):
    """A fixed number of silent samples."""

    def __init__(
        self, channels: int, sample_rate: int, count: int, sample_format: SampleFormat
    ) -> None:
        self._channels = channels
        self._sample_rate = sample_rate
        self._remaining = count
        self._format = sample_format

    def __next__(self) -> Number:
        if self._remaining == 0:
            raise StopIteration
        self._remaining -= 1
        return self._format.zero_value()

    def size_hint(self) -> Tuple[int, Optional[int]]:
        return (self._remaining, self._remaining)

    def current_frame_len(self) -> Optional[int]:
        return self._remaining

    def channels(self) -> int:
        return self._channels

    def sample_rate(self) -> int:
        return self._sample_rate

    def total_duration(self) -> Optional[timedelta]:
        return None

    def sample_format(self) -> SampleFormat:
        return self._format


class SourcesQueueInput:
    """The end of a queue where sources are added."""

    def __init__(self, keep_alive_if_empty: bool, sample_format: SampleFormat) -> None:
        self._lock = threading.Lock()
        self._next_sounds: List[Tuple[Source, Optional[threading.Event]]] = []
        self.keep_alive_if_empty = keep_alive_if_empty
        self.sample_format = sample_format

    def append(self, source: Source) -> None:
        """Adds a source to the end of the queue."""
        with self._lock:
            self._next_sounds.append((source, None))

    def append_with_signal(self, source: Source) -> threading.Event:
        """Adds a source to the end of the queue.

        The returned event is set once the source has finished playing.
        """
        done = threading.Event()
        with self._lock:
            self._next_sounds.append((source, done))
        return done

    def set_keep_alive_if_empty(self, keep_alive_if_empty: bool) -> None:
        """Sets whether the queue plays silence instead of ending when it runs dry."""
        self.keep_alive_if_empty = keep_alive_if_empty

    def clear(self) -> int:
        """Removes every queued source and returns how many were removed."""
        with self._lock:
            removed = self._next_sounds
            self._next_sounds = []
        # A removed sound will never play; release anyone waiting on it.
        for _, done in removed:
            if done is not None:
                done.set()
        return len(removed)

    def _is_empty(self) -> bool:
        with self._lock:
            return not self._next_sounds

    def _pop(self) -> Optional[Tuple[Source, Optional[threading.Event]]]:
        with self._lock:
            if not self._next_sounds:
                return None
            return self._next_sounds.pop(0)


class SourcesQueueOutput(Source):
    """The end of a queue that plays its sources in order."""

    def __init__(self, input: SourcesQueueInput) -> None:
        self._input = input
        self._current: Source = _Empty(input.sample_format)
        self._signal_after_end: Optional[threading.Event] = None

    def __next__(self) -> Number:
        while True:
            try:
                return next(self._current)
            except StopIteration:
                pass
            if not self._go_next():
                raise StopIteration

    def _go_next(self) -> bool:
        if self._signal_after_end is not None:
            self._signal_after_end.set()
            self._signal_after_end = None

        entry = self._input._pop()
        if entry is None:
            if not self._input.keep_alive_if_empty:
                return False
            # A short silence avoids spinning while waiting for new sounds.
            entry = (_Silence(1, 44100, THRESHOLD, self._input.sample_format), None)

        self._current, self._signal_after_end = entry
        return True

    def size_hint(self) -> Tuple[int, Optional[int]]:
        return (self._current.size_hint()[0], None)

    def current_frame_len(self) -> Optional[int]:
        # The boundary between two sounds must also be a frame boundary.
        length = self._current.current_frame_len()
        if length is not None:
            if length != 0:
                return length
            if self._input.keep_alive_if_empty and self._input._is_empty():
                return THRESHOLD

        lower_bound = self._current.size_hint()[0]
        if lower_bound > 0:
            return lower_bound
        return THRESHOLD

    def channels(self) -> int:
        return self._current.channels()

    def sample_rate(self) -> int:
        return self._current.sample_rate()

    def total_duration(self) -> Optional[timedelta]:
        return None

    def sample_format(self) -> SampleFormat:
        return self._input.sample_format


def queue(
    keep_alive_if_empty: bool, sample_format: SampleFormat = SampleFormat.I16
) -> Tuple[SourcesQueueInput, SourcesQueueOutput]:
    """Builds a queue and returns its input and output ends.

    With ``keep_alive_if_empty`` the output plays silence while nothing is
    queued; otherwise it ends as soon as the queue is empty.
    """
    input = SourcesQueueInput(keep_alive_if_empty, sample_format)
    return input, SourcesQueueOutput(input)
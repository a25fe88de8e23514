from datetime import timedelta

import pytest

from pcmkit.buffer import SamplesBuffer
from pcmkit.sample import SampleFormat


def test_basic():
    buf = SamplesBuffer(1, 44100, [0, 0, 0, 0, 0, 0])
    assert buf.channels() == 1
    assert buf.sample_rate() == 44100
    assert buf.current_frame_len() is None
    assert buf.sample_format() is SampleFormat.I16


def test_panic_if_zero_channels():
    with pytest.raises(ValueError):
        SamplesBuffer(0, 44100, [0, 0, 0, 0, 0, 0])


def test_panic_if_zero_sample_rate():
    with pytest.raises(ValueError):
        SamplesBuffer(1, 0, [0, 0, 0, 0, 0, 0])


def test_duration_basic():
    buf = SamplesBuffer(2, 2, [0, 0, 0, 0, 0, 0])
    assert buf.total_duration() == timedelta(seconds=1, milliseconds=500)


def test_iteration():
    buf = SamplesBuffer(1, 44100, [1, 2, 3, 4, 5, 6])
    assert [next(buf) for _ in range(6)] == [1, 2, 3, 4, 5, 6]
    with pytest.raises(StopIteration):
        next(buf)


def test_size_hint_counts_down():
    buf = SamplesBuffer(1, 44100, [1, 2, 3])
    assert buf.size_hint() == (3, 3)
    next(buf)
    assert buf.size_hint() == (2, 2)
    list(buf)
    assert buf.size_hint() == (0, 0)


def test_float_format_is_reported():
    buf = SamplesBuffer(2, 48000, [0.5, -0.5], SampleFormat.F32)
    assert buf.sample_format() is SampleFormat.F32
    assert list(buf) == [0.5, -0.5]


def test_duration_does_not_change_while_iterating():
    buf = SamplesBuffer(1, 4, [1, 2, 3, 4])
    list(buf)
    assert buf.total_duration() == timedelta(seconds=1)
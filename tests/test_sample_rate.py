from hypothesis import given, settings
from hypothesis import strategies as st
import pytest

from pcmkit.sample import SampleFormat
from pcmkit.sample_rate import SampleRateConverter

U16 = SampleFormat.U16
u16_lists = st.lists(st.integers(min_value=0, max_value=65535), max_size=60)


def _truncate(data, n):
    return data[: n * (len(data) // n)]


def _every_kth_frame(data, n, k):
    frames = [data[i : i + n] for i in range(0, len(data) - len(data) % n, n)]
    return [sample for frame in frames[::k] for sample in frame]


@given(
    st.integers(min_value=1, max_value=10**6),
    st.integers(min_value=1, max_value=10**6),
    st.integers(min_value=1, max_value=16),
)
def test_empty(from_rate, to_rate, n):
    output = list(SampleRateConverter(iter([]), from_rate, to_rate, n, U16))
    assert output == []


@given(
    st.integers(min_value=1, max_value=10**6),
    st.integers(min_value=1, max_value=16),
    u16_lists,
)
def test_identity(from_rate, n, data):
    output = list(SampleRateConverter(iter(data), from_rate, from_rate, n, U16))
    assert output == data


@settings(max_examples=100)
@given(
    st.integers(min_value=1, max_value=10**5),
    st.integers(min_value=1, max_value=12),
    u16_lists,
    st.integers(min_value=1, max_value=6),
)
def test_divide_sample_rate(to_rate, k, data, n):
    data = _truncate(data, n)
    output = list(SampleRateConverter(iter(data), to_rate * k, to_rate, n, U16))
    assert output == _every_kth_frame(data, n, k)


@settings(max_examples=100)
@given(
    st.integers(min_value=1, max_value=10**5),
    st.integers(min_value=1, max_value=12),
    u16_lists,
    st.integers(min_value=1, max_value=6),
)
def test_multiply_sample_rate(from_rate, k, data, n):
    data = _truncate(data, n)
    output = list(SampleRateConverter(iter(data), from_rate, from_rate * k, n, U16))
    assert _every_kth_frame(output, n, k) == data


def test_upsample():
    data = [2, 16, 4, 18, 6, 20, 8, 22]
    converter = SampleRateConverter(iter(data), 2000, 3000, 2, U16)
    assert len(converter) == 12
    assert list(converter) == [2, 16, 3, 17, 4, 18, 6, 20, 7, 21, 8, 22]


def test_passthrough_size_hint_follows_input():
    converter = SampleRateConverter(iter([1, 2, 3]), 44100, 44100, 1, U16)
    assert converter.size_hint() == (3, 3)
    assert next(converter) == 1
    assert converter.size_hint() == (2, 2)


def test_float_interpolation():
    converter = SampleRateConverter(iter([0.0, 1.0]), 1, 2, 1, SampleFormat.F32)
    assert list(converter) == [0.0, 0.5, 1.0]


def test_into_inner_returns_remaining_input():
    converter = SampleRateConverter(iter([1, 2, 3, 4, 5]), 1, 2, 1, U16)
    assert list(converter.into_inner()) == [3, 4, 5]


@pytest.mark.parametrize(
    "from_rate, to_rate, channels",
    [(0, 44100, 1), (44100, 0, 1), (44100, 48000, 0)],
)
def test_rejects_zero_parameters(from_rate, to_rate, channels):
    with pytest.raises(ValueError):
        SampleRateConverter(iter([1, 2]), from_rate, to_rate, channels, U16)


def test_len_requires_exact_input():
    converter = SampleRateConverter((x for x in [1, 2, 3, 4]), 1, 2, 1, U16)
    assert converter.size_hint()[1] is None
    with pytest.raises(TypeError):
        len(converter)
import pytest
from hypothesis import given
from hypothesis import strategies as st

from pcmkit.sample import DataConverter, SampleFormat

I16_MAX = 2**15 - 1
I16_MIN = -(2**15)
U16_MAX = 2**16 - 1

i16s = st.integers(min_value=I16_MIN, max_value=I16_MAX)
u16s = st.integers(min_value=0, max_value=U16_MAX)


def test_zero_values():
    assert SampleFormat.I16.zero_value() == 0
    assert SampleFormat.U16.zero_value() == 32768
    assert SampleFormat.F32.zero_value() == 0.0


def test_silence_converts_to_silence():
    assert SampleFormat.I16.convert(0, SampleFormat.I16) == 0
    assert SampleFormat.I16.convert(0, SampleFormat.U16) == 32768
    assert SampleFormat.I16.convert(0, SampleFormat.F32) == 0.0
    assert SampleFormat.U16.convert(32768, SampleFormat.I16) == 0
    assert SampleFormat.U16.convert(32768, SampleFormat.U16) == 32768
    assert SampleFormat.U16.convert(32768, SampleFormat.F32) == 0.0
    assert SampleFormat.F32.convert(0.0, SampleFormat.I16) == 0
    assert SampleFormat.F32.convert(0.0, SampleFormat.U16) == 32768
    assert SampleFormat.F32.convert(0.0, SampleFormat.F32) == 0.0


@given(i16s)
def test_i16_float_round_trip(value):
    as_float = SampleFormat.I16.convert(value, SampleFormat.F32)
    assert -1.0 <= as_float < 1.0
    assert SampleFormat.F32.convert(as_float, SampleFormat.I16) == value


@given(i16s)
def test_i16_u16_round_trip(value):
    as_u16 = SampleFormat.I16.convert(value, SampleFormat.U16)
    assert 0 <= as_u16 <= U16_MAX
    assert SampleFormat.U16.convert(as_u16, SampleFormat.I16) == value


@given(u16s)
def test_u16_float_round_trip(value):
    as_float = SampleFormat.U16.convert(value, SampleFormat.F32)
    assert SampleFormat.F32.convert(as_float, SampleFormat.U16) == value


def test_float_conversion_clips():
    assert SampleFormat.F32.convert(2.0, SampleFormat.I16) == I16_MAX
    assert SampleFormat.F32.convert(-2.0, SampleFormat.I16) == I16_MIN
    assert SampleFormat.F32.convert(float("nan"), SampleFormat.I16) == 0


@pytest.mark.parametrize("fmt,values", [(SampleFormat.I16, i16s), (SampleFormat.U16, u16s)])
def test_integer_lerp_endpoints_and_bounds(fmt, values):
    @given(values, values, st.integers(min_value=1, max_value=1000), st.data())
    def check(first, second, denominator, data):
        numerator = data.draw(st.integers(min_value=0, max_value=denominator))
        assert fmt.lerp(first, second, 0, denominator) == first
        assert fmt.lerp(first, second, denominator, denominator) == second
        result = fmt.lerp(first, second, numerator, denominator)
        assert min(first, second) <= result <= max(first, second)

    check()


@given(st.floats(-1, 1), st.floats(-1, 1))
def test_float_lerp_endpoints(first, second):
    assert SampleFormat.F32.lerp(first, second, 0, 4) == first
    assert SampleFormat.F32.lerp(first, second, 4, 4) == pytest.approx(second)


@given(i16s)
def test_amplify_identity_and_zero(value):
    assert SampleFormat.I16.amplify(value, 1.0) == value
    assert SampleFormat.I16.amplify(value, 0.0) == 0


def test_amplify_saturates():
    assert SampleFormat.I16.amplify(I16_MAX, 4.0) == I16_MAX
    assert SampleFormat.I16.amplify(I16_MAX, -4.0) == I16_MIN
    assert SampleFormat.U16.amplify(U16_MAX, 4.0) == U16_MAX
    assert SampleFormat.F32.amplify(0.5, 4.0) == 2.0


def test_saturating_add():
    assert SampleFormat.I16.saturating_add(I16_MAX, 10) == I16_MAX
    assert SampleFormat.I16.saturating_add(I16_MIN, -10) == I16_MIN
    assert SampleFormat.U16.saturating_add(U16_MAX, 10) == U16_MAX
    assert SampleFormat.I16.saturating_add(10, -10) == 0
    assert SampleFormat.F32.saturating_add(1.0, 1.0) == 2.0


def test_data_converter_matches_convert():
    data = [10, -10, 20, -20, I16_MAX, I16_MIN]
    converter = DataConverter(data, SampleFormat.I16, SampleFormat.F32)
    assert converter.size_hint() == (len(data), len(data))
    out = list(converter)
    assert out == [SampleFormat.I16.convert(v, SampleFormat.F32) for v in data]
    assert converter.size_hint() == (0, 0)


def test_data_converter_into_inner_returns_rest():
    converter = DataConverter([1, 2, 3], SampleFormat.I16, SampleFormat.U16)
    assert next(converter) == SampleFormat.I16.convert(1, SampleFormat.U16)
    assert list(converter.into_inner()) == [2, 3]


def test_data_converter_unknown_length():
    converter = DataConverter((x for x in [1, 2]), SampleFormat.I16, SampleFormat.I16)
    assert converter.size_hint() == (0, None)
    assert list(converter) == [1, 2]
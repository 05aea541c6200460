import math

import pytest

from sstvmod.dsp import (
    apply_bandpass_filter,
    apply_fade_in,
    apply_fade_out,
    apply_highpass_filter,
    apply_lowpass_filter,
    apply_volume,
    calculate_rms,
    db_to_linear,
    linear_to_db,
    normalize,
)


def test_db_conversion():
    assert abs(db_to_linear(0.0) - 1.0) < 1e-6
    assert abs(linear_to_db(1.0) - 0.0) < 1e-6


def test_db_known_values():
    assert db_to_linear(20.0) == pytest.approx(10.0)
    assert linear_to_db(10.0) == pytest.approx(20.0)
    assert linear_to_db(0.0) == -math.inf
    assert math.isnan(linear_to_db(-1.0))


def test_rms():
    assert calculate_rms([1.0, -1.0, 1.0, -1.0]) == pytest.approx(1.0)
    assert calculate_rms([3.0, 4.0]) == pytest.approx(math.sqrt(12.5))
    assert math.isnan(calculate_rms([]))


def test_normalize():
    data = [0.5, -0.25]
    assert normalize(data, 1.0) == [1.0, -0.5]
    assert data == [0.5, -0.25]
    assert normalize([0.0, 0.0], 1.0) == [0.0, 0.0]


def test_volume():
    assert apply_volume([1.0, -0.5], 2.0) == [2.0, -1.0]


def test_fade_in():
    assert apply_fade_in([1.0] * 4, 2) == [0.0, 0.5, 1.0, 1.0]
    assert apply_fade_in([1.0] * 2, 10) == [0.0, 0.5]
    assert apply_fade_in([1.0, 1.0], 0) == [1.0, 1.0]


def test_fade_out():
    assert apply_fade_out([1.0] * 4, 2) == [1.0, 1.0, 1.0, 0.5]
    assert apply_fade_out([1.0] * 2, 10) == [1.0, 0.5]


def test_lowpass():
    assert apply_lowpass_filter([1.0, 0.0, 0.0], 0.5) == [1.0, 0.5, 0.25]
    assert apply_lowpass_filter([1.0, 0.0], 1.0) == [1.0, 0.0]
    assert apply_lowpass_filter([], 0.5) == []


def test_highpass():
    assert apply_highpass_filter([1.0, 1.0, 1.0], 0.5) == [1.0, 0.5, 0.25]
    assert apply_highpass_filter([1.0, 2.0], 0.0) == [1.0, 2.0]
    assert apply_highpass_filter([], 0.5) == []


def test_bandpass_chains_filters():
    data = [1.0, 0.0, -1.0, 0.5, 0.25]
    expected = apply_lowpass_filter(apply_highpass_filter(data, 0.2), 0.6)
    assert apply_bandpass_filter(data, 0.2, 0.6) == expected
    assert data == [1.0, 0.0, -1.0, 0.5, 0.25]
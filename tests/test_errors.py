import pytest

from sstvmod.errors import (
    AudioError,
    ImageError,
    ImageProcessingError,
    InsufficientMemoryError,
    InvalidAudioParameterError,
    InvalidFormatError,
    InvalidSampleRateError,
    ModulationError,
    SstvError,
    UnsupportedModeError,
)


def test_error_creation():
    err = UnsupportedModeError("TestMode")
    assert isinstance(err, SstvError)
    assert err.mode == "TestMode"
    assert "TestMode" in str(err)


def test_error_display():
    err = InvalidSampleRateError(22050, 8000, 48000)
    text = str(err)
    assert "22050" in text
    assert "8000" in text
    assert "48000" in text


def test_sample_rate_error_attributes():
    err = InvalidSampleRateError(500, 8000, 192000)
    assert (err.sample_rate, err.min_rate, err.max_rate) == (500, 8000, 192000)
    assert isinstance(err, ValueError)


def test_modulation_error_message():
    err = ModulationError("boom")
    assert err.message == "boom"
    assert "boom" in str(err)


def test_memory_error_reports_bytes():
    err = InsufficientMemoryError(1048576)
    assert err.required == 1048576
    assert "1048576" in str(err)


def test_audio_parameter_error():
    err = InvalidAudioParameterError("bit_depth", 20)
    assert err.parameter == "bit_depth"
    assert err.value == "20"
    assert "bit_depth = 20" in str(err)


@pytest.mark.parametrize(
    "cls", [ImageError, AudioError, ImageProcessingError, InvalidFormatError]
)
def test_message_errors_are_catchable_as_base(cls):
    err = cls("detail")
    with pytest.raises(SstvError) as excinfo:
        raise err
    assert excinfo.value is err
    assert "detail" in str(excinfo.value)
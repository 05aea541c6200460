"""Exception hierarchy used throughout the package."""

from __future__ import annotations


class SstvError(Exception):
    """Base class for every error raised by the package."""


class ImageError(SstvError):
    """An image could not be decoded, encoded or transformed."""


class AudioError(SstvError):
    """Audio data could not be read, written or interpreted."""


class UnsupportedModeError(SstvError, ValueError):
    """The requested SSTV mode is not supported."""

    def __init__(self, mode):
        self.mode = str(mode)
        super().__init__(f"unsupported SSTV mode: {self.mode}")


class InvalidSampleRateError(SstvError, ValueError):
    """A sample rate lies outside the accepted range."""

    def __init__(self, sample_rate, min_rate, max_rate):
        self.sample_rate = sample_rate
        self.min_rate = min_rate
        self.max_rate = max_rate
        super().__init__(
            f"invalid sample rate: {sample_rate}Hz, "
            f"supported range: {min_rate}-{max_rate}Hz"
        )


class ModulationError(SstvError):
    """SSTV modulation failed."""

    def __init__(self, message):
        self.message = str(message)
        super().__init__(f"SSTV modulation failed: {self.message}")


class InsufficientMemoryError(SstvError):
    """A task needs more memory than is allowed."""

    def __init__(self, required):
        self.required = required
        super().__init__(f"insufficient memory: {required} bytes required")


class ImageProcessingError(SstvError):
    """General failure while preparing or saving an image."""


class InvalidAudioParameterError(SstvError, ValueError):
    """An audio parameter has a value that is not accepted."""

    def __init__(self, parameter, value):
        self.parameter = str(parameter)
        self.value = str(value)
        super().__init__(f"invalid audio parameter: {self.parameter} = {self.value}")


class InvalidFormatError(SstvError):
    """An audio file uses a format that is not supported."""
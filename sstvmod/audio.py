"""Tone generation, sample collection and WAV file input/output."""

from __future__ import annotations

import math
import os
import struct
import wave
from array import array
from dataclasses import dataclass
from typing import Iterable

from .errors import (
    AudioError,
    InvalidAudioParameterError,
    InvalidFormatError,
    InvalidSampleRateError,
)

_MIN_RATE = 8000
_MAX_RATE = 192000
_BIT_DEPTHS = (16, 24, 32)
_I16_MAX = 32767
_I32_MAX = 2147483647

_FORMAT_PCM = 1
_FORMAT_FLOAT = 3
_FORMAT_EXTENSIBLE = 0xFFFE


class AudioGenerator:
    """Generates simple floating-point test signals."""

    def __init__(self, sample_rate, bit_depth):
        if not _MIN_RATE <= sample_rate <= _MAX_RATE:
            raise InvalidSampleRateError(sample_rate, _MIN_RATE, _MAX_RATE)
        if bit_depth not in _BIT_DEPTHS:
            raise InvalidAudioParameterError("bit_depth", bit_depth)
        self._sample_rate = sample_rate
        self._bit_depth = bit_depth

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def bit_depth(self) -> int:
        return self._bit_depth

    def _sample_count(self, duration: float) -> int:
        return max(0, int(duration * self._sample_rate))

    def generate_sine_wave(self, frequency, duration, amplitude) -> list[float]:
        """Return ``duration`` seconds of a sine tone."""
        rate = self._sample_rate
        return [
            amplitude * math.sin(2.0 * math.pi * frequency * (i / rate))
            for i in range(self._sample_count(duration))
        ]

    def generate_chirp(self, start_freq, end_freq, duration, amplitude) -> list[float]:
        """Return a linear frequency sweep from ``start_freq`` to ``end_freq``."""
        rate = self._sample_rate
        samples = []
        for i in range(self._sample_count(duration)):
            t = i / rate
            freq = start_freq + (end_freq - start_freq) * (t / duration)
            samples.append(amplitude * math.sin(2.0 * math.pi * freq * t))
        return samples

    def apply_hanning_window(self, samples: Iterable[float]) -> list[float]:
        """Return the samples multiplied by a Hann window."""
        values = list(samples)
        span = len(values) - 1
        if span == 0:
            return [math.nan for _ in values]
        return [
            s * 0.5 * (1.0 - math.cos(2.0 * math.pi * i / span))
            for i, s in enumerate(values)
        ]


class AudioProcessor:
    """Collects 16-bit integer samples at a given sample rate."""

    def __init__(self, sample_rate):
        self.sample_rate = sample_rate
        self.samples: list[int] = []

    def add_sample(self, sample) -> None:
        self.samples.append(int(sample))

    def clear(self) -> None:
        self.samples.clear()

    def __len__(self) -> int:
        return len(self.samples)


@dataclass(frozen=True)
class WavSpec:
    """Layout of a WAV stream."""

    channels: int
    sample_rate: int
    bits_per_sample: int
    sample_format: str = "int"


def _pack_i16(samples: Iterable[int]) -> bytes:
    try:
        values = struct.pack(f"<{len(s := list(samples))}h", *s)
    except struct.error as exc:
        raise AudioError(f"sample out of 16-bit range: {exc}") from exc
    return values


def _float_to_i16(value: float) -> int:
    if math.isnan(value):
        return 0
    return int(min(1.0, max(-1.0, value)) * _I16_MAX)


class WavWriter:
    """Writes mono 16-bit PCM WAV files."""

    def __init__(self, filename, sample_rate):
        self.spec = WavSpec(channels=1, sample_rate=sample_rate, bits_per_sample=16)
        try:
            writer = wave.open(os.fspath(filename), "wb")
        except (OSError, wave.Error) as exc:
            raise AudioError(f"cannot create {filename}: {exc}") from exc
        try:
            writer.setnchannels(self.spec.channels)
            writer.setsampwidth(self.spec.bits_per_sample // 8)
            writer.setframerate(sample_rate)
        except (OSError, wave.Error) as exc:
            writer.close()
            raise AudioError(f"cannot configure {filename}: {exc}") from exc
        self._writer: wave.Wave_write | None = writer

    @classmethod
    def for_sstv(cls, filename, sample_rate) -> "WavWriter":
        """Create the standard mono 16-bit writer used for SSTV output."""
        return cls(filename, sample_rate)

    def write_samples(self, samples: Iterable[int]) -> None:
        """Append 16-bit samples; ignored once the writer is finalized."""
        if self._writer is None:
            return
        data = _pack_i16(samples)
        try:
            self._writer.writeframes(data)
        except (OSError, wave.Error) as exc:
            raise AudioError(f"cannot write samples: {exc}") from exc

    @staticmethod
    def write_samples_f32(path, samples: Iterable[float], sample_rate) -> None:
        """Write floating-point samples in [-1, 1] as a 16-bit WAV file."""
        with WavWriter(path, sample_rate) as writer:
            writer.write_samples(_float_to_i16(s) for s in samples)

    def finalize(self) -> None:
        """Finish the file and close it."""
        writer, self._writer = self._writer, None
        if writer is None:
            return
        try:
            writer.close()
        except (OSError, wave.Error) as exc:
            raise AudioError(f"cannot finalize WAV file: {exc}") from exc

    def __enter__(self) -> "WavWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.finalize()


def _parse_fmt(body: bytes) -> WavSpec:
    if len(body) < 16:
        raise AudioError("fmt chunk too short")
    tag, channels, rate, _byte_rate, _align, bits = struct.unpack_from("<HHIIHH", body)
    if tag == _FORMAT_EXTENSIBLE and len(body) >= 26:
        (tag,) = struct.unpack_from("<H", body, 24)
    if tag == _FORMAT_PCM:
        kind = "int"
    elif tag == _FORMAT_FLOAT:
        kind = "float"
    else:
        raise AudioError(f"unsupported WAV format tag: {tag}")
    return WavSpec(channels=channels, sample_rate=rate, bits_per_sample=bits, sample_format=kind)


def _parse_riff(data: bytes) -> tuple[WavSpec, bytes]:
    if len(data) < 12 or data[:4] != b"RIFF" or data[8:12] != b"WAVE":
        raise AudioError("not a RIFF/WAVE file")
    spec = None
    payload = None
    pos = 12
    while pos + 8 <= len(data):
        chunk_id = data[pos:pos + 4]
        (size,) = struct.unpack_from("<I", data, pos + 4)
        body = data[pos + 8:pos + 8 + size]
        if len(body) < size:
            raise AudioError(f"truncated {chunk_id!r} chunk")
        if chunk_id == b"fmt ":
            spec = _parse_fmt(body)
        elif chunk_id == b"data":
            payload = body
        pos += 8 + size + (size & 1)
    if spec is None:
        raise AudioError("missing fmt chunk")
    if payload is None:
        raise AudioError("missing data chunk")
    return spec, payload


def _unpack(payload: bytes, code: str, width: int) -> tuple:
    if len(payload) % width:
        raise AudioError("data chunk ends in the middle of a sample")
    return struct.unpack(f"<{len(payload) // width}{code}", payload)


def load_wav_file(path) -> tuple[list[float], int]:
    """Read a WAV file and return its samples scaled to floats and its sample rate."""
    try:
        with open(path, "rb") as fh:
            data = fh.read()
    except OSError as exc:
        raise AudioError(f"cannot read {path}: {exc}") from exc
    spec, payload = _parse_riff(data)
    if spec.sample_format == "float":
        if spec.bits_per_sample != 32:
            raise AudioError(f"unsupported float width: {spec.bits_per_sample}")
        samples = list(array("f", _unpack(payload, "f", 4)))
    elif spec.bits_per_sample == 16:
        samples = [s / _I16_MAX for s in _unpack(payload, "h", 2)]
    elif spec.bits_per_sample == 32:
        samples = [s / _I32_MAX for s in _unpack(payload, "i", 4)]
    else:
        raise InvalidFormatError(f"unsupported bit depth: {spec.bits_per_sample}")
    return samples, spec.sample_rate
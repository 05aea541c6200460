"""SSTV modes, image output settings and processing records."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum

_BYTES_PER_MB = 1024.0 * 1024.0


class SstvMode(Enum):
    """Supported SSTV transmission modes."""

    SCOTTIE_DX = "ScottieDX"
    ROBOT36 = "Robot36"
    PD120 = "PD120"
    MARTIN_M1 = "MartinM1"

    @property
    def vis_code(self) -> str:
        """Seven-bit VIS code as a string of '0' and '1', most significant bit first."""
        return _VIS_CODES[self]

    @property
    def dimensions(self) -> tuple[int, int]:
        """Image width and height in pixels."""
        return _DIMENSIONS[self]

    @property
    def duration(self) -> float:
        """Nominal transmission time in seconds."""
        return _DURATIONS[self]

    @property
    def mode_name(self) -> str:
        """Short name used in file names and metadata."""
        return self.value


_VIS_CODES = {
    SstvMode.SCOTTIE_DX: "1001100",
    SstvMode.ROBOT36: "0001000",
    SstvMode.PD120: "1011111",
    SstvMode.MARTIN_M1: "0101100",
}

_DIMENSIONS = {
    SstvMode.SCOTTIE_DX: (320, 256),
    SstvMode.ROBOT36: (320, 240),
    SstvMode.PD120: (640, 496),
    SstvMode.MARTIN_M1: (320, 256),
}

_DURATIONS = {
    SstvMode.SCOTTIE_DX: 269.6,
    SstvMode.ROBOT36: 36.0,
    SstvMode.PD120: 120.0,
    SstvMode.MARTIN_M1: 114.7,
}


class ImageFormat(Enum):
    """Image file formats the processed picture can be saved in."""

    PNG = "PNG"
    JPEG = "JPEG"
    BMP = "BMP"

    @property
    def extension(self) -> str:
        """File name extension, without the dot."""
        return {"PNG": "png", "JPEG": "jpg", "BMP": "bmp"}[self.value]


@dataclass(frozen=True)
class ImageSaveConfig:
    """How a processed image is written to disk."""

    format: ImageFormat = ImageFormat.PNG
    jpeg_quality: int | None = 95
    preserve_metadata: bool = True
    custom_suffix: str | None = None

    @classmethod
    def png(cls) -> "ImageSaveConfig":
        return cls(format=ImageFormat.PNG)

    @classmethod
    def jpeg(cls, quality) -> "ImageSaveConfig":
        """JPEG output with ``quality`` clamped to 1..100."""
        return cls(format=ImageFormat.JPEG, jpeg_quality=min(100, max(1, int(quality))))

    @classmethod
    def bmp(cls) -> "ImageSaveConfig":
        return cls(format=ImageFormat.BMP)

    def with_suffix(self, suffix) -> "ImageSaveConfig":
        """Return a copy carrying a custom file name suffix."""
        return dataclasses.replace(self, custom_suffix=str(suffix))


@dataclass(frozen=True)
class ProcessingMetadata:
    """What was done to an image to fit it to an SSTV frame."""

    original_dimensions: tuple[int, int]
    target_dimensions: tuple[int, int]
    sstv_mode: SstvMode
    scale_factor: float
    black_bars: tuple[int, int, int, int]  # left, top, right, bottom
    processing_timestamp: str


@dataclass(frozen=True)
class MemoryUsageMB:
    """Memory usage in mebibytes."""

    audio_samples_mb: float
    processed_image_mb: float
    metadata_mb: float
    total_mb: float


@dataclass(frozen=True)
class MemoryUsage:
    """Memory usage in bytes."""

    audio_samples_bytes: int
    processed_image_bytes: int
    metadata_bytes: int
    total_bytes: int

    def to_mb(self) -> MemoryUsageMB:
        return MemoryUsageMB(
            audio_samples_mb=self.audio_samples_bytes / _BYTES_PER_MB,
            processed_image_mb=self.processed_image_bytes / _BYTES_PER_MB,
            metadata_mb=self.metadata_bytes / _BYTES_PER_MB,
            total_mb=self.total_bytes / _BYTES_PER_MB,
        )
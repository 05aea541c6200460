"""Turn pictures into SSTV audio with phase-continuous tone synthesis."""

from __future__ import annotations

import dataclasses
import json
import math
import warnings
from datetime import datetime, timezone
from pathlib import Path

from PIL import Image

from .audio import AudioProcessor, WavWriter
from .errors import ImageProcessingError
from .modes import ImageFormat, ImageSaveConfig, MemoryUsage, ProcessingMetadata, SstvMode

VERSION = "0.1.0"
DEFAULT_SAMPLE_RATE = 6000
COLOR_FREQ_MULT = 3.1372549

_BYTES_PER_SAMPLE = 2
_METADATA_BYTES = 72
_I16_MIN = -32768
_I16_MAX = 32767

_PREAMBLE = (
    (1900.0, 100.0), (1500.0, 100.0), (1900.0, 100.0), (1500.0, 100.0),
    (2300.0, 100.0), (1500.0, 100.0), (2300.0, 100.0), (1500.0, 100.0),
    (1900.0, 300.0), (1200.0, 10.0), (1900.0, 300.0), (1200.0, 30.0),
)

_END_TONES = (
    (1500.0, 500.0),
    (1900.0, 100.0),
    (1500.0, 100.0),
    (1900.0, 100.0),
    (1500.0, 100.0),
)


def y_value(pixel) -> float:
    """Luminance of an RGB pixel on the 16..235 scale."""
    r, g, b = (float(c) for c in pixel[:3])
    return 16.0 + 0.003906 * (65.738 * r + 129.057 * g + 25.064 * b)


def ry_value(pixel) -> float:
    """R-Y chrominance of an RGB pixel, centred on 128."""
    r, g, b = (float(c) for c in pixel[:3])
    return 128.0 + 0.003906 * (112.439 * r - 94.154 * g - 18.285 * b)


def by_value(pixel) -> float:
    """B-Y chrominance of an RGB pixel, centred on 128."""
    r, g, b = (float(c) for c in pixel[:3])
    return 128.0 + 0.003906 * (-37.945 * r - 74.494 * g + 112.439 * b)


def _freq(value: float) -> float:
    return 1500.0 + value * COLOR_FREQ_MULT


def _to_i16(value: float) -> int:
    return max(_I16_MIN, min(_I16_MAX, int(32767.0 * value)))


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")


class SstvModulator:
    """Encodes an image as an SSTV audio signal in one of the supported modes."""

    def __init__(self, mode, sample_rate=DEFAULT_SAMPLE_RATE):
        self._mode = SstvMode(mode)
        self._sample_rate = sample_rate
        self._audio = AudioProcessor(sample_rate)
        self._reset_phase()
        self._processed_image: Image.Image | None = None
        self._metadata: ProcessingMetadata | None = None

    def with_sample_rate(self, sample_rate) -> "SstvModulator":
        """Switch to another sample rate, discarding any audio; returns self."""
        self._sample_rate = sample_rate
        self._audio = AudioProcessor(sample_rate)
        return self

    @property
    def mode(self) -> SstvMode:
        return self._mode

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def samples(self) -> list[int]:
        """A copy of the generated 16-bit samples."""
        return list(self._audio.samples)

    @property
    def processed_image(self) -> Image.Image | None:
        return self._processed_image

    @property
    def processing_metadata(self) -> ProcessingMetadata | None:
        return self._metadata

    # -- modulation -------------------------------------------------------

    def modulate_image(self, image) -> list[int]:
        """Fit the image to the mode's frame and generate the whole transmission."""
        rgb, metadata = self._fit_image(image)
        self._processed_image = rgb
        self._metadata = metadata

        self._audio.clear()
        self._reset_phase()

        self._tone(0.0, 200.0)
        self._vis_code()
        width, height = rgb.size
        pixels = list(rgb.getdata())
        rows = [pixels[row * width:(row + 1) * width] for row in range(height)]
        {
            SstvMode.SCOTTIE_DX: self._scottie_dx,
            SstvMode.ROBOT36: self._robot36,
            SstvMode.PD120: self._pd120,
            SstvMode.MARTIN_M1: self._martin_m1,
        }[self._mode](rows)
        for freq, duration in _END_TONES:
            self._tone(freq, duration)
        self._tone(0.0, 200.0)
        return list(self._audio.samples)

    def _fit_image(self, image: Image.Image) -> tuple[Image.Image, ProcessingMetadata]:
        target_w, target_h = self._mode.dimensions
        src_w, src_h = image.size
        if src_w == 0 or src_h == 0:
            raise ImageProcessingError("image has no pixels")
        if src_w * src_h > target_w * target_h * 16:
            warnings.warn(
                f"source image is very large ({src_w}x{src_h}); "
                "consider shrinking it first to save memory",
                stacklevel=3,
            )
        scale = min(target_w / src_w, target_h / src_h)
        scaled_w = int(src_w * scale)
        scaled_h = int(src_h * scale)
        offset_x = (target_w - scaled_w) // 2
        offset_y = (target_h - scaled_h) // 2

        target = Image.new("RGB", (target_w, target_h), (0, 0, 0))
        if scaled_w > 0 and scaled_h > 0:
            try:
                scaled = image.convert("RGB").resize((scaled_w, scaled_h), Image.LANCZOS)
            except (OSError, ValueError) as exc:
                raise ImageProcessingError(f"cannot resize image: {exc}") from exc
            target.paste(scaled, (offset_x, offset_y))

        metadata = ProcessingMetadata(
            original_dimensions=(src_w, src_h),
            target_dimensions=(target_w, target_h),
            sstv_mode=self._mode,
            scale_factor=scale,
            black_bars=(
                offset_x,
                offset_y,
                target_w - offset_x - scaled_w,
                target_h - offset_y - scaled_h,
            ),
            processing_timestamp=_timestamp(),
        )
        return target, metadata

    def _vis_code(self) -> None:
        vis = self._mode.vis_code
        for freq, duration in _PREAMBLE:
            self._tone(freq, duration)
        for bit in reversed(vis):
            self._tone(1100.0 if bit == "1" else 1300.0, 30.0)
        self._tone(1300.0 if vis.count("1") % 2 == 0 else 1100.0, 30.0)
        self._tone(1200.0, 30.0)

    def _scottie_dx(self, rows) -> None:
        self._emit(1200.0, 9.0, 0.0)
        for row in rows:
            self._tone(1500.0, 1.5)
            for pixel in row:
                self._tone(_freq(pixel[1]), 1.08)
            self._tone(1500.0, 1.5)
            for pixel in row:
                self._tone(_freq(pixel[2]), 1.08)
            self._tone(1200.0, 9.0)
            self._tone(1500.0, 1.5)
            for pixel in row:
                self._tone(_freq(pixel[0]), 1.08)

    def _robot36(self, rows) -> None:
        height = len(rows)
        for index, row in enumerate(rows):
            self._tone(1200.0, 9.0)
            self._tone(1500.0, 3.0)
            for pixel in row:
                self._tone(_freq(y_value(pixel)), 0.275)
            below = rows[index + 1] if index + 1 < height else row
            if index % 2 == 0:
                self._tone(1500.0, 4.5)
                chroma = ry_value
            else:
                self._tone(2300.0, 4.5)
                chroma = by_value
            self._tone(1900.0, 1.5)
            for upper, lower in zip(row, below):
                self._tone(_freq((chroma(upper) + chroma(lower)) / 2.0), 0.1375)

    def _pd120(self, rows) -> None:
        height = len(rows)
        for index in range(0, height, 2):
            row = rows[index]
            has_next = index + 1 < height
            below = rows[index + 1] if has_next else row
            self._tone(1200.0, 20.0)
            self._tone(1500.0, 2.08)
            for pixel in row:
                self._tone(_freq(y_value(pixel)), 0.19)
            for chroma in (ry_value, by_value):
                for upper, lower in zip(row, below):
                    self._tone(_freq((chroma(upper) + chroma(lower)) / 2.0), 0.19)
            if has_next:
                for pixel in below:
                    self._tone(_freq(y_value(pixel)), 0.19)

    def _martin_m1(self, rows) -> None:
        for row in rows:
            self._tone(1200.0, 4.862)
            self._tone(1500.0, 0.572)
            for channel in (1, 2, 0):
                for pixel in row:
                    self._tone(_freq(pixel[channel]), 0.4576)
                self._tone(1500.0, 0.572)

    # -- tone synthesis ---------------------------------------------------

    def _reset_phase(self) -> None:
        self._older_data = 0.0
        self._older_cos = 1.0
        self._delta_length = 0.0

    def _continuous_phase(self) -> float:
        sign = 1.0 if self._older_cos >= 0.0 else -1.0
        data = max(-1.0, min(1.0, self._older_data))
        return sign * math.asin(data) + abs(sign - 1.0) / 2.0 * math.pi

    def _tone(self, frequency: float, duration_ms: float) -> None:
        self._emit(frequency, duration_ms, self._continuous_phase())

    def _emit(self, frequency: float, duration_ms: float, phi: float) -> None:
        rate = self._sample_rate
        exact = rate * duration_ms / 1000.0
        count = int(exact)
        self._delta_length += exact - count
        if self._delta_length >= 1.0:
            count += int(self._delta_length)
            self._delta_length -= math.floor(self._delta_length)

        self._audio.samples.extend(
            _to_i16(math.sin(2.0 * math.pi * frequency * i / rate + phi))
            for i in range(count)
        )
        final = 2.0 * math.pi * frequency * count / rate + phi
        self._older_data = math.sin(final)
        self._older_cos = math.cos(final)

    # -- output -----------------------------------------------------------

    def export_wav(self, filename) -> None:
        """Write the generated samples as a mono 16-bit WAV file."""
        with WavWriter(filename, self._sample_rate) as writer:
            writer.write_samples(self._audio.samples)

    def save_processed_image(self, path, config=None) -> None:
        """Save the fitted image, and a JSON metadata file next to it if configured."""
        if config is None:
            config = ImageSaveConfig()
        image = self._processed_image
        if image is None:
            raise ImageProcessingError(
                "no processed image to save; call modulate_image first"
            )
        path = Path(path)
        try:
            if config.format is ImageFormat.PNG:
                image.save(path, format="PNG")
            elif config.format is ImageFormat.JPEG:
                quality = config.jpeg_quality if config.jpeg_quality is not None else 95
                image.save(path, format="JPEG", quality=quality)
            elif config.format is ImageFormat.BMP:
                image.save(path, format="BMP")
            else:
                raise ImageProcessingError(f"unsupported image format: {config.format}")
        except (OSError, ValueError) as exc:
            raise ImageProcessingError(
                f"cannot save {config.format.value} image: {exc}"
            ) from exc
        if config.preserve_metadata:
            self._save_metadata(path)

    def _save_metadata(self, image_path: Path) -> None:
        metadata = self._metadata
        if metadata is None:
            raise ImageProcessingError("no processing metadata available")
        left, top, right, bottom = metadata.black_bars
        document = {
            "sstv_processing_info": {
                "version": VERSION,
                "sstv_mode": metadata.sstv_mode.mode_name,
                "original_dimensions": {
                    "width": metadata.original_dimensions[0],
                    "height": metadata.original_dimensions[1],
                },
                "target_dimensions": {
                    "width": metadata.target_dimensions[0],
                    "height": metadata.target_dimensions[1],
                },
                "scale_factor": metadata.scale_factor,
                "black_bars": {"left": left, "top": top, "right": right, "bottom": bottom},
                "processing_timestamp": metadata.processing_timestamp,
                "sample_rate": self._sample_rate,
                "duration_seconds": metadata.sstv_mode.duration,
            }
        }
        image_path.with_suffix(".json").write_text(
            json.dumps(document, indent=2, sort_keys=True), encoding="utf-8"
        )

    def save_processed_image_auto(self, base_dir, config=None) -> Path:
        """Save the fitted image under a generated name in ``base_dir``; return its path."""
        if config is None:
            config = ImageSaveConfig()
        base_dir = Path(base_dir)
        base_dir.mkdir(parents=True, exist_ok=True)
        timestamp = (
            self._metadata.processing_timestamp if self._metadata is not None else _timestamp()
        )
        width, height = self._mode.dimensions
        suffix = f"_{config.custom_suffix}" if config.custom_suffix is not None else ""
        filename = (
            f"sstv_{self._mode.mode_name}_{timestamp}_{width}x{height}"
            f"{suffix}.{config.format.extension}"
        )
        full_path = base_dir / filename
        self.save_processed_image(full_path, config)
        return full_path

    def batch_process(self, input_image, output_dir, base_name, image_config=None) -> tuple[Path, Path]:
        """Modulate the image, then write the WAV file and the fitted image."""
        if image_config is None:
            image_config = ImageSaveConfig()
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        self.modulate_image(input_image)
        audio_path = output_dir / (
            f"{base_name}_{self._mode.mode_name}_{_timestamp()}_{self._sample_rate}.wav"
        )
        self.export_wav(audio_path)
        config = dataclasses.replace(image_config, custom_suffix=str(base_name))
        image_path = self.save_processed_image_auto(output_dir, config)
        return audio_path, image_path

    # -- memory -----------------------------------------------------------

    def clear_memory(self) -> None:
        self.clear_audio_memory()
        self.clear_image_memory()

    def clear_audio_memory(self) -> None:
        self._audio.clear()
        self._reset_phase()

    def clear_image_memory(self) -> None:
        self._processed_image = None
        self._metadata = None

    def memory_usage(self) -> MemoryUsage:
        audio_bytes = len(self._audio) * _BYTES_PER_SAMPLE
        image = self._processed_image
        image_bytes = image.size[0] * image.size[1] * 3 if image is not None else 0
        return MemoryUsage(
            audio_samples_bytes=audio_bytes,
            processed_image_bytes=image_bytes,
            metadata_bytes=_METADATA_BYTES,
            total_bytes=audio_bytes + image_bytes + _METADATA_BYTES,
        )

    def should_clear_memory(self, threshold_mb) -> bool:
        return self.memory_usage().total_bytes > threshold_mb * 1024 * 1024

    def auto_memory_management(self, threshold_mb) -> None:
        if self.should_clear_memory(threshold_mb):
            self.clear_memory()
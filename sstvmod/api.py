"""High-level helpers: one-call encoding, mode listing and resource estimates."""

from __future__ import annotations

import math
from pathlib import Path

from PIL import Image

from .errors import ImageProcessingError, InsufficientMemoryError
from .modes import ImageSaveConfig, MemoryUsageMB, SstvMode
from .modulator import DEFAULT_SAMPLE_RATE, SstvModulator

_WAV_HEADER_BYTES = 44
_AVAILABLE_MB = 100.0
_SAFETY_MARGIN = 0.8
_MIN_SUGGESTED_SIDE = 100
_OVERHEAD_BYTES = 1024

_DISPLAY_NAMES = {
    SstvMode.SCOTTIE_DX: "Scottie-DX",
    SstvMode.ROBOT36: "Robot-36",
    SstvMode.PD120: "PD-120",
    SstvMode.MARTIN_M1: "Martin-M1",
}


def _load_image(path) -> Image.Image:
    try:
        with Image.open(path) as img:
            return img.convert("RGB")
    except (OSError, ValueError) as exc:
        raise ImageProcessingError(f"cannot load image: {exc}") from exc


def generate_sstv_from_file(image_path, output_path, mode) -> None:
    """Encode the picture stored at ``image_path`` and write the WAV to ``output_path``."""
    generate_sstv_from_image(_load_image(image_path), output_path, mode)


def generate_sstv_from_image(image, output_path, mode) -> None:
    """Encode an in-memory PIL image and write the WAV to ``output_path``."""
    modulator = SstvModulator(mode)
    modulator.modulate_image(image)
    modulator.export_wav(output_path)


def get_supported_modes() -> list[tuple[SstvMode, str, tuple[int, int], float]]:
    """Every supported mode with its display name, dimensions and duration in seconds."""
    return [
        (mode, _DISPLAY_NAMES[mode], mode.dimensions, mode.duration)
        for mode in (SstvMode.SCOTTIE_DX, SstvMode.ROBOT36, SstvMode.PD120, SstvMode.MARTIN_M1)
    ]


def estimate_file_size(mode, sample_rate, bit_depth) -> int:
    """Estimated size in bytes of a WAV file holding one transmission."""
    mode = SstvMode(mode)
    sample_count = int(mode.duration * sample_rate)
    return sample_count * (bit_depth // 8) + _WAV_HEADER_BYTES


def generate_sstv_with_image_save(image_path, output_dir, base_name, mode, image_config=None) -> tuple[Path, Path]:
    """Encode an image file, writing both the WAV and the fitted picture; return their paths."""
    image = _load_image(image_path)
    modulator = SstvModulator(mode)
    return modulator.batch_process(image, output_dir, base_name, image_config or ImageSaveConfig())


def estimate_memory_usage(image_width, image_height, mode, sample_rate) -> int:
    """Estimated peak memory in bytes for encoding an image of the given size."""
    mode = SstvMode(mode)
    target_w, target_h = mode.dimensions
    source_bytes = image_width * image_height * 3
    target_bytes = target_w * target_h * 3
    audio_bytes = int(sample_rate * mode.duration * 2.0)
    return source_bytes + target_bytes + audio_bytes + _OVERHEAD_BYTES


def check_memory_requirements(image_width, image_height, mode, sample_rate) -> tuple[bool, float, tuple[int, int] | None]:
    """Return whether the task fits the memory budget, the MB it needs and a suggested smaller size."""
    required_mb = estimate_memory_usage(image_width, image_height, mode, sample_rate) / 1024.0 / 1024.0
    has_enough = required_mb <= _AVAILABLE_MB
    suggested = None
    if not has_enough:
        scale = math.sqrt(_AVAILABLE_MB / required_mb * _SAFETY_MARGIN)
        suggested = (
            max(int(image_width * scale), _MIN_SUGGESTED_SIDE),
            max(int(image_height * scale), _MIN_SUGGESTED_SIDE),
        )
    return has_enough, required_mb, suggested


def process_sstv_complete(
    input_path, output_dir, base_name, mode, image_config=None, memory_limit_mb=None
) -> tuple[Path, Path, MemoryUsageMB]:
    """Encode an image file with an optional memory limit; return both paths and usage figures."""
    image = _load_image(input_path)
    if memory_limit_mb is not None:
        width, height = image.size
        has_enough, required_mb, _ = check_memory_requirements(width, height, mode, DEFAULT_SAMPLE_RATE)
        if not has_enough and required_mb > memory_limit_mb:
            raise InsufficientMemoryError(int(required_mb * 1024.0 * 1024.0))
    modulator = SstvModulator(mode)
    audio_path, image_path = modulator.batch_process(
        image, output_dir, base_name, image_config or ImageSaveConfig()
    )
    stats = modulator.memory_usage().to_mb()
    modulator.clear_memory()
    return audio_path, image_path, stats
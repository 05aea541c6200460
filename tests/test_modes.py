import dataclasses

import pytest

from sstvmod.modes import (
    ImageFormat,
    ImageSaveConfig,
    MemoryUsage,
    ProcessingMetadata,
    SstvMode,
)


@pytest.mark.parametrize(
    "mode, code",
    [
        (SstvMode.SCOTTIE_DX, "1001100"),
        (SstvMode.ROBOT36, "0001000"),
        (SstvMode.PD120, "1011111"),
        (SstvMode.MARTIN_M1, "0101100"),
    ],
)
def test_vis_codes(mode, code):
    assert mode.vis_code == code


@pytest.mark.parametrize(
    "mode, dims, duration",
    [
        (SstvMode.SCOTTIE_DX, (320, 256), 269.6),
        (SstvMode.ROBOT36, (320, 240), 36.0),
        (SstvMode.PD120, (640, 496), 120.0),
        (SstvMode.MARTIN_M1, (320, 256), 114.7),
    ],
)
def test_dimensions_and_duration(mode, dims, duration):
    assert mode.dimensions == dims
    assert mode.duration == duration


@pytest.mark.parametrize(
    "mode, name",
    [
        (SstvMode.SCOTTIE_DX, "ScottieDX"),
        (SstvMode.ROBOT36, "Robot36"),
        (SstvMode.PD120, "PD120"),
        (SstvMode.MARTIN_M1, "MartinM1"),
    ],
)
def test_mode_names_round_trip(mode, name):
    assert mode.mode_name == name
    assert SstvMode(name) is mode


@pytest.mark.parametrize("name", ["ScottieDX", "Robot36", "PD120", "MartinM1"])
def test_every_vis_code_is_seven_bits(name):
    code = SstvMode(name).vis_code
    assert len(code) == 7
    assert set(code) <= {"0", "1"}


def test_unknown_mode_name_raises():
    with pytest.raises(ValueError):
        SstvMode("Robot72")


def test_default_config():
    config = ImageSaveConfig()
    assert config.format is ImageFormat.PNG
    assert config.jpeg_quality == 95
    assert config.preserve_metadata is True
    assert config.custom_suffix is None


def test_factory_formats():
    assert ImageSaveConfig.png().format is ImageFormat.PNG
    assert ImageSaveConfig.bmp().format is ImageFormat.BMP
    jpeg = ImageSaveConfig.jpeg(80)
    assert jpeg.format is ImageFormat.JPEG
    assert jpeg.jpeg_quality == 80


@pytest.mark.parametrize("quality, expected", [(0, 1), (1, 1), (100, 100), (250, 100)])
def test_jpeg_quality_is_clamped(quality, expected):
    assert ImageSaveConfig.jpeg(quality).jpeg_quality == expected


def test_with_suffix_returns_copy():
    base = ImageSaveConfig.png()
    tagged = base.with_suffix("demo")
    assert tagged.custom_suffix == "demo"
    assert base.custom_suffix is None
    assert tagged.format is base.format


def test_extensions():
    assert ImageSaveConfig.png().format.extension == "png"
    assert ImageSaveConfig.jpeg(90).format.extension == "jpg"
    assert ImageSaveConfig.bmp().format.extension == "bmp"


def test_memory_usage_to_mb():
    usage = MemoryUsage(
        audio_samples_bytes=1024,
        processed_image_bytes=2048,
        metadata_bytes=128,
        total_bytes=3200,
    )
    mb = usage.to_mb()
    assert mb.total_mb > 0.0
    assert mb.total_mb == pytest.approx(3200 / 1024 / 1024)
    assert mb.audio_samples_mb + mb.processed_image_mb + mb.metadata_mb == pytest.approx(
        mb.total_mb
    )


def test_memory_usage_one_mebibyte():
    usage = MemoryUsage(1024 * 1024, 0, 0, 1024 * 1024)
    mb = usage.to_mb()
    assert mb.audio_samples_mb == 1.0
    assert mb.processed_image_mb == 0.0


def test_processing_metadata_is_frozen():
    meta = ProcessingMetadata(
        original_dimensions=(640, 480),
        target_dimensions=(320, 240),
        sstv_mode=SstvMode.ROBOT36,
        scale_factor=0.5,
        black_bars=(0, 0, 0, 0),
        processing_timestamp="20240101_000000",
    )
    assert meta.sstv_mode.dimensions == meta.target_dimensions
    with pytest.raises(dataclasses.FrozenInstanceError):
        meta.scale_factor = 1.0
import json

import pytest
from PIL import Image

from sstvmod.audio import load_wav_file
from sstvmod.cli import main, process_audio_for_mode, process_image_for_mode
from sstvmod.errors import ImageProcessingError, InvalidSampleRateError
from sstvmod.modes import SstvMode


@pytest.fixture
def picture_file(tmp_path):
    path = tmp_path / "test_image.png"
    Image.new("RGB", (80, 40), (10, 220, 90)).save(path)
    return path


def test_audio_rejects_low_sample_rate(tmp_path, picture_file):
    with pytest.raises(InvalidSampleRateError):
        process_audio_for_mode(picture_file, SstvMode.ROBOT36, 500, tmp_path)


def test_audio_rejects_high_sample_rate(tmp_path, picture_file):
    with pytest.raises(InvalidSampleRateError):
        process_audio_for_mode(picture_file, SstvMode.ROBOT36, 200000, tmp_path)


def test_image_missing_input_raises(tmp_path):
    with pytest.raises(ImageProcessingError):
        process_image_for_mode(tmp_path / "absent.jpg", SstvMode.ROBOT36, tmp_path)


def test_process_image_for_mode(tmp_path, picture_file):
    out_dir = tmp_path / "media"
    path = process_image_for_mode(picture_file, SstvMode.ROBOT36, out_dir)
    assert path.parent == out_dir
    assert path.name.startswith("sstv_Robot36_")
    assert path.name.endswith("_processed_320x240.png")
    with Image.open(path) as saved:
        assert saved.size == (320, 240)
    info = json.loads(path.with_suffix(".json").read_text(encoding="utf-8"))["sstv_processing_info"]
    assert info["sstv_mode"] == "Robot36"
    assert info["original_dimensions"] == {"width": 80, "height": 40}


def test_main_missing_input(tmp_path):
    assert main([str(tmp_path / "nothing.jpg"), "-o", str(tmp_path / "out")]) == 1


def test_main_generates_files(tmp_path, picture_file):
    out_dir = tmp_path / "media"
    code = main([str(picture_file), "-o", str(out_dir), "-m", "Robot36", "-r", "6000"])
    assert code == 0
    wavs = list(out_dir.glob("*.wav"))
    pngs = list(out_dir.glob("*.png"))
    assert len(wavs) == 1 and len(pngs) == 1
    assert wavs[0].name.endswith("_6000hz_16bit.wav")
    samples, rate = load_wav_file(wavs[0])
    assert rate == 6000
    assert len(samples) > 0


def test_main_reports_failure_for_bad_rate(tmp_path, picture_file):
    out_dir = tmp_path / "media"
    code = main([str(picture_file), "-o", str(out_dir), "-m", "Robot36", "-r", "500"])
    assert code == 1
    assert list(out_dir.glob("*.wav")) == []
    assert len(list(out_dir.glob("*.png"))) == 1
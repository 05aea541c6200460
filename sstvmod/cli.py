"""Command line tool that encodes one picture in several modes and sample rates."""

from __future__ import annotations

import argparse
import sys
from datetime import datetime, timezone
from pathlib import Path

from PIL import Image

from .errors import ImageProcessingError, InvalidSampleRateError, SstvError
from .modes import ImageSaveConfig, SstvMode
from .modulator import SstvModulator

DEFAULT_SAMPLE_RATES = (6000, 16000, 44100)
MIN_SAMPLE_RATE = 1000
MAX_SAMPLE_RATE = 192000


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")


def _open_image(path) -> Image.Image:
    try:
        with Image.open(path) as img:
            return img.convert("RGB")
    except (OSError, ValueError) as exc:
        raise ImageProcessingError(f"cannot load image file: {exc}") from exc


def process_image_for_mode(image_path, mode, output_dir="media") -> Path:
    """Fit the picture to ``mode`` and save it as PNG in ``output_dir``; return its path."""
    mode = SstvMode(mode)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    modulator = SstvModulator(mode)
    modulator.modulate_image(_open_image(image_path))
    width, height = mode.dimensions
    path = output_dir / f"sstv_{mode.mode_name}_{_timestamp()}_processed_{width}x{height}.png"
    modulator.save_processed_image(path, ImageSaveConfig.png())
    modulator.clear_memory()
    return path


def process_audio_for_mode(image_path, mode, sample_rate, output_dir="media") -> Path:
    """Encode the picture in ``mode`` at ``sample_rate`` and write a WAV file; return its path."""
    if not MIN_SAMPLE_RATE <= sample_rate <= MAX_SAMPLE_RATE:
        raise InvalidSampleRateError(sample_rate, MIN_SAMPLE_RATE, MAX_SAMPLE_RATE)
    mode = SstvMode(mode)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    modulator = SstvModulator(mode, sample_rate)
    modulator.modulate_image(_open_image(image_path))
    path = output_dir / f"sstv_{mode.mode_name}_{_timestamp()}_{sample_rate}hz_16bit.wav"
    modulator.export_wav(path)
    modulator.clear_memory()
    return path


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sstvmod",
        description="Encode a picture as SSTV audio in several modes and sample rates.",
    )
    parser.add_argument("image", nargs="?", default="test_image.jpg", help="input picture")
    parser.add_argument("-o", "--output-dir", default="media", help="directory for the results")
    parser.add_argument(
        "-r", "--sample-rate", type=int, action="append", dest="sample_rates",
        help="sample rate in Hz (repeatable, %d-%d)" % (MIN_SAMPLE_RATE, MAX_SAMPLE_RATE),
    )
    parser.add_argument(
        "-m", "--mode", action="append", dest="modes",
        choices=[mode.mode_name for mode in SstvMode], help="SSTV mode (repeatable)",
    )
    return parser


def main(argv=None) -> int:
    args = _parser().parse_args(argv)
    image_path = Path(args.image)
    output_dir = Path(args.output_dir)
    rates = args.sample_rates or list(DEFAULT_SAMPLE_RATES)
    modes = [SstvMode(name) for name in args.modes] if args.modes else list(SstvMode)

    if not image_path.exists():
        print(f"error: input file '{image_path}' not found", file=sys.stderr)
        return 1
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        print(f"error: cannot create output directory '{output_dir}': {exc}", file=sys.stderr)
        return 1

    audio_total = len(rates) * len(modes)
    expected = audio_total + len(modes)
    print(f"Processing {audio_total} audio files and {len(modes)} images")
    produced: list[Path] = []

    for mode in modes:
        width, height = mode.dimensions
        print(f"image {mode.mode_name} ({width}x{height})... ", end="")
        try:
            path = process_image_for_mode(image_path, mode, output_dir)
        except (SstvError, OSError) as exc:
            print(f"failed: {exc}")
        else:
            print(f"saved {path}")
            produced.append(path)

    for rate in rates:
        print(f"audio at {rate}Hz:")
        for mode in modes:
            width, height = mode.dimensions
            print(f"  {mode.mode_name} ({width}x{height})... ", end="")
            try:
                path = process_audio_for_mode(image_path, mode, rate, output_dir)
            except (SstvError, OSError) as exc:
                print(f"failed: {exc}")
            else:
                print(f"saved {path}")
                produced.append(path)

    print(f"Done: {len(produced)}/{expected} files")
    if len(produced) != expected:
        print("some files could not be produced; see the messages above")
        return 1
    for path in produced:
        print(f"  {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
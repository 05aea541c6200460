# sstvmod

`sstvmod` turns pictures into slow-scan television (SSTV) audio. It fits an
image into the frame of an SSTV mode, keeping its aspect ratio and padding the
rest with black. It then writes the tones to a 16-bit mono WAV file: start
silence, calibration preamble, VIS code, scan lines and end tones. Each tone
starts at the phase where the previous one ended, and leftover fractions of a
sample are carried over, so the total length stays accurate at any sample rate.

Supported modes (`sstvmod.modes.SstvMode`):

| Member       | Name        | Frame     | Transmission time |
|--------------|-------------|-----------|-------------------|
| `SCOTTIE_DX` | `ScottieDX` | 320 × 256 | 269.6 s           |
| `ROBOT36`    | `Robot36`   | 320 × 240 | 36.0 s            |
| `PD120`      | `PD120`     | 640 × 496 | 120.0 s           |
| `MARTIN_M1`  | `MartinM1`  | 320 × 256 | 114.7 s           |

The default sample rate is 6000 Hz. SSTV tones are all at or below 2300 Hz, so
this rate is enough and keeps files small. You can set a different rate on each
modulator.

## Installing

```
pip install .
```

Pillow is the only dependency. To run the tests:

```
pip install ".[test]"
pytest
```

## Command line

```
sstvmod [IMAGE] [-o OUTPUT_DIR] [-r RATE]... [-m MODE]...
```

- `IMAGE`: the input picture. Defaults to `test_image.jpg`.
- `-o/--output-dir`: the directory for results. Defaults to `media`, and is created if needed.
- `-r/--sample-rate`: a sample rate in Hz, from 1000 to 192000. You can repeat it. Defaults to 6000, 16000 and 44100.
- `-m/--mode`: one of `ScottieDX`, `Robot36`, `PD120` or `MartinM1`. You can repeat it. Defaults to all modes.

For each mode the command saves the letterboxed picture as
`sstv_<mode>_<timestamp>_processed_<W>x<H>.png`, with a JSON metadata file
beside it. For each rate and mode it writes
`sstv_<mode>_<timestamp>_<rate>hz_16bit.wav`. It reports the outcome of every
file. It exits with status 1 in three cases: the input is missing, the output
directory cannot be created, or any file failed.

## Library use

To go from an image file to a WAV file in one call:

```python
from sstvmod.api import generate_sstv_from_file
from sstvmod.modes import SstvMode

generate_sstv_from_file("input.jpg", "output.wav", SstvMode.ROBOT36)
```

For more control, use the modulator itself:

```python
from PIL import Image

from sstvmod.modes import ImageSaveConfig, SstvMode
from sstvmod.modulator import SstvModulator

modulator = SstvModulator(SstvMode.MARTIN_M1).with_sample_rate(44100)
samples = modulator.modulate_image(Image.open("input.jpg"))  # list of 16-bit ints
modulator.export_wav("martin.wav")

# The picture as it was transmitted, plus a JSON file describing the scaling
modulator.save_processed_image_auto("out", ImageSaveConfig.png())
```

`SstvModulator` also has these members:

- `save_processed_image(path, config)` saves to an exact path.
- `batch_process(image, output_dir, base_name, config)` modulates the image, writes both the WAV and the picture, and returns the two paths.
- The properties `samples`, `processed_image` and `processing_metadata` give the results of the last run.
- `memory_usage()`, `should_clear_memory()`, `auto_memory_management()` and the `clear_*memory()` methods report and release what the modulator holds.

`ImageSaveConfig` chooses the image format: `png()`, `jpeg(quality)` or `bmp()`.
It also sets a file name suffix with `with_suffix()`, and whether the JSON
metadata file is written (`preserve_metadata`, on by default). Source images
larger than 16 times the frame raise a `UserWarning`.

The helpers in `sstvmod.api` are:

- `generate_sstv_from_image(image, output_path, mode)` encodes a PIL image that is already in memory.
- `generate_sstv_with_image_save(...)` loads an image file and runs `batch_process` on it.
- `process_sstv_complete(...)` does the same after an optional memory check, then returns the two paths and memory figures in MB.
- `get_supported_modes()` lists each mode with its display name, frame size and duration.
- `estimate_file_size(mode, sample_rate, bit_depth)` gives the expected WAV size in bytes.
- `estimate_memory_usage(...)` estimates the memory a job needs. `check_memory_requirements(...)` compares it with a 100 MB budget and suggests a smaller source size when the job does not fit.

Signal utilities live in two modules:

- `sstvmod.audio` provides `AudioGenerator` for sine waves, chirps and the Hann window. It also provides `AudioProcessor`, `WavWriter` for mono 16-bit PCM files (it can be used as a context manager), and `load_wav_file`, which reads 16- or 32-bit integer or 32-bit float WAV files as floats.
- `sstvmod.dsp` covers decibel conversion, RMS, normalisation, volume, fades and first-order low-, high- and band-pass filters. Each function returns a new list.

All errors are raised as subclasses of `sstvmod.errors.SstvError`.

## What it does not do

`sstvmod` only encodes. It does not decode or receive SSTV audio back into
pictures. It does not key a transmitter or talk to a radio. Playing the WAV
files over the air is left to other tools.
"""Level conversion, measurement and simple effects on float samples.

Every function returns a new list and leaves its input untouched.
"""

from __future__ import annotations

import math
from typing import Iterable


def db_to_linear(db: float) -> float:
    """Convert decibels to a linear amplitude."""
    return 10.0 ** (db / 20.0)


def linear_to_db(linear: float) -> float:
    """Convert a linear amplitude to decibels (-inf for 0, NaN below 0)."""
    if linear == 0:
        return -math.inf
    if linear < 0:
        return math.nan
    return 20.0 * math.log10(linear)


def calculate_rms(samples: Iterable[float]) -> float:
    """Root mean square of the samples; NaN for an empty sequence."""
    values = list(samples)
    if not values:
        return math.nan
    return math.sqrt(sum(x * x for x in values) / len(values))


def normalize(samples: Iterable[float], target_peak: float) -> list[float]:
    """Scale the samples so that the largest magnitude equals ``target_peak``."""
    values = list(samples)
    peak = max((abs(x) for x in values), default=0.0)
    if peak <= 0.0:
        return values
    scale = target_peak / peak
    return [x * scale for x in values]


def apply_volume(samples: Iterable[float], volume: float) -> list[float]:
    return [x * volume for x in samples]


def apply_fade_in(samples: Iterable[float], fade_samples: int) -> list[float]:
    """Ramp the first ``fade_samples`` samples up from silence."""
    values = list(samples)
    fade = min(fade_samples, len(values))
    return [x * (i / fade) if i < fade else x for i, x in enumerate(values)]


def apply_fade_out(samples: Iterable[float], fade_samples: int) -> list[float]:
    """Ramp the last ``fade_samples`` samples down towards silence."""
    values = list(samples)
    fade = min(fade_samples, len(values))
    start = len(values) - fade
    return [
        x * (1.0 - (i - start) / fade) if i >= start else x
        for i, x in enumerate(values)
    ]


def apply_lowpass_filter(samples: Iterable[float], cutoff_ratio: float) -> list[float]:
    """First-order low-pass; a ratio of 1 or more leaves the signal unchanged."""
    values = list(samples)
    if not values or cutoff_ratio >= 1.0:
        return values
    alpha = min(1.0, max(0.0, cutoff_ratio))
    out = [values[0]]
    prev = values[0]
    for x in values[1:]:
        prev = alpha * x + (1.0 - alpha) * prev
        out.append(prev)
    return out


def apply_highpass_filter(samples: Iterable[float], cutoff_ratio: float) -> list[float]:
    """First-order high-pass; a ratio of 0 or less leaves the signal unchanged."""
    values = list(samples)
    if not values or cutoff_ratio <= 0.0:
        return values
    alpha = min(1.0, max(0.0, 1.0 - cutoff_ratio))
    out = [values[0]]
    prev_in = prev_out = values[0]
    for x in values[1:]:
        prev_out = alpha * (prev_out + x - prev_in)
        prev_in = x
        out.append(prev_out)
    return out


def apply_bandpass_filter(
    samples: Iterable[float], low_cutoff: float, high_cutoff: float
) -> list[float]:
    """High-pass at ``low_cutoff`` followed by low-pass at ``high_cutoff``."""
    return apply_lowpass_filter(apply_highpass_filter(samples, low_cutoff), high_cutoff)
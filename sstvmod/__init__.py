"""Slow-scan television modulator: fits images to SSTV frames and writes them as WAV audio."""

__version__ = "0.1.0"
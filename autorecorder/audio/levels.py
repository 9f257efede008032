"""Level snapshots used for silence detection."""

import logging
from typing import Sequence

import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_FFT_SIZE = 2048
DEFAULT_FLOOR_DB = -100.0
LEVEL_MODES = ("spectrum", "amplitude")


class LevelAnalyzer:
    """Computes a peak level in dB for each block of audio.

    In "spectrum" mode the level is the loudest frequency bin of a
    Blackman-windowed FFT over the most recent `fft_size` samples of the first
    channel; samples from earlier blocks fill the window when a block is
    shorter than `fft_size`. In "amplitude" mode it is the time-domain peak
    over all channels of the block, in dBFS. Digital silence reports `floor_db`.
    """

    def __init__(self, mode: str = "spectrum", fft_size: int = DEFAULT_FFT_SIZE,
                 floor_db: float = DEFAULT_FLOOR_DB):
        if mode not in LEVEL_MODES:
            raise ValueError(f"Unknown level mode '{mode}', expected one of {LEVEL_MODES}")
        if fft_size < 2 or fft_size & (fft_size - 1):
            raise ValueError(f"fft_size must be a power of two, got {fft_size}")
        self.mode = mode
        self.fft_size = fft_size
        self.floor_db = floor_db
        self._window = np.blackman(fft_size)
        self._history = np.zeros(fft_size)

    def reset(self) -> None:
        """Forget samples from previous blocks."""
        self._history = np.zeros(self.fft_size)

    def peak_db(self, samples_per_channel: Sequence[Sequence[float]]) -> float:
        if self.mode == "amplitude":
            return self.amplitude_db(samples_per_channel)
        return self.spectrum_db(samples_per_channel)

    def _to_db(self, magnitude: float) -> float:
        if magnitude <= 0:
            return self.floor_db
        return max(float(20.0 * np.log10(magnitude)), self.floor_db)

    def spectrum_db(self, samples_per_channel: Sequence[Sequence[float]]) -> float:
        """Peak over frequency bins, in dB."""
        if len(samples_per_channel):
            block = np.asarray(samples_per_channel[0], dtype=np.float64)
            self._history = np.concatenate((self._history, block))[-self.fft_size:]

        spectrum = np.abs(np.fft.rfft(self._history * self._window))[:self.fft_size // 2] / self.fft_size
        return self._to_db(float(spectrum.max()))

    def amplitude_db(self, samples_per_channel: Sequence[Sequence[float]]) -> float:
        """Time-domain peak over all channels, in dBFS."""
        peak = 0.0
        for channel in samples_per_channel:
            data = np.asarray(channel, dtype=np.float64)
            if len(data):
                peak = max(peak, float(np.max(np.abs(data))))
        return self._to_db(peak)

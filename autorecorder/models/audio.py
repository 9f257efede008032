"""Audio-related data models."""

from dataclasses import dataclass
from typing import Optional

from ..exceptions import ConfigurationError, UnsupportedFormat

SUPPORTED_CHANNEL_COUNTS = (1, 2)


@dataclass(frozen=True)
class AudioConfig:
    """Format of the samples delivered to a session. Immutable once initialized."""
    sample_rate: float
    channels: int = 1

    def __post_init__(self):
        if self.sample_rate <= 0:
            raise ConfigurationError(f"Sample rate must be positive, got {self.sample_rate}")
        if self.channels not in SUPPORTED_CHANNEL_COUNTS:
            raise ConfigurationError(
                f"Unsupported channel count {self.channels}, expected one of {SUPPORTED_CHANNEL_COUNTS}")


@dataclass(frozen=True)
class ExportRequest:
    """Parameters for turning the captured buffer into a file."""
    container_type: str = "wav"
    sample_rate: Optional[float] = None  # None keeps the source rate

    def __post_init__(self):
        if self.container_type != "wav":
            raise UnsupportedFormat(f"Unsupported container type: {self.container_type}")

    def target_rate(self, source_rate: float) -> float:
        return source_rate if self.sample_rate is None else self.sample_rate


@dataclass
class AudioStats:
    """Recording statistics."""
    state: str
    total_frames: int
    total_chunks: int
    duration_seconds: float
    peak_level_db: Optional[float]  # None until the first block is observed
    sample_rate: float
    channels: int

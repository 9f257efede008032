"""Silence-aware audio recorder with WAV export."""

from .exceptions import (
    RecorderError,
    InvalidState,
    InvalidRate,
    LengthMismatch,
    InvariantViolation,
    UnsupportedFormat,
    ConfigurationError,
    AudioDeviceError,
)
from .models import AudioConfig, ExportRequest, AudioStats, RecorderState, RecorderEvent
from .config import RecorderConfig, RecorderOptions
from .services import RecordingSession

__version__ = "0.1.0"

__all__ = [
    "RecorderError",
    "InvalidState",
    "InvalidRate",
    "LengthMismatch",
    "InvariantViolation",
    "UnsupportedFormat",
    "ConfigurationError",
    "AudioDeviceError",
    "AudioConfig",
    "ExportRequest",
    "AudioStats",
    "RecorderState",
    "RecorderEvent",
    "RecorderConfig",
    "RecorderOptions",
    "RecordingSession",
]

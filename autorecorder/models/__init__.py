"""Data models for the autorecorder package."""

from .audio import AudioConfig, ExportRequest, AudioStats
from .session import RecorderState
from .events import RecorderEvent

__all__ = [
    "AudioConfig",
    "ExportRequest",
    "AudioStats",
    "RecorderState",
    "RecorderEvent",
]

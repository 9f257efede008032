"""Services layer for autorecorder."""

from .recording_session import RecordingSession

__all__ = [
    "RecordingSession",
]

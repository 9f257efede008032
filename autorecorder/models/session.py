"""Session-related data models."""

from enum import Enum


class RecorderState(Enum):
    """Lifecycle states of a recording session."""
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    RECORDING = "recording"
    STOPPED = "stopped"
    KILLED = "killed"  # stopped by abort(), no export

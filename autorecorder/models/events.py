"""Event models for recorder notifications."""

import time
from dataclasses import dataclass, field
from typing import Any

# Outbound notification names
READY = "ready"
START = "start"
AUDIO_PROCESS = "audioprocess"
STOP = "stop"
DATA = "data"
RESET = "reset"
END = "end"
ERROR = "error"

EVENT_TYPES = (READY, START, AUDIO_PROCESS, STOP, DATA, RESET, END, ERROR)


@dataclass
class RecorderEvent:
    """State transition notification published to listeners."""
    event_type: str
    payload: Any = None
    timestamp: float = field(default_factory=time.time)

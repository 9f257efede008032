"""Per-channel sample buffers that grow for the whole capture."""

import logging
import threading
from typing import List, Sequence

import numpy as np

from ..exceptions import InvariantViolation

logger = logging.getLogger(__name__)


class ChannelBuffer:
    """Ordered chunks of float32 samples for one channel plus a running sample count."""

    def __init__(self):
        self.chunks: List[np.ndarray] = []
        self.length = 0

    def append(self, chunk: Sequence[float]) -> None:
        data = np.asarray(chunk, dtype=np.float32)
        self.chunks.append(data)
        self.length += len(data)

    def __len__(self) -> int:
        return self.length


class SampleBuffer:
    """Unbounded multi-channel accumulation of incoming sample chunks.

    Channels are expected to receive chunks in lockstep; the buffer does not
    enforce it on append, but `total_frames` refuses to answer once they differ.
    """

    def __init__(self, channels: int):
        """Initialize an empty buffer.

        Args:
            channels: Number of channels to hold
        """
        if channels < 1:
            raise ValueError(f"channels must be >= 1, got {channels}")
        self.channels = channels
        self.lock = threading.Lock()
        self._buffers = [ChannelBuffer() for _ in range(channels)]
        self.total_chunks = 0

        logger.debug(f"SampleBuffer initialized with {channels} channel(s)")

    def append(self, channel_index: int, chunk: Sequence[float]) -> None:
        """Append one chunk to a channel."""
        if not 0 <= channel_index < self.channels:
            raise IndexError(f"channel index {channel_index} out of range for {self.channels} channel(s)")

        with self.lock:
            self._buffers[channel_index].append(chunk)
            if channel_index == 0:
                self.total_chunks += 1

    def append_frame_set(self, samples_per_channel: Sequence[Sequence[float]]) -> None:
        """Append one chunk to every channel, in channel order."""
        for channel_index in range(self.channels):
            self.append(channel_index, samples_per_channel[channel_index])

    def channel(self, channel_index: int) -> ChannelBuffer:
        return self._buffers[channel_index]

    def channel_lengths(self) -> List[int]:
        with self.lock:
            return [len(buffer) for buffer in self._buffers]

    def total_frames(self) -> int:
        """Running frame count, identical across channels.

        Raises:
            InvariantViolation: if the channels have diverged
        """
        lengths = self.channel_lengths()
        if len(set(lengths)) > 1:
            raise InvariantViolation(f"Channel buffers diverged: frame counts {lengths}")
        return lengths[0]

    def clear(self) -> None:
        """Drop all buffered chunks."""
        with self.lock:
            self._buffers = [ChannelBuffer() for _ in range(self.channels)]
            self.total_chunks = 0
            logger.debug("Sample buffer cleared")

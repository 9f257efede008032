"""Merging buffered chunks and interleaving channels."""

import logging
from typing import Sequence

import numpy as np

from ..exceptions import LengthMismatch
from .buffer import ChannelBuffer

logger = logging.getLogger(__name__)


def merge(buffer: ChannelBuffer) -> np.ndarray:
    """Concatenate a channel's chunks in arrival order into one new array.

    The input buffer is left untouched.
    """
    if not buffer.chunks:
        return np.zeros(0, dtype=np.float32)

    result = np.empty(buffer.length, dtype=np.float32)
    offset = 0
    for chunk in buffer.chunks:
        result[offset:offset + len(chunk)] = chunk
        offset += len(chunk)
    return result


def interleave(left: Sequence[float], right: Sequence[float]) -> np.ndarray:
    """Interleave two equal-length channels into [L0, R0, L1, R1, ...]."""
    left = np.asarray(left, dtype=np.float32)
    right = np.asarray(right, dtype=np.float32)
    if len(left) != len(right):
        raise LengthMismatch(f"Cannot interleave channels of length {len(left)} and {len(right)}")

    result = np.empty(len(left) + len(right), dtype=np.float32)
    result[0::2] = left
    result[1::2] = right
    return result

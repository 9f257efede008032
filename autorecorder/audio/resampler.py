"""Block-average downsampling.

Each output sample is the mean of the input samples that fall inside its
window. This is plain decimation without an anti-aliasing filter, so some
aliasing is expected; it is good enough for voice captures.
"""

import logging
import math
from typing import Sequence

import numpy as np

from ..exceptions import InvalidRate

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def downsample(samples: Sequence[float], source_rate: float, target_rate: float) -> np.ndarray:
    """Downsample `samples` from `source_rate` to `target_rate`.

    Args:
        samples: Input samples (interleaved samples are treated as one stream)
        source_rate: Rate the samples were captured at
        target_rate: Desired output rate, must not exceed the source rate

    Returns:
        float32 array of round(len(samples) / (source_rate / target_rate)) samples

    Raises:
        InvalidRate: if target_rate > source_rate or target_rate is not positive
    """
    samples = np.asarray(samples, dtype=np.float32)
    if target_rate == source_rate:
        return samples
    if target_rate > source_rate:
        raise InvalidRate(
            f"Target rate {target_rate} exceeds source rate {source_rate}; upsampling is not supported")
    if target_rate <= 0:
        raise InvalidRate(f"Target rate must be positive, got {target_rate}")

    ratio = source_rate / target_rate
    input_length = len(samples)
    new_length = _round_half_up(input_length / ratio)

    ends = np.floor(np.arange(1, new_length + 1) * ratio + 0.5).astype(np.int64)
    starts = np.concatenate(([0], ends[:-1])) if new_length else ends
    ends = np.minimum(ends, input_length)
    starts = np.minimum(starts, input_length)

    # Window sums from a float64 running total
    cumulative = np.concatenate(([0.0], np.cumsum(samples, dtype=np.float64)))
    counts = ends - starts
    sums = cumulative[ends] - cumulative[starts]

    result = np.zeros(new_length, dtype=np.float64)
    nonempty = counts > 0
    result[nonempty] = sums[nonempty] / counts[nonempty]

    logger.debug(f"Downsampled {input_length} samples {source_rate}Hz -> {target_rate}Hz "
                 f"({new_length} samples)")
    return result.astype(np.float32)

"""16-bit PCM WAV serialization.

Layout is the canonical 44-byte RIFF header followed by little-endian int16
samples. Negative samples scale by 32768 and non-negative ones by 32767;
existing consumers of these files rely on that exact mapping.
"""

import logging
import struct
from typing import NamedTuple, Sequence

import numpy as np

from ..exceptions import UnsupportedFormat

logger = logging.getLogger(__name__)

HEADER_SIZE = 44
BYTES_PER_SAMPLE = 2
BITS_PER_SAMPLE = 16
PCM_FORMAT = 1
FMT_CHUNK_SIZE = 16

# RIFF id, RIFF size, WAVE, fmt id, fmt size, format, channels, rate,
# byte rate, block align, bits per sample, data id, data size
_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


class WavHeader(NamedTuple):
    """Fields of a canonical PCM WAV header."""
    riff_size: int
    audio_format: int
    channels: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int
    data_size: int


def float_to_pcm16(samples: Sequence[float]) -> np.ndarray:
    """Convert float samples in [-1, 1] to int16 with asymmetric scaling."""
    data = np.asarray(samples, dtype=np.float64)
    data = np.clip(np.nan_to_num(data, nan=0.0), -1.0, 1.0)
    scaled = np.where(data < 0, data * 0x8000, data * 0x7FFF)
    # Truncate toward zero
    return np.trunc(scaled).astype("<i2")


def encode_header(sample_count: int, sample_rate: int, channels: int) -> bytes:
    data_size = sample_count * BYTES_PER_SAMPLE
    return _HEADER.pack(
        b"RIFF",
        36 + data_size,
        b"WAVE",
        b"fmt ",
        FMT_CHUNK_SIZE,
        PCM_FORMAT,
        channels,
        sample_rate,
        sample_rate * channels * BYTES_PER_SAMPLE,
        channels * BYTES_PER_SAMPLE,
        BITS_PER_SAMPLE,
        b"data",
        data_size,
    )


def encode(samples: Sequence[float], sample_rate: int, channels: int) -> bytes:
    """Encode interleaved float samples as a 16-bit PCM WAV file.

    Args:
        samples: Interleaved samples in [-1, 1]; values outside are clamped
        sample_rate: Rate written to the header, in Hz
        channels: Channel count written to the header

    Returns:
        Complete WAV file contents
    """
    pcm = float_to_pcm16(samples)
    header = encode_header(len(pcm), int(sample_rate), int(channels))
    logger.debug(f"Encoded WAV: {len(pcm)} samples, {sample_rate}Hz, {channels} channel(s)")
    return header + pcm.tobytes()


def read_wav_header(data: bytes) -> WavHeader:
    """Parse the header written by `encode`.

    Raises:
        UnsupportedFormat: if the bytes are not a canonical PCM WAV header
    """
    if len(data) < HEADER_SIZE:
        raise UnsupportedFormat(f"WAV data too short: {len(data)} bytes")

    (riff, riff_size, wave, fmt, fmt_size, audio_format, channels, sample_rate,
     byte_rate, block_align, bits_per_sample, data_id, data_size) = _HEADER.unpack_from(data)

    if riff != b"RIFF" or wave != b"WAVE" or fmt != b"fmt " or data_id != b"data":
        raise UnsupportedFormat("Not a canonical RIFF/WAVE header")
    if fmt_size != FMT_CHUNK_SIZE or audio_format != PCM_FORMAT:
        raise UnsupportedFormat(f"Unsupported WAV format {audio_format} (fmt size {fmt_size})")

    return WavHeader(
        riff_size=riff_size,
        audio_format=audio_format,
        channels=channels,
        sample_rate=sample_rate,
        byte_rate=byte_rate,
        block_align=block_align,
        bits_per_sample=bits_per_sample,
        data_size=data_size,
    )

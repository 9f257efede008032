"""Audio buffering, analysis and WAV export."""

from .buffer import ChannelBuffer, SampleBuffer
from .merger import merge, interleave
from .resampler import downsample
from .wav_encoder import encode, read_wav_header
from .silence import SilenceMonitor
from .levels import LevelAnalyzer
from .pipeline import export_wav, ExportWorker
from .events import RecorderEventPublisher

__all__ = [
    'ChannelBuffer',
    'SampleBuffer',
    'merge',
    'interleave',
    'downsample',
    'encode',
    'read_wav_header',
    'SilenceMonitor',
    'LevelAnalyzer',
    'export_wav',
    'ExportWorker',
    'RecorderEventPublisher',
]

"""Pytest configuration and fixtures for autorecorder tests."""

import pytest
import tempfile
import logging
from unittest.mock import Mock, patch
import numpy as np

from autorecorder.audio.events import RecorderEventPublisher
from autorecorder.models.events import EVENT_TYPES


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests of a single component")
    config.addinivalue_line("markers", "integration: tests spanning several components")


@pytest.fixture
def temp_data_dir():
    """Create temporary directory for test data."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield temp_dir


@pytest.fixture
def audio_test_data():
    """Generate float32 test signals."""
    def generate_audio(pattern="sine", frames=4096, sample_rate=48000, amplitude=0.5, freq=440.0):
        """Generate one channel of audio.

        Args:
            pattern: Type of audio pattern ('sine', 'noise', 'silence')
            frames: Number of samples
            sample_rate: Sample rate in Hz
            amplitude: Peak amplitude

        Returns:
            np.ndarray of float32 samples
        """
        if pattern == "sine":
            t = np.arange(frames) / sample_rate
            wave_data = amplitude * np.sin(2 * np.pi * freq * t)
        elif pattern == "noise":
            wave_data = np.random.uniform(-amplitude, amplitude, frames)
        elif pattern == "silence":
            wave_data = np.zeros(frames)
        else:
            raise ValueError(f"Unknown pattern: {pattern}")
        return wave_data.astype(np.float32)

    return generate_audio


@pytest.fixture
def recorded_events():
    """Publisher on a private topic plus a list of every event it published."""
    publisher = RecorderEventPublisher(topic="test_recorder")
    received = []
    for event_type in EVENT_TYPES:
        publisher.add_listener(event_type, received.append)
    return publisher, received


@pytest.fixture
def mock_pyaudio():
    """Mock PyAudio for testing without actual audio hardware."""
    pytest.importorskip("pyaudio")
    with patch('pyaudio.PyAudio') as mock_pyaudio_class:
        mock_pyaudio_instance = Mock()
        mock_stream = Mock()

        # Silent stereo float32 block of 256 frames
        mock_stream.read.return_value = np.zeros(512, dtype=np.float32).tobytes()
        mock_stream.stop_stream.return_value = None
        mock_stream.close.return_value = None

        mock_pyaudio_instance.open.return_value = mock_stream
        mock_pyaudio_instance.terminate.return_value = None

        mock_pyaudio_class.return_value = mock_pyaudio_instance

        yield {
            'class': mock_pyaudio_class,
            'instance': mock_pyaudio_instance,
            'stream': mock_stream
        }

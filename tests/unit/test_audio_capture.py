"""Unit tests for AudioCapture class."""

import time
import threading

import pytest
from unittest.mock import patch
import numpy as np

pytest.importorskip("pyaudio")

from autorecorder.audio.capture import AudioCapture
from autorecorder.exceptions import AudioDeviceError


@pytest.mark.unit
class TestAudioCapture:
    """Test cases for AudioCapture class."""

    def test_initialization(self):
        capture = AudioCapture(callback=lambda samples, timestamp: None)

        assert capture.sample_rate == 48000
        assert capture.chunk_size == 4096
        assert capture.channels == 2
        assert capture.is_recording is False
        assert capture.total_chunks == 0
        assert capture.frames_read == 0

    def test_split_channels(self):
        capture = AudioCapture(callback=lambda samples, timestamp: None, channels=2)
        raw = np.array([0.1, -0.1, 0.2, -0.2, 0.3, -0.3], dtype=np.float32).tobytes()

        left, right = capture.split_channels(raw)

        np.testing.assert_allclose(left, [0.1, 0.2, 0.3], rtol=1e-6)
        np.testing.assert_allclose(right, [-0.1, -0.2, -0.3], rtol=1e-6)
        assert left.dtype == np.float32

    def test_split_channels_mono(self):
        capture = AudioCapture(callback=lambda samples, timestamp: None, channels=1)

        (mono,) = capture.split_channels(np.zeros(5, dtype=np.float32).tobytes())

        assert len(mono) == 5

    def test_start_recording(self, mock_pyaudio):
        capture = AudioCapture(callback=lambda samples, timestamp: None)

        with patch.object(capture, '_record_continuously') as mock_record:
            capture.start_recording()

            assert capture.is_recording is True
            assert capture.recording_thread is not None
            assert capture.recording_thread.daemon is True
            capture.recording_thread.join(timeout=1.0)
            mock_record.assert_called_once()

    def test_start_recording_already_recording(self, mock_pyaudio):
        capture = AudioCapture(callback=lambda samples, timestamp: None)
        capture.is_recording = True

        with patch.object(capture, '_record_continuously') as mock_record:
            capture.start_recording()

            mock_record.assert_not_called()

    def test_stop_recording_not_recording(self, mock_pyaudio):
        capture = AudioCapture(callback=lambda samples, timestamp: None)

        capture.stop_recording()
        assert capture.is_recording is False

    def test_delivers_blocks_with_virtual_clock(self, mock_pyaudio):
        blocks = []
        received = threading.Event()

        def on_block(samples, timestamp):
            blocks.append((samples, timestamp))
            if len(blocks) >= 3:
                received.set()

        capture = AudioCapture(callback=on_block, sample_rate=16000, chunk_size=256, channels=2)
        capture.start_recording()
        assert received.wait(timeout=2.0)
        capture.stop_recording()

        samples, timestamp = blocks[0]
        assert len(samples) == 2
        assert len(samples[0]) == 256
        assert timestamp == pytest.approx(256 / 16000)
        assert blocks[2][1] == pytest.approx(3 * 256 / 16000)
        mock_pyaudio['stream'].stop_stream.assert_called()
        mock_pyaudio['instance'].terminate.assert_called()

    def test_open_failure_raises_device_error(self, mock_pyaudio):
        mock_pyaudio['instance'].open.side_effect = OSError("no input device")
        capture = AudioCapture(callback=lambda samples, timestamp: None)

        with pytest.raises(AudioDeviceError):
            capture._open_audio_stream()

    def test_thread_failure_reported_to_error_callback(self, mock_pyaudio):
        mock_pyaudio['instance'].open.side_effect = OSError("no input device")
        errors = []
        reported = threading.Event()

        def on_error(error):
            errors.append(error)
            reported.set()

        capture = AudioCapture(callback=lambda samples, timestamp: None, error_callback=on_error)
        capture.start_recording()

        assert reported.wait(timeout=2.0)
        capture.stop_recording()
        assert isinstance(errors[0], AudioDeviceError)
        assert not capture.recording_thread.is_alive()

    def test_callback_failure_ends_capture(self, mock_pyaudio):
        errors = []
        reported = threading.Event()

        def failing_callback(samples, timestamp):
            raise OSError("disk full")

        def on_error(error):
            errors.append(error)
            reported.set()

        capture = AudioCapture(callback=failing_callback, chunk_size=256, error_callback=on_error)
        capture.start_recording()

        assert reported.wait(timeout=2.0)
        capture.stop_recording()
        assert [str(error) for error in errors] == ["disk full"]
        mock_pyaudio['stream'].close.assert_called()

    def test_destructor_cleanup(self, mock_pyaudio):
        capture = AudioCapture(callback=lambda samples, timestamp: None)

        with patch.object(AudioCapture, 'stop_recording') as mock_stop:
            capture.is_recording = True

            capture.__del__()

            mock_stop.assert_called_once()

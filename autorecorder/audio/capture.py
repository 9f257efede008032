"""Audio capture from an input device, delivering float32 blocks per channel."""

import logging
from threading import Thread, Event
from typing import Callable, List, Optional

import numpy as np
import pyaudio

from ..exceptions import AudioDeviceError

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 4096

FrameCallback = Callable[[List[np.ndarray], float], None]
ErrorCallback = Callable[[Exception], None]


class AudioCapture:
    """Reads fixed-size blocks from a pyaudio input stream on a background thread.

    Each block is split into one float32 array per channel and handed to
    `callback(samples_per_channel, timestamp)`, where timestamp is the number of
    seconds of audio read so far. If the stream or the callback fails, the
    capture thread ends and the exception goes to `error_callback`, or is
    re-raised on the thread when there is none.
    """

    def __init__(
        self,
        callback: FrameCallback,
        sample_rate: int = 48000,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        channels: int = 2,
        input_device_index: Optional[int] = None,
        error_callback: Optional[ErrorCallback] = None,
    ):
        """Initialize audio capture with specified parameters.

        Args:
            callback: Receives each block as per-channel arrays plus a timestamp
            sample_rate: Audio sample rate
            chunk_size: Frames per block
            channels: Number of input channels
            input_device_index: pyaudio device index, None for the default input
            error_callback: Receives the exception that ended the capture thread
        """
        self.frame_callback = callback
        self.error_callback = error_callback
        self.sample_rate = sample_rate
        self.chunk_size = chunk_size
        self.channels = channels
        self.input_device_index = input_device_index

        self.recording_thread: Optional[Thread] = None
        self.stop_event = Event()
        self.is_recording = False

        self.total_chunks = 0
        self.frames_read = 0

        self.pyaudio_instance: Optional[pyaudio.PyAudio] = None

    def start_recording(self) -> None:
        """Start continuous capture in background thread."""
        if self.is_recording:
            logger.warning("Capture already in progress")
            return

        logger.info("Starting audio capture")
        self.stop_event.clear()
        self.total_chunks = 0
        self.frames_read = 0

        self.recording_thread = Thread(target=self._record_continuously, daemon=True)
        self.recording_thread.name = "AudioCaptureThread"
        self.recording_thread.start()
        self.is_recording = True

    def stop_recording(self) -> None:
        """Stop capture and clean up resources."""
        if not self.is_recording:
            logger.warning("No capture in progress")
            return

        logger.info("Stopping audio capture")
        self.stop_event.set()

        if self.recording_thread and self.recording_thread.is_alive():
            self.recording_thread.join(timeout=2.0)
            if self.recording_thread.is_alive():
                logger.warning("Capture thread did not stop cleanly")

        self.is_recording = False
        logger.info(f"Capture stopped. Total chunks: {self.total_chunks}")

    def _open_audio_stream(self) -> pyaudio.Stream:
        self.pyaudio_instance = pyaudio.PyAudio()
        try:
            stream = self.pyaudio_instance.open(
                format=pyaudio.paFloat32,
                channels=self.channels,
                rate=self.sample_rate,
                input=True,
                input_device_index=self.input_device_index,
                frames_per_buffer=self.chunk_size,
                stream_callback=None
            )
        except (OSError, ValueError) as e:
            raise AudioDeviceError(f"Could not open input stream: {e}")
        logger.info(f"Audio stream opened: {self.sample_rate}Hz, {self.channels} channel(s), "
                    f"{self.chunk_size} frames/chunk")
        return stream

    def split_channels(self, raw: bytes) -> List[np.ndarray]:
        """De-interleave one raw float32 block into per-channel arrays."""
        interleaved = np.frombuffer(raw, dtype=np.float32)
        frames = interleaved[:len(interleaved) - len(interleaved) % self.channels]
        frames = frames.reshape(-1, self.channels)
        return [frames[:, channel].copy() for channel in range(self.channels)]

    def _read_block(self, stream: pyaudio.Stream) -> List[np.ndarray]:
        raw = stream.read(self.chunk_size, exception_on_overflow=False)
        samples = self.split_channels(raw)
        self.total_chunks += 1
        self.frames_read += len(samples[0])
        return samples

    def _record_continuously(self) -> None:
        """Internal method: continuous capture loop in background thread."""
        stream = None
        try:
            stream = self._open_audio_stream()
            while not self.stop_event.is_set():
                samples = self._read_block(stream)
                self.frame_callback(samples, self.frames_read / self.sample_rate)
        except Exception as e:
            logger.error(f"Audio capture failed: {e}", exc_info=True)
            if self.error_callback is None:
                raise
            self.error_callback(e)
        finally:
            if stream:
                stream.stop_stream()
                stream.close()
            if self.pyaudio_instance:
                self.pyaudio_instance.terminate()
                self.pyaudio_instance = None

    def __del__(self):
        """Ensure resources are cleaned up on deletion."""
        if self.is_recording:
            self.stop_recording()

"""Recording session that manages the capture lifecycle and export."""

import logging
import threading
from typing import List, Optional, Sequence

import numpy as np

from ..audio.buffer import SampleBuffer
from ..audio.events import RecorderEventPublisher
from ..audio.levels import LevelAnalyzer
from ..audio.merger import merge
from ..audio.pipeline import ExportWorker, export_wav
from ..audio.silence import SilenceMonitor
from ..config import RecorderOptions
from ..exceptions import InvalidState, LengthMismatch
from ..models import events
from ..models.audio import AudioConfig, AudioStats, ExportRequest
from ..models.session import RecorderState

logger = logging.getLogger(__name__)


class RecordingSession:
    """Owns the sample buffer, silence monitor and export for one recorder.

    States run UNINITIALIZED -> READY -> RECORDING -> STOPPED. `reset()` goes
    back to READY with empty buffers; `abort()` ends in KILLED without
    exporting. Frames are expected from a single capture thread; every public
    method takes the session lock.
    """

    def __init__(self,
                 options: Optional[RecorderOptions] = None,
                 publisher: Optional[RecorderEventPublisher] = None,
                 level_analyzer: Optional[LevelAnalyzer] = None):
        """Initialize recording session.

        Args:
            options: Recorder options (thresholds, mono, export rate)
            publisher: Where state notifications go; a private one is created if omitted
            level_analyzer: Computes the peak level of frames that arrive without one
        """
        self.options = options or RecorderOptions()
        self.publisher = publisher or RecorderEventPublisher()
        self.level_analyzer = level_analyzer or LevelAnalyzer()
        self.monitor = SilenceMonitor(
            volume_threshold_db=self.options.volume_threshold,
            quiet_threshold_seconds=self.options.quiet_threshold_time,
        )

        self.state = RecorderState.UNINITIALIZED
        self.config: Optional[AudioConfig] = None
        self.buffer: Optional[SampleBuffer] = None
        self.result: Optional[bytes] = None
        self.export_error: Optional[Exception] = None

        # Frames delivered this cycle; drives the default virtual clock
        self.frames_delivered = 0
        self.cycle = 0

        self.lock = threading.RLock()
        self.export_worker: Optional[ExportWorker] = None
        if self.options.offload_export:
            self.export_worker = ExportWorker()

    def _require(self, *allowed: RecorderState) -> None:
        if self.state not in allowed:
            names = ", ".join(state.name for state in allowed)
            raise InvalidState(f"Operation not allowed in state {self.state.name} (expected {names})")

    def clock(self) -> float:
        """Seconds of audio delivered in the current cycle."""
        if not self.config:
            return 0.0
        return self.frames_delivered / self.config.sample_rate

    def initialize(self, config: AudioConfig) -> None:
        """Allocate empty buffers for `config` and become READY."""
        with self.lock:
            self._require(RecorderState.UNINITIALIZED)
            if self.options.mono and config.channels != 1:
                config = AudioConfig(sample_rate=config.sample_rate, channels=1)
            self.config = config
            self.buffer = SampleBuffer(config.channels)
            self.state = RecorderState.READY
            logger.info(f"Session initialized: {config.sample_rate}Hz, {config.channels} channel(s)")
        self.publisher.publish(events.READY)

    def start(self, now: Optional[float] = None) -> None:
        """Begin recording; the quiet timer starts at `now` (virtual clock by default)."""
        with self.lock:
            self._require(RecorderState.READY)
            self.monitor.arm(self.clock() if now is None else now)
            self.level_analyzer.reset()
            self.state = RecorderState.RECORDING
            logger.info("Recording started")
        self.publisher.publish(events.START)

    def append(self, samples_per_channel: Sequence[Sequence[float]],
               now: Optional[float] = None, peak_db: Optional[float] = None) -> bool:
        """Buffer one frame set and feed its level to the silence monitor.

        Args:
            samples_per_channel: One chunk per input channel; in mono mode only the first is kept
            now: Timestamp of this block; defaults to the virtual clock after the block
            peak_db: Level snapshot for this block; computed by the level analyzer if omitted

        Returns:
            True if this block triggered the silence auto-stop

        Raises:
            InvalidState: if not recording
            LengthMismatch: if the channel chunks differ in frame count
        """
        with self.lock:
            self._require(RecorderState.RECORDING)
            channels = self.config.channels
            if len(samples_per_channel) < channels:
                raise LengthMismatch(
                    f"Expected {channels} channel chunk(s), got {len(samples_per_channel)}")

            chunks = [np.asarray(samples_per_channel[i], dtype=np.float32) for i in range(channels)]
            frame_count = len(chunks[0])
            if any(len(chunk) != frame_count for chunk in chunks):
                raise LengthMismatch(f"Channel chunks differ in length: {[len(c) for c in chunks]}")

            self.buffer.append_frame_set(chunks)
            self.frames_delivered += frame_count
            logger.debug(f"Buffered {frame_count} frames ({self.frames_delivered} total)")

            self.publisher.publish(events.AUDIO_PROCESS, chunks)

            if peak_db is None:
                peak_db = self.level_analyzer.peak_db(samples_per_channel)
            timestamp = self.clock() if now is None else now

            if self.monitor.observe(peak_db, timestamp):
                self.stop()
                return True
            return False

    def on_frame(self, samples_per_channel: Sequence[Sequence[float]],
                 now: Optional[float] = None, peak_db: Optional[float] = None) -> bool:
        """Capture callback entry point; frames outside RECORDING are dropped."""
        with self.lock:
            if self.state is not RecorderState.RECORDING:
                logger.debug(f"Dropping frame delivered in state {self.state.name}")
                return False
            return self.append(samples_per_channel, now=now, peak_db=peak_db)

    def _merged_channels(self) -> List[np.ndarray]:
        self.buffer.total_frames()  # raises if the channels diverged
        return [merge(self.buffer.channel(i)) for i in range(self.buffer.channels)]

    def stop(self, request: Optional[ExportRequest] = None) -> Optional[bytes]:
        """Stop recording and export the capture.

        Returns:
            The WAV bytes, or None when the export runs on the worker thread

        Raises:
            InvalidState: if not recording
            InvariantViolation, InvalidRate: if the export fails; state stays STOPPED
        """
        with self.lock:
            self._require(RecorderState.RECORDING)
            self.state = RecorderState.STOPPED
            logger.info(f"Recording stopped after {self.frames_delivered} frames")

            request = request or ExportRequest(sample_rate=self.options.sample_rate)
            try:
                channels = self._merged_channels()
            except Exception as e:
                self._export_failed(e)
                raise

            if self.export_worker:
                cycle = self.cycle
                self.export_worker.submit(
                    channels, self.config.sample_rate, request,
                    lambda result, error: self._on_export_done(cycle, result, error))
                return None

            try:
                wav = export_wav(channels, self.config.sample_rate, request)
            except Exception as e:
                self._export_failed(e)
                raise
            self._export_succeeded(wav)
            return wav

    def _on_export_done(self, cycle: int, result: Optional[bytes], error: Optional[Exception]) -> None:
        with self.lock:
            if cycle != self.cycle or self.state is not RecorderState.STOPPED:
                logger.info("Discarding export result from an aborted or reset capture")
                return
            if error is not None:
                self._export_failed(error)
            else:
                self._export_succeeded(result)

    def _export_succeeded(self, wav: bytes) -> None:
        self.result = wav
        self.export_error = None
        try:
            self.publisher.publish(events.DATA, wav)
        except Exception as e:
            # the WAV was built; a listener failed to take it
            self.export_error = e
            logger.error(f"Data listener failed: {e}", exc_info=True)
            self.publisher.publish(events.ERROR, e)
            raise
        finally:
            self.publisher.publish(events.END)

    def _export_failed(self, error: Exception) -> None:
        self.result = None
        self.export_error = error
        logger.error(f"Export failed: {error}")
        self.publisher.publish(events.ERROR, error)

    def reset(self) -> None:
        """Discard all buffered samples and return to READY, keeping the config."""
        with self.lock:
            if self.config is None:
                raise InvalidState(f"Cannot reset a session in state {self.state.name} without a config")
            self.buffer.clear()
            self.frames_delivered = 0
            self.result = None
            self.export_error = None
            self.cycle += 1
            if self.options.offload_export and self.export_worker is None:
                self.export_worker = ExportWorker()
            self.state = RecorderState.READY
            logger.info("Session reset")
        self.publisher.publish(events.RESET)

    def abort(self) -> None:
        """Kill the capture immediately without exporting. Safe from any state.

        Buffers are released and the export worker, if any, is retired; an
        export it is still running is discarded. `reset()` starts a new worker.
        """
        with self.lock:
            self.publisher.publish(events.STOP)
            if self.buffer:
                self.buffer.clear()
            self.frames_delivered = 0
            self.result = None
            self.cycle += 1
            self.state = RecorderState.KILLED
            worker, self.export_worker = self.export_worker, None
            logger.info("Session aborted")
        if worker:
            # not joined: the worker may be waiting on the session lock
            worker.shutdown(wait=False)
        self.publisher.publish(events.END)

    def get_buffer(self) -> List[np.ndarray]:
        """Merged per-channel copy of everything recorded so far."""
        with self.lock:
            self._require(RecorderState.RECORDING, RecorderState.STOPPED)
            return self._merged_channels()

    def get_stats(self) -> AudioStats:
        with self.lock:
            return AudioStats(
                state=self.state.value,
                total_frames=self.frames_delivered,
                total_chunks=self.buffer.total_chunks if self.buffer else 0,
                duration_seconds=self.clock(),
                peak_level_db=self.monitor.peak_level_db,
                sample_rate=self.config.sample_rate if self.config else 0.0,
                channels=self.config.channels if self.config else 0,
            )

    def close(self) -> None:
        """Stop the export worker, if any."""
        if self.export_worker:
            self.export_worker.shutdown()
            self.export_worker = None

"""Export pipeline: merged channels -> interleave -> downsample -> WAV bytes."""

import logging
import queue
import threading
from typing import Callable, List, NamedTuple, Optional, Sequence

import numpy as np

from ..exceptions import InvariantViolation
from ..models.audio import ExportRequest
from .merger import interleave
from .resampler import downsample
from .wav_encoder import encode

logger = logging.getLogger(__name__)


def export_wav(channels: Sequence[np.ndarray], source_rate: float,
               request: Optional[ExportRequest] = None) -> bytes:
    """Turn merged per-channel samples into a WAV file.

    This is a pure function of its inputs, so it can run inline or on a
    worker thread.

    Args:
        channels: One merged float32 array per channel (1 or 2 channels)
        source_rate: Capture rate of the samples
        request: Export parameters; defaults to WAV at the source rate

    Raises:
        InvariantViolation: if the channels differ in length
        InvalidRate: if the requested rate exceeds the source rate
    """
    request = request or ExportRequest()
    lengths = [len(channel) for channel in channels]
    if not lengths or len(set(lengths)) > 1:
        raise InvariantViolation(f"Refusing to export channels with frame counts {lengths}")

    if len(channels) == 2:
        samples = interleave(channels[0], channels[1])
    else:
        samples = np.asarray(channels[0], dtype=np.float32)

    target_rate = request.target_rate(source_rate)
    samples = downsample(samples, source_rate, target_rate)
    wav = encode(samples, int(round(target_rate)), len(channels))

    logger.info(f"Exported {lengths[0]} frames x {len(channels)} channel(s) "
                f"at {target_rate}Hz: {len(wav)} bytes")
    return wav


ExportCallback = Callable[[Optional[bytes], Optional[Exception]], None]


class ExportTask(NamedTuple):
    """An export to be run by the worker thread."""
    channels: List[np.ndarray]
    source_rate: float
    request: ExportRequest
    callback: ExportCallback


class ExportWorker:
    """Runs `export_wav` on a background thread fed by a queue."""

    def __init__(self, name: str = "export"):
        self.name = name
        self.task_queue: "queue.Queue[Optional[ExportTask]]" = queue.Queue()
        self.thread = threading.Thread(target=self._worker_loop, daemon=True)
        self.thread.name = f"worker_{name}"
        self.thread.start()
        logger.info(f"Started {self.name} export worker")

    def submit(self, channels: List[np.ndarray], source_rate: float,
               request: ExportRequest, callback: ExportCallback) -> None:
        self.task_queue.put(ExportTask(channels, source_rate, request, callback))

    def _worker_loop(self) -> None:
        while True:
            task = self.task_queue.get()
            if task is None:
                logger.debug(f"Export worker {self.name} received sentinel, exiting.")
                self.task_queue.task_done()
                break

            try:
                try:
                    result = export_wav(task.channels, task.source_rate, task.request)
                except Exception as e:
                    logger.error(f"Export failed in worker {self.name}: {e}")
                    task.callback(None, e)
                else:
                    task.callback(result, None)
            except Exception as e:
                logger.error(f"Unhandled exception in export callback for {self.name}: {e}", exc_info=True)
            finally:
                self.task_queue.task_done()

    def join(self) -> None:
        """Block until every submitted export has been delivered."""
        self.task_queue.join()

    def shutdown(self, timeout: float = 2.0, wait: bool = True) -> None:
        """Stop the worker once queued exports are done; `wait=False` only queues the sentinel."""
        self.task_queue.put(None)
        if wait and threading.current_thread() is not self.thread:
            self.thread.join(timeout=timeout)
            if self.thread.is_alive():
                logger.warning(f"Export worker {self.name} did not stop cleanly")

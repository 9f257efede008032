"""Silence detection for auto-stopping a capture."""

import logging
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_VOLUME_THRESHOLD_DB = -60.0
DEFAULT_QUIET_THRESHOLD_SECONDS = 5.0


class SilenceMonitor:
    """Tracks how long the input has stayed below a level threshold.

    A level at or above `volume_threshold_db` counts as signal and restarts the
    quiet timer. Once the input has been quiet for strictly longer than
    `quiet_threshold_seconds`, `observe` returns True a single time; the
    monitor stays fired until `arm` is called for the next capture.
    """

    def __init__(self,
                 volume_threshold_db: float = DEFAULT_VOLUME_THRESHOLD_DB,
                 quiet_threshold_seconds: float = DEFAULT_QUIET_THRESHOLD_SECONDS):
        self.volume_threshold_db = volume_threshold_db
        self.quiet_threshold_seconds = quiet_threshold_seconds
        self.quiet_since = 0.0
        self.peak_level_db: Optional[float] = None
        self.triggered = False

    def arm(self, now: float) -> None:
        """Start a new capture cycle with the quiet timer at `now`."""
        self.quiet_since = now
        self.peak_level_db = None
        self.triggered = False
        logger.debug(f"Silence monitor armed at t={now:.3f}s")

    def quiet_duration(self, now: float) -> float:
        return now - self.quiet_since

    def observe(self, peak_level_db: float, now: float) -> bool:
        """Record one level snapshot.

        Returns:
            True exactly once, when the quiet period first exceeds the threshold
        """
        self.peak_level_db = peak_level_db

        if peak_level_db >= self.volume_threshold_db:
            self.quiet_since = now
            return False

        if self.triggered:
            return False

        if self.quiet_duration(now) > self.quiet_threshold_seconds:
            self.triggered = True
            logger.info(f"Silence for {self.quiet_duration(now):.2f}s "
                        f"(< {self.volume_threshold_db}dB), requesting stop")
            return True
        return False

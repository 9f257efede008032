"""Main application entry point for autorecorder."""

import sys
import argparse
import logging
import threading
from pathlib import Path
from typing import Optional

from rich.console import Console

from .audio.capture import AudioCapture, DEFAULT_CHUNK_SIZE
from .audio.events import RecorderEventPublisher
from .audio.levels import LevelAnalyzer
from .config import RecorderConfig, RecorderOptions
from .models import events
from .models.audio import AudioConfig
from .models.events import RecorderEvent
from .models.session import RecorderState
from .services.recording_session import RecordingSession

logger = logging.getLogger(__name__)


class RecorderApp:
    """Wires the capture device to a recording session and writes the WAV file."""

    def __init__(self, config: Optional[RecorderConfig], options: RecorderOptions,
                 output_path: str, console: Optional[Console] = None):
        self.config = config
        self.options = options
        self.output_path = Path(output_path)
        self.console = console or Console()
        self.finished = threading.Event()
        self.capture_error: Optional[Exception] = None

        self.sample_rate = int(self._get('audio.sample_rate', 48000))
        self.channels = int(self._get('audio.channels', 2))
        self.chunk_size = int(self._get('audio.chunk_size', DEFAULT_CHUNK_SIZE))
        self.level_mode = self._get('audio.level_mode', 'spectrum')

    def _get(self, key_path: str, default):
        return self.config.get(key_path, default) if self.config else default

    def init(self) -> None:
        logger.info("Initializing recorder...")
        logger.info(f"Audio settings: {self.sample_rate}Hz, {self.chunk_size} frames/chunk, "
                    f"{self.channels} channels")

        self.publisher = RecorderEventPublisher("recorder")
        self.publisher.add_listener(events.START, self._on_start)
        self.publisher.add_listener(events.DATA, self._on_data)
        self.publisher.add_listener(events.ERROR, self._on_error)
        self.publisher.add_listener(events.END, self._on_end)

        self.session = RecordingSession(
            options=self.options,
            publisher=self.publisher,
            level_analyzer=LevelAnalyzer(mode=self.level_mode),
        )
        self.audio_capture = AudioCapture(
            callback=self._on_frame,
            sample_rate=self.sample_rate,
            chunk_size=self.chunk_size,
            channels=self.channels,
            error_callback=self._on_capture_error,
        )
        self.session.initialize(AudioConfig(sample_rate=self.sample_rate, channels=self.channels))

    def _on_frame(self, samples, timestamp: float) -> None:
        self.session.on_frame(samples, now=timestamp)

    def _on_capture_error(self, error: Exception) -> None:
        self.capture_error = error
        self.finished.set()

    def _on_start(self, event: RecorderEvent) -> None:
        self.console.print("🔴 RECORDING (stops after "
                           f"{self.options.quiet_threshold_time:g}s of silence)", style="bold red")

    def _on_data(self, event: RecorderEvent) -> None:
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.output_path.write_bytes(event.payload)
        logger.info(f"WAV written: {self.output_path} ({len(event.payload)} bytes)")
        self.console.print(f"✅ Saved {self.output_path} ({len(event.payload)} bytes)", style="bold green")

    def _on_error(self, event: RecorderEvent) -> None:
        self.console.print(f"❌ Export failed: {event.payload}", style="bold red")
        self.finished.set()

    def _on_end(self, event: RecorderEvent) -> None:
        self.finished.set()

    def run(self, max_duration: Optional[float]) -> None:
        """Record until silence, `max_duration` or a capture failure.

        Raises:
            The exception that ended the capture thread, after cleanup
        """
        try:
            self.session.start(now=0.0)
            self.audio_capture.start_recording()
            if not self.finished.wait(timeout=max_duration):
                logger.info("Maximum duration reached, stopping")
                with self.session.lock:
                    if self.session.state is RecorderState.RECORDING:
                        self.session.stop()
                self.finished.wait(timeout=10.0)
        finally:
            self.cleanup()
        if self.capture_error is not None:
            raise self.capture_error

    def cleanup(self) -> None:
        if self.audio_capture.is_recording:
            self.audio_capture.stop_recording()
        self.session.close()


def setup_logging(config: Optional[RecorderConfig], level: str = "INFO") -> None:
    """Set up logging configuration from YAML config."""
    log_file_path = config.get('logging.file_path', 'logs/autorecorder.log') if config else 'logs/autorecorder.log'
    console_output = config.get('logging.console_output', True) if config else True

    log_dir = Path(log_file_path).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    handlers = []

    # File handler - always write to file
    file_handler = logging.FileHandler(log_file_path)
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    )
    file_handler.setFormatter(file_formatter)
    handlers.append(file_handler)

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.WARNING)  # Only show warnings and above on console
        console_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        console_handler.setFormatter(console_formatter)
        handlers.append(console_handler)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in handlers:
        root_logger.addHandler(handler)

    logger.info("=" * 50)
    logger.info("autorecorder starting up")
    logger.info(f"Log file: {log_file_path}")
    logger.info(f"Log level set to: {level}")
    logger.info("=" * 50)


def build_options(config: Optional[RecorderConfig], args: argparse.Namespace) -> RecorderOptions:
    """Recorder options from the config file, overridden by command line flags."""
    options = config.recorder_options() if config else RecorderOptions()
    if args.stereo:
        options.mono = False
    if args.sample_rate:
        options.sample_rate = args.sample_rate
    return options


def main() -> None:
    """Main entry point for autorecorder."""
    parser = argparse.ArgumentParser(
        description="autorecorder - record until silence and save a WAV file"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration YAML file"
    )

    parser.add_argument(
        "--output",
        type=str,
        help="Output WAV path (overrides config)"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (default: from config, else INFO)"
    )

    parser.add_argument(
        "--max-duration",
        type=float,
        default=None,
        help="Stop after this many seconds even without silence"
    )

    parser.add_argument(
        "--sample-rate",
        type=float,
        help="Export sample rate in Hz, must not exceed the capture rate"
    )

    parser.add_argument(
        "--stereo",
        action="store_true",
        help="Keep both input channels instead of recording mono"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="autorecorder v0.1.0"
    )

    args = parser.parse_args()
    console = Console()

    try:
        config = RecorderConfig(args.config) if args.config else None
        setup_logging(config, args.log_level or (config.get('logging.level', 'INFO') if config else 'INFO'))

        output_path = args.output or (config.get_output_path() if config else 'recording.wav')
        app = RecorderApp(config, build_options(config, args), output_path, console)
        app.init()
        app.run(args.max_duration)
    except KeyboardInterrupt:
        console.print("\n👋 Aborted")
        if 'app' in locals():
            app.session.abort()
            app.cleanup()
    except Exception as e:
        console.print(f"❌ Error: {e}", style="bold red")
        logging.error(f"Application error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()

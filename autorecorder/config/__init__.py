"""Simple YAML configuration loader for autorecorder."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional
import logging

import yaml

from ..exceptions import ConfigurationError
from ..audio.silence import DEFAULT_QUIET_THRESHOLD_SECONDS, DEFAULT_VOLUME_THRESHOLD_DB

logger = logging.getLogger(__name__)


@dataclass
class RecorderOptions:
    """Recorder behaviour options."""
    mono: bool = True
    quiet_threshold_time: float = DEFAULT_QUIET_THRESHOLD_SECONDS  # seconds
    volume_threshold: float = DEFAULT_VOLUME_THRESHOLD_DB  # dB
    sample_rate: Optional[float] = None  # export rate, None keeps the source rate
    offload_export: bool = False

    def __post_init__(self):
        if self.quiet_threshold_time < 0:
            raise ConfigurationError(f"quiet_threshold_time must be >= 0, got {self.quiet_threshold_time}")
        if self.sample_rate is not None and self.sample_rate <= 0:
            raise ConfigurationError(f"sample_rate must be positive, got {self.sample_rate}")


class RecorderConfig:
    """autorecorder configuration loader."""

    def __init__(self, config_path: str):
        """Initialize configuration loader.

        Args:
            config_path: Path to YAML config file
        """
        self.config_file = Path(config_path)

        if not self.config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_file}")

        logger.info(f"Loading configuration from: {self.config_file}")
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load and parse YAML configuration file."""
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}")

        if not config:
            raise ConfigurationError("Configuration file is empty")
        if not isinstance(config, dict):
            raise ConfigurationError("Configuration root must be a mapping")

        self._resolve_paths(config)
        logger.info("Configuration loaded successfully")
        return config

    def _resolve_paths(self, config: Dict[str, Any]) -> None:
        """Resolve relative paths in configuration relative to config file location."""
        config_dir = self.config_file.parent

        for section, key in (('output', 'file_path'), ('logging', 'file_path')):
            if isinstance(config.get(section), dict) and config[section].get(key):
                path = config[section][key]
                if not os.path.isabs(path):
                    config[section][key] = str(config_dir / path)

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation (e.g., 'recorder.mono').

        Args:
            key_path: Dot-separated key path
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self.config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set(self, key_path: str, value: Any) -> None:
        """Set configuration value using dot notation."""
        keys = key_path.split('.')
        config_dict = self.config

        for key in keys[:-1]:
            if key not in config_dict:
                config_dict[key] = {}
            config_dict = config_dict[key]

        config_dict[keys[-1]] = value
        logger.debug(f"Configuration key '{key_path}' set to: {value}")

    def recorder_options(self) -> RecorderOptions:
        """Build RecorderOptions from the `recorder` section."""
        sample_rate = self.get('recorder.sample_rate')
        try:
            return RecorderOptions(
                mono=bool(self.get('recorder.mono', True)),
                quiet_threshold_time=float(self.get('recorder.quiet_threshold_time',
                                                    DEFAULT_QUIET_THRESHOLD_SECONDS)),
                volume_threshold=float(self.get('recorder.volume_threshold', DEFAULT_VOLUME_THRESHOLD_DB)),
                sample_rate=float(sample_rate) if sample_rate is not None else None,
                offload_export=bool(self.get('recorder.offload_export', False)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid recorder options: {e}")

    def get_output_path(self) -> str:
        """Get output WAV path."""
        output = self.get('output.file_path', 'recording.wav')
        return str(Path(output).absolute())

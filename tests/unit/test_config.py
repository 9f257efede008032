"""Unit tests for RecorderConfig and RecorderOptions."""

from pathlib import Path

import pytest

from autorecorder.config import RecorderConfig, RecorderOptions
from autorecorder.exceptions import ConfigurationError


def write_config(directory: str, text: str) -> str:
    path = Path(directory) / "autorecorder.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


@pytest.mark.unit
class TestRecorderOptions:
    """Test cases for RecorderOptions defaults and validation."""

    def test_defaults(self):
        options = RecorderOptions()

        assert options.mono is True
        assert options.quiet_threshold_time == 5
        assert options.volume_threshold == -60
        assert options.sample_rate is None
        assert options.offload_export is False

    def test_rejects_negative_quiet_time(self):
        with pytest.raises(ConfigurationError):
            RecorderOptions(quiet_threshold_time=-1)

    def test_rejects_non_positive_sample_rate(self):
        with pytest.raises(ConfigurationError):
            RecorderOptions(sample_rate=0)


@pytest.mark.unit
class TestRecorderConfig:
    """Test cases for RecorderConfig class."""

    def test_missing_file(self, temp_data_dir):
        with pytest.raises(FileNotFoundError):
            RecorderConfig(str(Path(temp_data_dir) / "missing.yaml"))

    def test_empty_file(self, temp_data_dir):
        path = write_config(temp_data_dir, "")

        with pytest.raises(ConfigurationError):
            RecorderConfig(path)

    def test_invalid_yaml(self, temp_data_dir):
        path = write_config(temp_data_dir, "recorder: [unclosed")

        with pytest.raises(ConfigurationError):
            RecorderConfig(path)

    def test_recorder_options(self, temp_data_dir):
        path = write_config(temp_data_dir, """
recorder:
  mono: false
  quiet_threshold_time: 2.5
  volume_threshold: -45
  sample_rate: 16000
""")
        options = RecorderConfig(path).recorder_options()

        assert options.mono is False
        assert options.quiet_threshold_time == 2.5
        assert options.volume_threshold == -45
        assert options.sample_rate == 16000

    def test_recorder_options_defaults(self, temp_data_dir):
        path = write_config(temp_data_dir, "audio:\n  sample_rate: 44100\n")

        options = RecorderConfig(path).recorder_options()

        assert options == RecorderOptions()

    def test_explicit_zero_volume_threshold_kept(self, temp_data_dir):
        path = write_config(temp_data_dir, "recorder:\n  volume_threshold: 0\n")

        assert RecorderConfig(path).recorder_options().volume_threshold == 0

    def test_invalid_option_value(self, temp_data_dir):
        path = write_config(temp_data_dir, "recorder:\n  quiet_threshold_time: soon\n")

        with pytest.raises(ConfigurationError):
            RecorderConfig(path).recorder_options()

    def test_get_and_set_dot_notation(self, temp_data_dir):
        path = write_config(temp_data_dir, "audio:\n  channels: 2\n")
        config = RecorderConfig(path)

        assert config.get("audio.channels") == 2
        assert config.get("audio.missing", "fallback") == "fallback"

        config.set("recorder.sample_rate", 8000)
        assert config.get("recorder.sample_rate") == 8000

    def test_relative_paths_resolved(self, temp_data_dir):
        path = write_config(temp_data_dir, """
output:
  file_path: out/take1.wav
logging:
  file_path: logs/app.log
""")
        config = RecorderConfig(path)

        assert config.get("output.file_path") == str(Path(temp_data_dir) / "out/take1.wav")
        assert config.get("logging.file_path") == str(Path(temp_data_dir) / "logs/app.log")
        assert config.get_output_path() == str((Path(temp_data_dir) / "out/take1.wav").absolute())

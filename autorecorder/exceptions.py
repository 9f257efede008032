"""Custom exception definitions for the autorecorder package."""


class RecorderError(Exception):
    """Base exception class for autorecorder errors."""

    pass


class InvalidState(RecorderError):
    """Raised when an operation is attempted outside its allowed lifecycle state."""

    pass


class InvalidRate(RecorderError):
    """Raised when an export target rate exceeds the source rate."""

    pass


class LengthMismatch(RecorderError):
    """Raised when channels handed to interleave differ in length."""

    pass


class InvariantViolation(RecorderError):
    """Raised when channel buffers have diverged in total frame count."""

    pass


class UnsupportedFormat(RecorderError):
    """Raised when an export container other than WAV is requested."""

    pass


class ConfigurationError(RecorderError):
    """Raised when configuration is invalid or cannot be loaded."""

    pass


class AudioDeviceError(RecorderError):
    """Raised when the capture device cannot be opened or read."""

    pass

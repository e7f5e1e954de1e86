"""Exception types raised by the STFT engine."""

from __future__ import annotations


class STFTError(ValueError):
    """Base class for STFT engine errors."""


class InvalidConfiguration(STFTError):
    """Raised when options cannot describe a valid analysis setup."""


class ConfigurationMismatch(STFTError):
    """Raised when call-time data disagrees with the engine configuration."""


class ShapeMismatch(STFTError):
    """Raised when paired matrices do not share the expected shape."""

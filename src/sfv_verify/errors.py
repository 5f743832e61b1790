"""Error definitions for sfv_verify."""

from typing import Any, Dict


class SFVError(Exception):
    """Base exception for all sfv_verify errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context


class ConfigurationError(SFVError):
    """Configuration could not be loaded or validated."""
    pass


class ManifestError(SFVError):
    """Base exception for SFV manifest access errors."""
    pass


class ManifestReadError(ManifestError):
    """Manifest file could not be read or decoded as text."""
    pass


class ManifestWriteError(ManifestError):
    """Manifest file could not be written."""
    pass


class ChecksumError(SFVError):
    """File content could not be read for checksum computation."""
    pass

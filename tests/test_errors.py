"""Tests for error hierarchy."""

import pytest
from sfv_verify.errors import (
    SFVError, ConfigurationError, ManifestError, ManifestReadError,
    ManifestWriteError, ChecksumError
)


class TestErrors:
    """Test error types."""
    
    def test_base_error(self):
        """Test base SFVError functionality."""
        error = SFVError("Test error", path="/test/path")
        
        assert str(error) == "Test error"
        assert error.message == "Test error"
        assert error.context == {"path": "/test/path"}
    
    @pytest.mark.parametrize("error_class", [ManifestReadError, ManifestWriteError])
    def test_manifest_errors(self, error_class):
        """Test manifest errors share a base."""
        error = error_class("Manifest failed", path="/a.sfv", encoding="utf-8")
        
        assert isinstance(error, ManifestError)
        assert isinstance(error, SFVError)
        assert error.context == {"path": "/a.sfv", "encoding": "utf-8"}
    
    def test_checksum_and_config_errors(self):
        """Test remaining error types derive from SFVError."""
        assert issubclass(ChecksumError, SFVError)
        assert issubclass(ConfigurationError, SFVError)
        assert not issubclass(ChecksumError, ManifestError)
    
    def test_empty_context(self):
        """Test context defaults to empty dict."""
        assert ChecksumError("x").context == {}

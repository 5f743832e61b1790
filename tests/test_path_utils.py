"""Tests for path utilities."""

from pathlib import Path

import pytest
from sfv_verify.path_utils import (
    basename, default_manifest_path, extension, is_manifest_path, normalize_extension
)


class TestBasename:
    """Tests for basename and extension."""
    
    def test_basename(self):
        """Test last component is returned."""
        assert basename(Path("/tmp/dir/file1.txt")) == "file1.txt"
        assert basename("relative/name with spaces.bin") == "name with spaces.bin"
    
    def test_extension(self):
        """Test extension is lowercase with dot."""
        assert extension("a/CHECK.SFV") == ".sfv"
        assert extension("archive.tar.gz") == ".gz"
        assert extension("README") == ""


class TestManifestPaths:
    """Tests for manifest path helpers."""
    
    @pytest.mark.parametrize("raw,expected", [
        ("sfv", ".sfv"),
        (".SFV", ".sfv"),
        (" Sfv ", ".sfv"),
        ("", ""),
    ])
    def test_normalize_extension(self, raw, expected):
        """Test extension normalization."""
        assert normalize_extension(raw) == expected
    
    def test_is_manifest_path(self):
        """Test manifest detection by extension."""
        assert is_manifest_path("x.sfv")
        assert is_manifest_path("X.Sfv")
        assert not is_manifest_path("x.sfv.bak")
        assert not is_manifest_path("sfv")
        assert is_manifest_path("x.md5", manifest_extension="md5")
    
    def test_default_manifest_path(self):
        """Test manifest goes next to the first data file."""
        paths = [Path("/data/a/one.bin"), Path("/data/b/two.bin")]
        
        assert default_manifest_path(paths) == Path("/data/a/checksums.sfv")
        assert default_manifest_path(paths, "out.sfv") == Path("/data/a/out.sfv")
    
    def test_default_manifest_path_empty(self):
        """Test no suggestion without data files."""
        assert default_manifest_path([]) is None

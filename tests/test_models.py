"""Tests for verification data model."""

from pathlib import Path

import pytest
from sfv_verify.models import (
    VerificationResult, VerificationStatus, VerificationSummary, classify
)


def make_result(computed, expected=None, name="file.bin"):
    return VerificationResult(
        path=Path("/data") / name,
        filename=name,
        computed_crc32=computed,
        expected_crc32=expected,
    )


class TestClassify:
    """Tests for classify function."""
    
    @pytest.mark.parametrize("crc", [0, 1, 0xAAAAAAAA, 0xFFFFFFFF])
    def test_equal_is_match(self, crc):
        """Test a checksum always matches itself."""
        assert classify(crc, crc) is VerificationStatus.MATCH
    
    def test_different_is_mismatch(self):
        """Test differing checksums mismatch."""
        assert classify(0xBBBBBBBB, 0xCCCCCCCC) is VerificationStatus.MISMATCH
    
    def test_absent_is_not_checked(self):
        """Test missing expected value is not checked."""
        assert classify(0x12345678, None) is VerificationStatus.NOT_CHECKED
    
    def test_zero_expected_is_checked(self):
        """Test expected value 0 is a real value, not absence."""
        assert classify(0, 0) is VerificationStatus.MATCH
        assert classify(1, 0) is VerificationStatus.MISMATCH


class TestVerificationResult:
    """Tests for VerificationResult."""
    
    def test_status_is_derived(self):
        """Test status follows computed and expected values."""
        assert make_result(0xAAAAAAAA, 0xAAAAAAAA).status is VerificationStatus.MATCH
        assert make_result(0xAAAAAAAA, 0xCCCCCCCC).status is VerificationStatus.MISMATCH
        assert make_result(0xAAAAAAAA).status is VerificationStatus.NOT_CHECKED
    
    def test_hex_properties(self):
        """Test hex renderings are uppercase and padded."""
        result = make_result(0xABCDEF12, 0x1F)
        
        assert result.computed_hex == "ABCDEF12"
        assert result.expected_hex == "0000001F"
        assert make_result(1).expected_hex is None
    
    def test_immutable(self):
        """Test results cannot be modified after creation."""
        result = make_result(1, 1)
        
        with pytest.raises(AttributeError):
            result.expected_crc32 = 2
    
    def test_status_labels(self):
        """Test status values are display labels."""
        assert VerificationStatus.NOT_CHECKED.value == "Not Checked"
        assert VerificationStatus.MATCH.value == "Match"
        assert VerificationStatus.MISMATCH.value == "Mismatch"


class TestVerificationSummary:
    """Tests for VerificationSummary."""
    
    def test_counts(self):
        """Test counting each status."""
        results = [
            make_result(1, 1),
            make_result(2, 3),
            make_result(4),
            make_result(5, 5),
        ]
        
        summary = VerificationSummary.from_results(results)
        
        assert summary.total == 4
        assert summary.matched == 2
        assert summary.mismatched == 1
        assert summary.not_checked == 1
        assert not summary.all_matched
    
    def test_empty(self):
        """Test summary of no results."""
        summary = VerificationSummary.from_results([])
        
        assert summary.total == 0
        assert summary.all_matched

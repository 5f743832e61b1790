"""Data model for verification results."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional

from .checksums import format_crc32


class VerificationStatus(Enum):
    """Outcome of comparing a computed checksum with the expected one."""
    NOT_CHECKED = "Not Checked"
    MATCH = "Match"
    MISMATCH = "Mismatch"


def classify(computed: int, expected: Optional[int]) -> VerificationStatus:
    """Classify a computed CRC32 against an optional expected value."""
    if expected is None:
        return VerificationStatus.NOT_CHECKED
    if computed == expected:
        return VerificationStatus.MATCH
    return VerificationStatus.MISMATCH


@dataclass(frozen=True)
class ManifestEntry:
    """A single `filename crc` line of an SFV manifest."""
    filename: str
    expected_crc32: int


@dataclass(frozen=True)
class VerificationResult:
    """Checksum result for one input file.
    
    Attributes:
        path: Path the checksum was computed from
        filename: Basename of path, used as the manifest lookup key
        computed_crc32: CRC32 of the file content
        expected_crc32: Value from the manifest, None when not listed
    """
    path: Path
    filename: str
    computed_crc32: int
    expected_crc32: Optional[int] = None

    @property
    def status(self) -> VerificationStatus:
        return classify(self.computed_crc32, self.expected_crc32)

    @property
    def computed_hex(self) -> str:
        return format_crc32(self.computed_crc32)

    @property
    def expected_hex(self) -> Optional[str]:
        if self.expected_crc32 is None:
            return None
        return format_crc32(self.expected_crc32)


@dataclass(frozen=True)
class VerificationSummary:
    """Counts over a list of results."""
    total: int
    matched: int
    mismatched: int
    not_checked: int

    @property
    def all_matched(self) -> bool:
        """True when no result mismatched."""
        return self.mismatched == 0

    @classmethod
    def from_results(cls, results: Iterable[VerificationResult]) -> "VerificationSummary":
        total = matched = mismatched = not_checked = 0
        for result in results:
            total += 1
            status = result.status
            if status is VerificationStatus.MATCH:
                matched += 1
            elif status is VerificationStatus.MISMATCH:
                mismatched += 1
            else:
                not_checked += 1
        return cls(
            total=total,
            matched=matched,
            mismatched=mismatched,
            not_checked=not_checked,
        )

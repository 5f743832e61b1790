"""CRC32 file verification against SFV manifests."""

from .checksums import compute_crc32, compute_crc32_bytes, format_crc32
from .errors import (
    SFVError, ConfigurationError, ManifestError, ManifestReadError,
    ManifestWriteError, ChecksumError
)
from .models import (
    ManifestEntry, VerificationResult, VerificationStatus, VerificationSummary, classify
)
from .manifest import (
    classify_line, parse_manifest, load_manifest, serialize_manifest, save_manifest
)
from .verifier import (
    VerificationRun, verify_file, verify_batch, verify_batch_parallel,
    split_manifest_paths, verify_paths, summarize
)
from .background import BackgroundVerification

__version__ = "0.1.0"

__all__ = [
    'compute_crc32',
    'compute_crc32_bytes',
    'format_crc32',
    'SFVError',
    'ConfigurationError',
    'ManifestError',
    'ManifestReadError',
    'ManifestWriteError',
    'ChecksumError',
    'ManifestEntry',
    'VerificationResult',
    'VerificationStatus',
    'VerificationSummary',
    'classify',
    'classify_line',
    'parse_manifest',
    'load_manifest',
    'serialize_manifest',
    'save_manifest',
    'VerificationRun',
    'verify_file',
    'verify_batch',
    'verify_batch_parallel',
    'split_manifest_paths',
    'verify_paths',
    'summarize',
    'BackgroundVerification',
]

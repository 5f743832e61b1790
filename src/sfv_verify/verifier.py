"""Checksum verification of files against SFV manifests.

Computes the CRC32 of each input file and joins it with the expected value
from a manifest, keyed by file basename. Unreadable files are dropped from
the results; they never abort a batch.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .checksums import CRC32_CHUNK_SIZE, compute_crc32
from .config import VerifierConfig
from .errors import ChecksumError, ManifestReadError
from .manifest import load_manifest
from .models import VerificationResult, VerificationSummary
from .path_utils import DEFAULT_MANIFEST_EXTENSION, basename, is_manifest_path
from .progress import ProgressTracker

logger = logging.getLogger(__name__)

# progress_callback(current, total, path): current is 1-based
ProgressCallback = Callable[[int, int, Path], None]


@dataclass
class VerificationRun:
    """Outcome of verifying a mixed list of data files and manifests.

    Attributes:
        results: One result per readable data file, in input order
        manifest_path: Manifest used for expected values, if any
        manifest_error: Why the manifest could not be used, if it failed
        output_dir: Directory of the first data file (suggested save location)
    """
    results: List[VerificationResult] = field(default_factory=list)
    manifest_path: Optional[Path] = None
    manifest_error: Optional[ManifestReadError] = None
    output_dir: Optional[Path] = None

    @property
    def summary(self) -> VerificationSummary:
        return summarize(self.results)


def verify_file(
    path: Path,
    manifest: Optional[Mapping[str, int]] = None,
    chunk_size: int = CRC32_CHUNK_SIZE,
) -> VerificationResult:
    """Compute the checksum of one file and attach its expected value.

    Args:
        path: File to checksum
        manifest: Optional filename -> expected CRC32 mapping
        chunk_size: Read size in bytes

    Returns:
        VerificationResult for the file

    Raises:
        ChecksumError: If the file cannot be read
    """
    path = Path(path)
    try:
        computed = compute_crc32(path, chunk_size=chunk_size)
    except (OSError, ValueError) as e:
        raise ChecksumError(f"Cannot read {path}: {e}", path=str(path)) from e

    filename = basename(path)
    expected = manifest.get(filename) if manifest is not None else None
    return VerificationResult(
        path=path,
        filename=filename,
        computed_crc32=computed,
        expected_crc32=expected,
    )


def _verify_or_skip(
    path: Path,
    manifest: Optional[Mapping[str, int]],
    chunk_size: int,
) -> Optional[VerificationResult]:
    try:
        return verify_file(path, manifest, chunk_size=chunk_size)
    except ChecksumError as e:
        logger.warning(f"Skipping unreadable file: {{'path': {str(path)!r}, 'error': {e.message!r}}}")
        return None


def verify_batch(
    paths: Sequence[Path],
    manifest: Optional[Mapping[str, int]] = None,
    progress_callback: Optional[ProgressCallback] = None,
    chunk_size: int = CRC32_CHUNK_SIZE,
    cancel_event: Optional[threading.Event] = None,
    progress_log_interval: int = 100,
) -> List[VerificationResult]:
    """Verify files one at a time.

    Results follow input order. Files that cannot be read are omitted.
    Repeated paths are processed independently.

    Args:
        paths: Data files to checksum
        manifest: Optional filename -> expected CRC32 mapping
        progress_callback: Called after each input path as (current, total, path)
        chunk_size: Read size in bytes
        cancel_event: When set, stop before the next file
        progress_log_interval: Log progress every N files

    Returns:
        List of VerificationResult
    """
    total = len(paths)
    tracker = ProgressTracker(total_files=total, log_interval=progress_log_interval)
    results: List[VerificationResult] = []

    for index, path in enumerate(paths):
        if cancel_event is not None and cancel_event.is_set():
            logger.info(f"Verification cancelled: {{'processed': {index}, 'total': {total}}}")
            break

        result = _verify_or_skip(Path(path), manifest, chunk_size)
        if result is not None:
            results.append(result)

        tracker.increment()
        if progress_callback:
            progress_callback(index + 1, total, Path(path))

    tracker.log_final_summary()
    return results


def verify_batch_parallel(
    paths: Sequence[Path],
    manifest: Optional[Mapping[str, int]] = None,
    max_workers: Optional[int] = None,
    progress_callback: Optional[ProgressCallback] = None,
    chunk_size: int = CRC32_CHUNK_SIZE,
    cancel_event: Optional[threading.Event] = None,
    progress_log_interval: int = 100,
) -> List[VerificationResult]:
    """Verify files on a thread pool.

    Same contract as verify_batch: results are assembled in input order,
    not completion order, and unreadable files are omitted.

    Args:
        paths: Data files to checksum
        manifest: Optional filename -> expected CRC32 mapping
        max_workers: Thread count (ThreadPoolExecutor default when None)
        progress_callback: Called as (current, total, path) in input order
        chunk_size: Read size in bytes
        cancel_event: When set, files not yet started are skipped
        progress_log_interval: Log progress every N files

    Returns:
        List of VerificationResult
    """
    total = len(paths)
    tracker = ProgressTracker(total_files=total, log_interval=progress_log_interval)

    def task(path: Path) -> Optional[VerificationResult]:
        if cancel_event is not None and cancel_event.is_set():
            return None
        return _verify_or_skip(path, manifest, chunk_size)

    results: List[VerificationResult] = []
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="crc32") as executor:
        futures = [executor.submit(task, Path(path)) for path in paths]
        for index, (path, future) in enumerate(zip(paths, futures)):
            result = future.result()
            if result is not None:
                results.append(result)

            tracker.increment()
            if progress_callback:
                progress_callback(index + 1, total, Path(path))

    tracker.log_final_summary()
    return results


def split_manifest_paths(
    paths: Sequence[Path],
    manifest_extension: str = DEFAULT_MANIFEST_EXTENSION,
) -> Tuple[Optional[Path], List[Path]]:
    """Separate manifest paths from data paths.

    The first path with the manifest extension is the manifest. Every path
    with that extension is excluded from the data paths.

    Args:
        paths: Mixed input paths
        manifest_extension: Manifest file extension (case-insensitive)

    Returns:
        Tuple of (manifest path or None, data paths in input order)
    """
    manifest_path: Optional[Path] = None
    data_paths: List[Path] = []

    for path in paths:
        path = Path(path)
        if is_manifest_path(path, manifest_extension):
            if manifest_path is None:
                manifest_path = path
            else:
                logger.warning(f"Ignoring additional manifest: {{'path': {str(path)!r}}}")
        else:
            data_paths.append(path)

    return manifest_path, data_paths


def verify_paths(
    paths: Sequence[Path],
    config: Optional[VerifierConfig] = None,
    progress_callback: Optional[ProgressCallback] = None,
    cancel_event: Optional[threading.Event] = None,
) -> VerificationRun:
    """Verify a mixed list of data files and an optional manifest.

    A manifest that cannot be read is logged and recorded on the run;
    verification continues without expected values.

    Args:
        paths: Data files, optionally including one manifest
        config: Verifier settings (defaults when None)
        progress_callback: Called as (current, total, path)
        cancel_event: When set, stop before the next file

    Returns:
        VerificationRun with results in input order
    """
    config = config or VerifierConfig()
    manifest_path, data_paths = split_manifest_paths(paths, config.manifest_extension)
    run = VerificationRun(
        manifest_path=manifest_path,
        output_dir=data_paths[0].parent if data_paths else None,
    )

    manifest: Optional[Dict[str, int]] = None
    if manifest_path is not None:
        try:
            manifest = load_manifest(manifest_path, encoding=config.encoding)
        except ManifestReadError as e:
            logger.warning(f"Continuing without expected checksums: {e.message}")
            run.manifest_error = e

    logger.info(
        f"Verifying files: {{'files': {len(data_paths)}, "
        f"'manifest': {(str(manifest_path) if manifest_path else None)!r}, "
        f"'workers': {config.max_workers}}}"
    )

    if config.max_workers > 1:
        run.results = verify_batch_parallel(
            data_paths,
            manifest,
            max_workers=config.max_workers,
            progress_callback=progress_callback,
            chunk_size=config.chunk_size,
            cancel_event=cancel_event,
            progress_log_interval=config.progress_log_interval,
        )
    else:
        run.results = verify_batch(
            data_paths,
            manifest,
            progress_callback=progress_callback,
            chunk_size=config.chunk_size,
            cancel_event=cancel_event,
            progress_log_interval=config.progress_log_interval,
        )

    summary = run.summary
    logger.info(
        f"Verification complete: {{'total': {summary.total}, 'matched': {summary.matched}, "
        f"'mismatched': {summary.mismatched}, 'not_checked': {summary.not_checked}}}"
    )
    return run


def summarize(results: Sequence[VerificationResult]) -> VerificationSummary:
    """Count matched, mismatched and unchecked results."""
    return VerificationSummary.from_results(results)

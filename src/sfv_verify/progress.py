"""Progress tracking for checksum batches.

Tracks and reports hashing progress with ETA calculation.
"""

import logging
import time

logger = logging.getLogger(__name__)


class ProgressTracker:
    """Tracks batch progress and calculates ETA.

    Features:
    - Files processed count
    - Processing rate (files/sec)
    - Estimated time remaining
    - Periodic logging (every N files)
    """

    def __init__(self, total_files: int, log_interval: int = 100):
        """Initialize progress tracker.

        Args:
            total_files: Total number of files to process
            log_interval: Log progress every N files
        """
        self.total_files = total_files
        self.log_interval = log_interval

        self.files_processed = 0
        self.start_time = time.time()

    def increment(self, count: int = 1) -> None:
        """Increment files processed counter."""
        self.files_processed += count

        if self.files_processed % self.log_interval == 0:
            self._log_progress()

    def get_progress(self) -> dict:
        """Get current progress statistics.

        Returns:
            Dict with progress metrics
        """
        elapsed_time = time.time() - self.start_time

        if elapsed_time > 0:
            rate = self.files_processed / elapsed_time
        else:
            rate = 0.0

        if self.total_files > 0:
            percentage = (self.files_processed / self.total_files) * 100
        else:
            percentage = 0.0

        remaining_files = max(self.total_files - self.files_processed, 0)
        if rate > 0 and remaining_files > 0:
            eta_seconds = remaining_files / rate
        else:
            eta_seconds = 0.0

        return {
            "total_files": self.total_files,
            "files_processed": self.files_processed,
            "remaining_files": remaining_files,
            "percentage": percentage,
            "elapsed_seconds": elapsed_time,
            "rate_files_per_sec": rate,
            "eta_seconds": eta_seconds,
        }

    def _log_progress(self) -> None:
        progress = self.get_progress()

        logger.info(
            f"Progress: {self.files_processed}/{self.total_files} "
            f"({progress['percentage']:.1f}%) - "
            f"{progress['rate_files_per_sec']:.1f} files/sec - "
            f"ETA: {self._format_time(progress['eta_seconds'])}"
        )

    def _format_time(self, seconds: float) -> str:
        """Format seconds as human-readable time (e.g., "2h 15m 30s")."""
        if seconds <= 0:
            return "0s"

        hours = int(seconds // 3600)
        minutes = int((seconds % 3600) // 60)
        secs = int(seconds % 60)

        parts = []
        if hours > 0:
            parts.append(f"{hours}h")
        if minutes > 0:
            parts.append(f"{minutes}m")
        if secs > 0 or not parts:
            parts.append(f"{secs}s")

        return " ".join(parts)

    def log_final_summary(self) -> None:
        """Log final progress summary."""
        elapsed_time = time.time() - self.start_time

        if elapsed_time > 0:
            rate = self.files_processed / elapsed_time
        else:
            rate = 0.0

        logger.info(
            f"Checksums complete: {self.files_processed}/{self.total_files} files processed "
            f"in {self._format_time(elapsed_time)} "
            f"({rate:.1f} files/sec average)"
        )

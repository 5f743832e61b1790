"""Background verification with progress reporting.

Runs verify_paths on a worker thread so an interactive caller stays
responsive. Progress is reported as a fraction after every input file.
"""

import logging
import threading
from pathlib import Path
from typing import Callable, Optional, Sequence

from .config import VerifierConfig
from .verifier import VerificationRun, verify_paths

logger = logging.getLogger(__name__)


class BackgroundVerification:
    """Verify files on a daemon thread.

    Callbacks run on the worker thread; callers that own a UI loop must
    marshal them onto their own thread.
    """

    def __init__(
        self,
        paths: Sequence[Path],
        config: Optional[VerifierConfig] = None,
        progress_callback: Optional[Callable[[float], None]] = None,
        done_callback: Optional[Callable[[VerificationRun], None]] = None,
    ):
        """Initialize background verification.

        Args:
            paths: Data files, optionally including one manifest
            config: Verifier settings (defaults when None)
            progress_callback: Receives completed fraction in [0, 1]
            done_callback: Receives the VerificationRun on success
        """
        self.paths = [Path(p) for p in paths]
        self.config = config or VerifierConfig()
        self.progress_callback = progress_callback
        self.done_callback = done_callback

        self._cancel_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._run: Optional[VerificationRun] = None
        self._error: Optional[BaseException] = None

    def start(self) -> "BackgroundVerification":
        """Start the worker thread. Returns self for chaining."""
        if self._thread is not None:
            raise RuntimeError("Background verification already started")

        self._thread = threading.Thread(
            target=self._worker,
            name="SFVVerifier",
            daemon=True,
        )
        self._thread.start()
        logger.debug(f"Started background verification: {{'paths': {len(self.paths)}}}")
        return self

    def _on_progress(self, current: int, total: int, path: Path) -> None:
        if self.progress_callback:
            self.progress_callback(current / max(total, 1))

    def _worker(self) -> None:
        try:
            self._run = verify_paths(
                self.paths,
                config=self.config,
                progress_callback=self._on_progress,
                cancel_event=self._cancel_event,
            )
        except Exception as e:
            logger.exception(f"Background verification failed: {e}")
            self._error = e
            return

        if self.done_callback:
            self.done_callback(self._run)

    def cancel(self) -> None:
        """Stop before the next file; results computed so far are kept."""
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def wait(self, timeout: Optional[float] = None) -> VerificationRun:
        """Block until the worker finishes and return its run.

        Raises:
            RuntimeError: If not started
            TimeoutError: If the worker is still running after timeout
            Exception: Whatever the worker raised
        """
        if self._thread is None:
            raise RuntimeError("Background verification not started")

        self._thread.join(timeout)
        if self._thread.is_alive():
            raise TimeoutError(f"Background verification still running after {timeout}s")

        if self._error is not None:
            raise self._error

        return self._run

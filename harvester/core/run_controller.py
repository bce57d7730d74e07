"""
Process-wide run state: "a run is in progress" and "a stop was requested".

One instance is created at start-up and shared by the orchestrator, the
scheduler callback and the control service. Flags change only through the
methods below; the lock guards nothing but the flag flip itself.
"""
import threading

from loguru import logger

from harvester.interfaces import RunNotInProgressError


class RunController:
    """Atomic start/stop bookkeeping for crawl runs."""

    def __init__(self):
        self._lock = threading.Lock()
        self._in_progress = False
        self._stop_requested = False

    @property
    def in_progress(self) -> bool:
        with self._lock:
            return self._in_progress

    @property
    def stop_requested(self) -> bool:
        with self._lock:
            return self._stop_requested

    def try_start(self) -> bool:
        """Compare-and-set ``in_progress`` from False to True.

        Returns:
            True if this caller claimed the run, False if one is already active
        """
        with self._lock:
            if self._in_progress:
                return False
            self._in_progress = True
            return True

    def stop(self) -> None:
        """Request a cooperative stop of the active run.

        Raises:
            RunNotInProgressError: When no run is active
        """
        with self._lock:
            if not self._in_progress:
                raise RunNotInProgressError()
            self._stop_requested = True
        logger.info("Stop requested for the active crawl run")

    def finish_run(self) -> None:
        """Reset both flags once a run has ended, however it ended."""
        with self._lock:
            self._in_progress = False
            self._stop_requested = False

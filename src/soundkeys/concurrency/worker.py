"""Worker thread for backend command execution."""

import queue
import threading
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Optional
from soundkeys.utils.log import get_logger

logger = get_logger(__name__)


@dataclass
class Command:
    """Command to execute in worker thread."""

    id: str
    func: Callable[[], Any]
    result_event: threading.Event
    result: Optional[Any] = None
    error: Optional[Exception] = None

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the command has run. False on timeout."""
        return self.result_event.wait(timeout=timeout)

    @property
    def done(self) -> bool:
        return self.result_event.is_set()


class BackendWorker:
    """
    Worker thread that runs backend commands off the dispatcher thread.

    The mixer backend decodes sound files here so that opening a handle
    returns immediately and readiness arrives later.
    """

    def __init__(self, name: str = "soundkeys-worker"):
        self._name = name
        self._queue: queue.Queue[Optional[Command]] = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._initialized = False

    def start(self) -> None:
        """Start the worker thread."""
        if self._thread is not None and self._thread.is_alive():
            return

        self._stop_event.clear()
        # Daemon thread so a hung decode never blocks interpreter exit
        self._thread = threading.Thread(target=self._worker_loop, name=self._name, daemon=True)
        self._thread.start()
        self._initialized = True
        logger.info("Backend worker thread started")

    def stop(self) -> None:
        """Stop the worker thread (blocks until done)."""
        if self._thread is None or not self._thread.is_alive():
            self._initialized = False
            return

        logger.info("Stopping backend worker thread...")
        self._initialized = False
        self._stop_event.set()
        self._queue.put(None)

        self._thread.join(timeout=5.0)
        if self._thread.is_alive():
            logger.warning("Worker thread did not stop gracefully within timeout")
        else:
            logger.info("Backend worker thread stopped")
        self._thread = None

    def submit(self, func: Callable[[], Any]) -> Command:
        """
        Queue a function for the worker thread without waiting.

        Args:
            func: Function to execute (no arguments).

        Returns:
            The queued Command; wait on it for the result.

        Raises:
            RuntimeError: If worker thread is not running.
        """
        if not self._initialized:
            raise RuntimeError("Worker thread not initialized")

        cmd = Command(
            id=str(uuid.uuid4()),
            func=func,
            result_event=threading.Event(),
        )
        self._queue.put(cmd)
        return cmd

    def _worker_loop(self) -> None:
        """Main worker loop."""
        logger.debug("Worker thread started")
        while not self._stop_event.is_set():
            try:
                # Use timeout to periodically check stop event
                cmd = self._queue.get(timeout=0.1)
            except queue.Empty:
                continue

            if cmd is None:  # Sentinel
                logger.debug("Received sentinel, exiting worker loop")
                break

            try:
                cmd.result = cmd.func()
            except Exception as e:
                logger.exception("Error in worker thread command")
                cmd.error = e
            finally:
                cmd.result_event.set()
                self._queue.task_done()
        logger.debug("Worker thread exiting")

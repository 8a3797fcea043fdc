"""Service for soundboard startup and shutdown."""

import time
from typing import Callable, List, Optional
from soundkeys.core.bindings import KeyBindingTable
from soundkeys.core.catalog import GroupCatalog
from soundkeys.core.exceptions import SoundboardError
from soundkeys.core.interfaces import IPlayerBackend, ISoundHandle
from soundkeys.core.models import SoundboardConfig
from soundkeys.services.playback import PlaybackService
from soundkeys.utils.log import get_logger
from soundkeys.utils.scan import list_audio_files

logger = get_logger(__name__)


class LifecycleService:
    """
    Service for soundboard lifecycle.

    Responsibilities:
    - Scan, catalog and bind sounds
    - Wait (bounded) for every handle to become ready
    - Release every handle and the backend on shutdown
    """

    def __init__(
        self,
        backend: IPlayerBackend,
        config: SoundboardConfig,
        playback: PlaybackService,
        output: Callable[[str], None] = print,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize lifecycle service.

        Args:
            backend: Player backend implementation.
            config: Soundboard configuration.
            playback: Playback service used for the stop-all calls.
            output: Console output for the binding table and reports.
            clock: Time source for readiness waits.
            sleep: Sleep function for readiness waits.
        """
        self._backend = backend
        self._config = config
        self._playback = playback
        self._output = output
        self._clock = clock
        self._sleep = sleep
        self._catalog: Optional[GroupCatalog] = None
        self._bindings: Optional[KeyBindingTable] = None
        self._started = False

    def start(self) -> None:
        """
        Run the startup sequence.

        Raises:
            KeyBindingError: If the configured key set is invalid.
        """
        if self._started:
            logger.warning("Soundboard already started")
            return

        # Fatal if misconfigured, so build it before touching the device
        bindings = KeyBindingTable(
            self._config.key_set, reserved=self._config.command_keys.as_tuple()
        )

        self._backend.initialize()
        self._started = True

        paths = list_audio_files(self._config.directory)
        catalog = GroupCatalog(self._backend, bindings).build(paths)
        if len(catalog) == 0:
            logger.warning(f"No sound groups found in {self._config.directory}")
        for name in catalog.dropped:
            self._output(f"Not bound (no key left): {name}")

        self._catalog = catalog
        self._bindings = bindings

        not_ready = self.wait_ready(catalog.handles())
        for handle in not_ready:
            logger.warning(f"Sound not ready after {self._config.ready_timeout}s: {handle.path}")

        self._playback.stop_all(catalog)
        self._output(bindings.format_table())
        logger.info("Soundboard started")

    def wait_ready(self, handles: List[ISoundHandle]) -> List[ISoundHandle]:
        """
        Wait up to `ready_timeout` seconds per handle for readiness.

        Returns:
            Handles that did not become ready.
        """
        not_ready = []
        for handle in handles:
            deadline = self._clock() + self._config.ready_timeout
            while not handle.is_ready():
                if self._clock() >= deadline:
                    not_ready.append(handle)
                    break
                self._sleep(0.01)
        return not_ready

    def shutdown(self) -> None:
        """
        Stop and release everything.

        This method is idempotent and safe to call multiple times.
        """
        if not self._started:
            logger.debug("Soundboard not started, skipping shutdown")
            return

        logger.info("Shutting down soundboard...")
        if self._catalog is not None:
            self._playback.stop_all(self._catalog)
            for handle in self._catalog.handles():
                try:
                    handle.release()
                except Exception as e:
                    logger.warning(f"Error releasing {handle.path}: {e}")

        try:
            self._backend.shutdown()
        except Exception as e:
            logger.warning(f"Error during backend shutdown: {e}")

        self._started = False
        self._output("Soundboard shut down.")

    @property
    def is_started(self) -> bool:
        return self._started

    @property
    def catalog(self) -> GroupCatalog:
        """
        Raises:
            SoundboardError: If the soundboard is not started.
        """
        if self._catalog is None:
            raise SoundboardError("Soundboard must be started before accessing the catalog")
        return self._catalog

    @property
    def bindings(self) -> KeyBindingTable:
        """
        Raises:
            SoundboardError: If the soundboard is not started.
        """
        if self._bindings is None:
            raise SoundboardError("Soundboard must be started before accessing bindings")
        return self._bindings

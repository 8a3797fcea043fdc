"""Soundboard - main public API."""

from typing import Callable, Optional
from soundkeys.core.bindings import KeyBindingTable
from soundkeys.core.catalog import GroupCatalog
from soundkeys.core.exceptions import SoundboardError
from soundkeys.core.interfaces import IKeySource, IPlayerBackend
from soundkeys.core.models import GlobalState, SoundboardConfig
from soundkeys.services.dispatcher import EventDispatcher
from soundkeys.services.lifecycle import LifecycleService
from soundkeys.services.playback import PlaybackService
from soundkeys.utils.log import get_logger

logger = get_logger(__name__)


class Soundboard:
    """
    Main soundboard facade.

    Wires the backend, lifecycle, playback and dispatcher services together.
    """

    def __init__(
        self,
        config: Optional[SoundboardConfig] = None,
        backend: Optional[IPlayerBackend] = None,
        output: Callable[[str], None] = print,
    ):
        """
        Initialize Soundboard.

        Args:
            config: Soundboard configuration.
            backend: Optional backend implementation (default: SoundDeviceBackend).
            output: Console output for reports and the binding table.
        """
        self._config = config or SoundboardConfig()
        self._backend = backend
        if self._backend is None:
            # Lazy import to avoid loading PortAudio on import
            from soundkeys.backends.sounddevice_backend import SoundDeviceBackend
            self._backend = SoundDeviceBackend(self._config)

        self._output = output
        self.state = GlobalState()
        self._playback_service = PlaybackService(self._config.default_mode)
        self._lifecycle_service = LifecycleService(
            self._backend, self._config, self._playback_service, output=output
        )

    def start(self) -> None:
        """Scan the directory, bind keys and prepare every sound."""
        self._lifecycle_service.start()

    def dispatcher(self, key_source: IKeySource, **kwargs) -> EventDispatcher:
        """
        Build an event dispatcher over the started soundboard.

        Raises:
            SoundboardError: If the soundboard is not started.
        """
        if not self._lifecycle_service.is_started:
            raise SoundboardError("Soundboard must be started before dispatching keys")

        kwargs.setdefault("tick_interval", self._config.tick_interval)
        kwargs.setdefault("output", self._output)
        return EventDispatcher(
            self._lifecycle_service.bindings,
            self._playback_service,
            key_source,
            state=self.state,
            command_keys=self._config.command_keys,
            **kwargs,
        )

    def run(self, key_source: IKeySource, **kwargs) -> None:
        """Run the dispatcher loop until the quit key."""
        self.dispatcher(key_source, **kwargs).run()

    def shutdown(self) -> None:
        """Stop every sound and release all resources."""
        self._lifecycle_service.shutdown()

    @property
    def catalog(self) -> GroupCatalog:
        return self._lifecycle_service.catalog

    @property
    def bindings(self) -> KeyBindingTable:
        return self._lifecycle_service.bindings

    @property
    def playback(self) -> PlaybackService:
        return self._playback_service

    def __enter__(self):
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.shutdown()

"""Event loop mapping key presses to soundboard actions."""

import time
from typing import Callable, Iterable, Optional
from soundkeys.core.bindings import KeyBindingTable, normalize_key
from soundkeys.core.catalog import Group
from soundkeys.core.interfaces import IKeySource
from soundkeys.core.models import CommandKeys, GlobalState
from soundkeys.services.playback import PlaybackService
from soundkeys.utils.log import get_logger
from soundkeys.utils.validate import validate_interval

logger = get_logger(__name__)


def _on_off(flag: bool) -> str:
    return "ON" if flag else "OFF"


class EventDispatcher:
    """
    Single-threaded poll loop.

    Each iteration polls the key source once, dispatches the key, sleeps one
    tick and then lets looping groups restart ended sounds. Command keys take
    precedence over bound keys: quit, stop-all, show-table, toggle-loop,
    toggle-stack.
    """

    def __init__(
        self,
        bindings: KeyBindingTable,
        playback: PlaybackService,
        key_source: IKeySource,
        state: Optional[GlobalState] = None,
        command_keys: Optional[CommandKeys] = None,
        tick_interval: float = 0.1,
        output: Callable[[str], None] = print,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._bindings = bindings
        self._playback = playback
        self._key_source = key_source
        self.state = state or GlobalState()
        self._commands = command_keys or CommandKeys()
        self._tick_interval = validate_interval(tick_interval)
        self._output = output
        self._sleep = sleep
        self._running = False

    @property
    def groups(self) -> Iterable[Group]:
        return self._bindings.groups()

    @property
    def running(self) -> bool:
        return self._running

    def run(self) -> None:
        """Loop until the quit key is pressed, then stop all sounds."""
        self._running = True
        logger.info("Dispatcher loop started")
        try:
            while self.run_once():
                pass
        except KeyboardInterrupt:
            logger.info("Interrupted")
            self._playback.stop_all(self.groups)
        finally:
            self._running = False
            logger.info("Dispatcher loop finished")

    def run_once(self) -> bool:
        """
        Run one loop iteration.

        Returns:
            False once the quit key has been handled.
        """
        key = self._key_source.poll()
        if key is not None and not self.handle_key(key):
            return False

        self._sleep(self._tick_interval)
        self._playback.loop_tick(self.groups)
        return True

    def handle_key(self, key: str) -> bool:
        """
        Dispatch one key press.

        Returns:
            False if the key was the quit key.
        """
        key = normalize_key(key)
        commands = self._commands

        if key == commands.quit:
            self._playback.stop_all(self.groups)
            self._output("Quitting.")
            return False

        if key == commands.stop_all:
            self._playback.stop_all(self.groups)
            self._output("All sounds stopped.")
        elif key == commands.show_table:
            self._output(self._bindings.format_table())
        elif key == commands.toggle_loop:
            self._output(f"Loop mode {_on_off(self.state.toggle_loop())}")
        elif key == commands.toggle_stack:
            self._output(f"Stack mode {_on_off(self.state.toggle_stack())}")
        else:
            group = self._bindings.lookup(key)
            if group is None:
                self._output(f"No binding for key '{key}'")
            else:
                self._trigger(key, group)
        return True

    def trigger_by_name(self, name: str, index: Optional[int] = None) -> Optional[int]:
        """
        Trigger a group by name, in sequence or at an explicit index.

        Returns:
            The index now playing, or None if the name is unbound or the
            sequence completed.

        Raises:
            SoundIndexError: If `index` is outside the group's sounds.
        """
        key = self._bindings.lookup_by_name(name)
        if key is None:
            self._output(f"No group named '{name}'")
            return None

        group = self._bindings.lookup(key)
        if index is None:
            return self._trigger(key, group)

        self._playback.check_index(group, index)
        self._playback.apply_state(group, self.state)
        played = self._playback.trigger_specific(group, index)
        self._output(f"[{key}] {group.name} {played + 1}/{len(group.sounds)}")
        return played

    def _trigger(self, key: str, group: Group) -> Optional[int]:
        index = self._playback.trigger(group, self.state)
        if index is None:
            self._output(f"[{key}] {group.name}: sequence complete")
        else:
            self._output(f"[{key}] {group.name} {index + 1}/{len(group.sounds)}")
        return index

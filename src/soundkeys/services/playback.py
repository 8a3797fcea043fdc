"""Service driving the per-group playback state machine."""

from typing import Iterable, Optional
from soundkeys.core.catalog import Group
from soundkeys.core.exceptions import SoundIndexError
from soundkeys.core.interfaces import ISoundHandle
from soundkeys.core.models import GlobalState, PlaybackMode
from soundkeys.utils.log import get_logger

logger = get_logger(__name__)


class PlaybackService:
    """
    Service for group playback transitions.

    Responsibilities:
    - Sequential advance through a group's sounds
    - Direct playback of one index
    - Restart of naturally ended sounds in looping groups
    - Stopping every sound at once

    A group is Idle when `last_played_index == -1` and Playing(i) otherwise.
    Errors raised by a sound handle are logged and swallowed here so that a
    single bad handle never stops the dispatcher.
    """

    def __init__(self, default_mode: PlaybackMode = PlaybackMode.SEQUENTIAL):
        """
        Initialize playback service.

        Args:
            default_mode: Mode given to groups triggered without stacking.
        """
        if default_mode is PlaybackMode.PARALLEL:
            raise ValueError("PARALLEL is selected by stacking, not as a default mode")
        if default_mode is PlaybackMode.RANDOM:
            logger.warning("Random mode is reserved; sounds will play in sequence")
        self._default_mode = default_mode

    def trigger(self, group: Group, state: GlobalState) -> Optional[int]:
        """
        Copy the global toggles into `group`, then advance it one step.

        Returns:
            The index now playing, or None if the sequence just completed.
        """
        self.apply_state(group, state)
        return self.trigger_sequential(group)

    def apply_state(self, group: Group, state: GlobalState) -> None:
        """Snapshot the global loop/stack flags into `group`."""
        group.loop_enabled = state.loop
        group.stack_enabled = state.stack
        group.mode = PlaybackMode.PARALLEL if state.stack else self._default_mode

    def trigger_sequential(self, group: Group) -> Optional[int]:
        """
        Advance `group` one step through its sounds.

        A playing sound is stopped first unless the group is stacking. After
        the last sound the group returns to Idle without playing anything;
        the next trigger starts again from the first sound.

        Returns:
            The index now playing, or None if the sequence just completed.
        """
        current = group.last_played_index
        if current != -1 and not group.stack_enabled:
            self._call(group.sounds[current], "stop")

        if current == len(group.sounds) - 1:
            logger.info(f"Group '{group.name}': sequence complete")
            group.last_played_index = -1
            return None

        group.last_played_index = current + 1
        self._start(group.sounds[group.last_played_index])
        logger.debug(f"Group '{group.name}': playing {group.last_played_index}")
        return group.last_played_index

    def check_index(self, group: Group, index: int) -> None:
        """Raise SoundIndexError if `index` is outside the group's sounds."""
        if not 0 <= index < len(group.sounds):
            raise SoundIndexError(
                f"Group '{group.name}' has {len(group.sounds)} sounds, no index {index}"
            )

    def trigger_specific(self, group: Group, index: int) -> int:
        """
        Play the sound at `index`, bypassing the sequence.

        Raises:
            SoundIndexError: If `index` is outside the group's sounds.
        """
        self.check_index(group, index)

        current = group.last_played_index
        if current != -1 and not group.stack_enabled:
            self._call(group.sounds[current], "stop")

        group.last_played_index = index
        self._start(group.sounds[index])
        logger.debug(f"Group '{group.name}': playing {index} directly")
        return index

    def loop_tick(self, groups: Iterable[Group]) -> int:
        """
        Restart naturally ended sounds of looping groups.

        Non-stacked groups only inspect the sound at `last_played_index`;
        stacked groups inspect every sound up to and including it.

        Returns:
            Number of sounds restarted.
        """
        restarted = 0
        for group in groups:
            if not group.loop_enabled or group.is_idle:
                continue

            if group.stack_enabled:
                candidates = group.sounds[:group.last_played_index + 1]
            else:
                candidates = [group.sounds[group.last_played_index]]

            for handle in candidates:
                if self._call(handle, "is_at_end"):
                    self._start(handle)
                    restarted += 1
                    logger.debug(f"Group '{group.name}': looped {handle.path}")
        return restarted

    def stop_all(self, groups: Iterable[Group]) -> None:
        """Stop every sound of every group. Group state is left untouched."""
        for group in groups:
            for handle in group.sounds:
                self._call(handle, "stop")

    def _start(self, handle: ISoundHandle) -> None:
        self._call(handle, "seek", 0.0)
        self._call(handle, "play")

    def _call(self, handle: ISoundHandle, op: str, *args):
        try:
            return getattr(handle, op)(*args)
        except Exception as e:
            logger.warning(f"Error in {op} for {handle.path}: {e}")
            return None

"""Sound groups built from `PPP_NAME (N).ext` filenames."""

import os
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional
from soundkeys.core.bindings import KeyBindingTable
from soundkeys.core.interfaces import IPlayerBackend, ISoundHandle
from soundkeys.core.models import PlaybackMode, SoundFile
from soundkeys.utils.log import get_logger

logger = get_logger(__name__)

SOUND_FILENAME = re.compile(r"^(\d{3})_(.+?) \((\d+)\)\.(mp3|wav)$")


def parse_sound_filename(path: str) -> Optional[SoundFile]:
    """
    Parse a sound file path.

    Args:
        path: Full or relative path; only the basename is matched.

    Returns:
        SoundFile, or None if the basename does not follow the convention.
    """
    basename = os.path.basename(path)
    match = SOUND_FILENAME.match(basename)
    if match is None:
        return None
    return SoundFile(
        prefix=match.group(1), name=match.group(2), index=match.group(3), path=path
    )


@dataclass
class Group:
    """Named, ordered collection of sounds bound to one key."""

    order_index: int
    name: str
    sounds: List[ISoundHandle] = field(default_factory=list)
    last_played_index: int = -1
    loop_enabled: bool = False
    stack_enabled: bool = False
    mode: PlaybackMode = PlaybackMode.SEQUENTIAL

    @property
    def is_idle(self) -> bool:
        return self.last_played_index == -1

    @property
    def current(self) -> Optional[ISoundHandle]:
        """Handle at `last_played_index`, or None when idle."""
        if self.is_idle:
            return None
        return self.sounds[self.last_played_index]

    def __repr__(self) -> str:
        return (
            f"Group({self.order_index:03d}, {self.name!r}, sounds={len(self.sounds)}, "
            f"last={self.last_played_index}, loop={self.loop_enabled}, "
            f"stack={self.stack_enabled})"
        )


class GroupCatalog:
    """
    Builds groups from an ordered list of sound file paths.

    Files are processed in the order given. The first file of a name creates
    the group (and takes its prefix as order index) provided a key is still
    free; later files with that name are appended. A name that cannot be
    bound is dropped with all of its files.
    """

    def __init__(self, backend: IPlayerBackend, bindings: KeyBindingTable):
        """
        Initialize the catalog.

        Args:
            backend: Player backend used to open one handle per admitted file.
            bindings: Key table; each new group is bound as it is created.
        """
        self._backend = backend
        self._bindings = bindings
        self._groups: Dict[str, Group] = {}
        self._dropped: List[str] = []

    def build(self, paths: Iterable[str]) -> "GroupCatalog":
        """Add every path in order and return the catalog."""
        for path in paths:
            self.add(path)
        logger.info(
            f"Catalog built: {len(self._groups)} groups, "
            f"{sum(len(g.sounds) for g in self._groups.values())} sounds"
        )
        return self

    def add(self, path: str) -> Optional[ISoundHandle]:
        """
        Add one sound file.

        Returns:
            The opened handle, or None if the file was skipped or dropped.
        """
        sound_file = parse_sound_filename(path)
        if sound_file is None:
            logger.debug(f"Skipping non-conforming file: {path}")
            return None

        group = self._groups.get(sound_file.name)
        if group is None:
            if sound_file.name in self._dropped:
                logger.warning(f"Dropping {path}: group '{sound_file.name}' has no key")
                return None

            group = Group(order_index=sound_file.order_index, name=sound_file.name)
            key = self._bindings.assign(group)
            if key is None:
                self._dropped.append(sound_file.name)
                logger.warning(
                    f"Dropping {path}: no key left for group '{sound_file.name}' "
                    f"({self._bindings.capacity} keys available)"
                )
                return None
            self._groups[group.name] = group

        handle = self._open(sound_file.path)
        group.sounds.append(handle)
        return handle

    def _open(self, path: str) -> ISoundHandle:
        handle = self._backend.open_sound(path)
        try:
            handle.open()
            handle.seek(0.0)
        except Exception as e:
            logger.warning(f"Error opening {path}: {e}")
        return handle

    def get(self, name: str) -> Optional[Group]:
        return self._groups.get(name)

    @property
    def groups(self) -> List[Group]:
        """Groups in creation order."""
        return list(self._groups.values())

    @property
    def dropped(self) -> List[str]:
        """Names of groups that could not be bound to a key."""
        return list(self._dropped)

    def handles(self) -> List[ISoundHandle]:
        return [handle for group in self._groups.values() for handle in group.sounds]

    def __iter__(self) -> Iterator[Group]:
        return iter(list(self._groups.values()))

    def __len__(self) -> int:
        return len(self._groups)

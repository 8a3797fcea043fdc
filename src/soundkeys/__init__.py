"""
soundkeys - keyboard-driven soundboard.

Audio files named `PPP_NAME (N).wav|mp3` are grouped by NAME, ordered by the
PPP prefix and bound to keys 1-0 then a-z. Pressing a key plays the group's
sounds one after another; global toggles make groups loop or stack.
"""

from soundkeys.api.soundboard import Soundboard
from soundkeys.core.catalog import Group, GroupCatalog, parse_sound_filename
from soundkeys.core.bindings import KeyBindingTable
from soundkeys.core.models import (
    CommandKeys,
    GlobalState,
    PlaybackMode,
    SoundboardConfig,
)
from soundkeys.core.exceptions import (
    SoundboardError,
    BackendError,
    AudioFormatError,
    InvalidAudioFormat,
    SoundIndexError,
    KeyBindingError,
)

__version__ = "0.1.0"

__all__ = [
    "Soundboard",
    "Group",
    "GroupCatalog",
    "parse_sound_filename",
    "KeyBindingTable",
    "CommandKeys",
    "GlobalState",
    "PlaybackMode",
    "SoundboardConfig",
    "SoundboardError",
    "BackendError",
    "AudioFormatError",
    "InvalidAudioFormat",
    "SoundIndexError",
    "KeyBindingError",
]

"""Services layer for soundboard orchestration."""

from soundkeys.services.dispatcher import EventDispatcher
from soundkeys.services.lifecycle import LifecycleService
from soundkeys.services.playback import PlaybackService

__all__ = ["EventDispatcher", "LifecycleService", "PlaybackService"]

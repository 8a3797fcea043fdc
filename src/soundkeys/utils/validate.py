"""Validation utilities."""


def validate_volume(volume: float) -> float:
    """Validate and clamp volume to [0.0, 1.0]."""
    if volume < 0.0:
        return 0.0
    if volume > 1.0:
        return 1.0
    return volume


def validate_interval(seconds: float, minimum: float = 0.0) -> float:
    """Clamp a time interval to be at least `minimum` seconds."""
    if seconds < minimum:
        return minimum
    return seconds

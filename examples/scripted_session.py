"""Example: drive a soundboard with a fixed key sequence, without audio."""

import sys
from pathlib import Path

from soundkeys import Soundboard, SoundboardConfig
from soundkeys.backends.null_backend import NullBackend
from soundkeys.input.keyboard import ScriptedKeySource

if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python scripted_session.py <sound_directory> [keys]")
        sys.exit(1)

    directory = sys.argv[1]
    if not Path(directory).is_dir():
        print(f"Error: Directory not found: {directory}")
        sys.exit(1)

    # One key per character, "_" for space; the session always ends with quit
    script = list(sys.argv[2]) if len(sys.argv) > 2 else ["1", "1", "=", "2", "/"]
    keys = ScriptedKeySource(["space" if k == "_" else k for k in script] + ["esc"])

    with Soundboard(SoundboardConfig(directory=directory), backend=NullBackend()) as board:
        board.run(keys)

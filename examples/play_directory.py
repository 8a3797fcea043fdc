"""Example: play a sound directory from the keyboard."""

import sys
from pathlib import Path

from soundkeys import Soundboard, SoundboardConfig
from soundkeys.input.keyboard import terminal_key_source

if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python play_directory.py <sound_directory>")
        sys.exit(1)

    directory = sys.argv[1]
    if not Path(directory).is_dir():
        print(f"Error: Directory not found: {directory}")
        sys.exit(1)

    soundboard = Soundboard(SoundboardConfig(directory=directory))

    try:
        soundboard.start()
        print("Press a bound key to play, Esc to quit")

        key_source = terminal_key_source()
        try:
            soundboard.run(key_source)
        finally:
            key_source.close()

    finally:
        soundboard.shutdown()

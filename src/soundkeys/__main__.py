"""Command line entry point: `python -m soundkeys DIRECTORY`."""

import argparse
import logging
import sys
from typing import List, Optional
from soundkeys.api.soundboard import Soundboard
from soundkeys.core.exceptions import SoundboardError
from soundkeys.core.models import PlaybackMode, SoundboardConfig
from soundkeys.input.keyboard import terminal_key_source
from soundkeys.utils.log import set_level


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="soundkeys",
        description="Play groups of sounds from the keyboard.",
    )
    parser.add_argument("directory", help="Directory of 'PPP_NAME (N).wav|mp3' files")
    parser.add_argument("--tick", type=float, default=0.1, help="Loop tick in seconds")
    parser.add_argument(
        "--ready-timeout",
        type=float,
        default=10.0,
        help="Seconds to wait for each sound to load",
    )
    parser.add_argument("--sample-rate", type=int, default=44100)
    parser.add_argument("--volume", type=float, default=1.0, help="Master volume 0.0-1.0")
    parser.add_argument(
        "--mode",
        choices=[PlaybackMode.SEQUENTIAL.value, PlaybackMode.RANDOM.value],
        default=PlaybackMode.SEQUENTIAL.value,
        help="Group playback mode (random is reserved and plays in sequence)",
    )
    parser.add_argument("--null", action="store_true", help="Run without audio output")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def config_from_args(args: argparse.Namespace) -> SoundboardConfig:
    return SoundboardConfig(
        directory=args.directory,
        tick_interval=args.tick,
        ready_timeout=args.ready_timeout,
        sample_rate=args.sample_rate,
        volume=args.volume,
        default_mode=PlaybackMode(args.mode),
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        set_level(logging.INFO)

    config = config_from_args(args)
    backend = None
    if args.null:
        from soundkeys.backends.null_backend import NullBackend
        backend = NullBackend()

    keys = config.command_keys
    soundboard = Soundboard(config, backend=backend)
    try:
        soundboard.start()
        print(
            f"Keys: [{keys.quit}] quit, [{keys.stop_all}] stop all, "
            f"[{keys.show_table}] table, [{keys.toggle_loop}] loop, "
            f"[{keys.toggle_stack}] stack"
        )
        key_source = terminal_key_source()
        try:
            soundboard.run(key_source)
        finally:
            key_source.close()
    except SoundboardError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        soundboard.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())

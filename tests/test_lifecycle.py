"""Tests for startup/shutdown and the Soundboard facade (using NullBackend)."""

import pytest
from soundkeys.api.soundboard import Soundboard
from soundkeys.backends.null_backend import NullBackend
from soundkeys.core.exceptions import KeyBindingError, SoundboardError
from soundkeys.core.models import CommandKeys, SoundboardConfig
from soundkeys.input.keyboard import ScriptedKeySource
from soundkeys.services.lifecycle import LifecycleService
from soundkeys.services.playback import PlaybackService


@pytest.fixture
def sound_dir(tmp_path):
    for name in [
        "001_Birds (1).wav",
        "001_Birds (2).wav",
        "002_Drums (1).mp3",
        "notes.txt",
        "cover.wav",
    ]:
        (tmp_path / name).write_bytes(b"")
    return tmp_path


def test_startup_sequence(sound_dir):
    """Test scan, catalog, bind, open, stop-all and table output."""
    output = []
    backend = NullBackend()
    soundboard = Soundboard(SoundboardConfig(directory=str(sound_dir)), backend, output.append)

    soundboard.start()

    assert [g.name for g in soundboard.catalog] == ["Birds", "Drums"]
    assert soundboard.bindings.lookup("1").name == "Birds"
    assert soundboard.bindings.lookup("2").name == "Drums"
    assert len(backend.handles) == 3
    for handle in backend.handles.values():
        assert handle.calls == ["open", "seek", "stop"]
    assert "Birds" in output[-1]

    soundboard.shutdown()


def test_shutdown_releases_everything(sound_dir):
    """Test stop-all, release and report on shutdown."""
    output = []
    backend = NullBackend()
    with Soundboard(SoundboardConfig(directory=str(sound_dir)), backend, output.append) as board:
        board.playback.trigger_sequential(board.catalog.get("Birds"))

    for handle in backend.handles.values():
        assert not handle.is_playing()
        assert "release" in handle.calls
        assert not handle.is_ready()
    assert output[-1] == "Soundboard shut down."

    # Idempotent
    board.shutdown()
    assert output.count("Soundboard shut down.") == 1


def test_missing_directory_gives_empty_catalog(tmp_path):
    """Test that a missing directory is reported, not fatal."""
    output = []
    soundboard = Soundboard(
        SoundboardConfig(directory=str(tmp_path / "missing")), NullBackend(), output.append
    )
    soundboard.start()

    assert len(soundboard.catalog) == 0
    assert output[-1] == "No sound groups bound."

    keys = ScriptedKeySource(["1", "esc"])
    soundboard.run(keys, sleep=lambda s: None)
    assert "No binding for key '1'" in output

    soundboard.shutdown()


def test_invalid_key_set_is_fatal(sound_dir):
    """Test that a key set clashing with a command key aborts startup."""
    config = SoundboardConfig(
        directory=str(sound_dir),
        key_set=("1", "2"),
        command_keys=CommandKeys(quit="1"),
    )
    backend = NullBackend()
    soundboard = Soundboard(config, backend, output=lambda s: None)

    with pytest.raises(KeyBindingError):
        soundboard.start()
    assert not backend.handles


def test_access_before_start():
    """Test that catalog and dispatcher need a started soundboard."""
    soundboard = Soundboard(backend=NullBackend(), output=lambda s: None)

    with pytest.raises(SoundboardError):
        soundboard.catalog
    with pytest.raises(SoundboardError):
        soundboard.dispatcher(ScriptedKeySource())


def test_not_ready_handles_reported(sound_dir, clock):
    """Test that a handle that never becomes ready is kept after the bounded wait."""
    slow = str(sound_dir / "002_Drums (1).mp3")
    backend = NullBackend(not_ready=[slow], clock=clock)
    config = SoundboardConfig(directory=str(sound_dir), ready_timeout=0.5)
    lifecycle = LifecycleService(
        backend,
        config,
        PlaybackService(),
        output=lambda s: None,
        clock=clock,
        sleep=clock.sleep,
    )

    lifecycle.start()

    assert 0.5 <= clock.now < 0.6
    drums = lifecycle.catalog.get("Drums")
    assert [h.path for h in drums.sounds] == [slow]
    assert lifecycle.wait_ready(lifecycle.catalog.handles()) == drums.sounds


def test_run_full_session(sound_dir):
    """Test a short scripted session through the facade."""
    output = []
    backend = NullBackend(duration=60.0)
    board = Soundboard(SoundboardConfig(directory=str(sound_dir)), backend, output.append)
    board.start()
    birds = board.catalog.get("Birds")

    board.run(ScriptedKeySource(["1", "1", "1", "1", "esc"]), sleep=lambda s: None)

    assert birds.last_played_index == 0
    assert "[1] Birds: sequence complete" in output
    assert output[-1] == "Quitting."
    board.shutdown()

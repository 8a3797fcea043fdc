"""Tests for the playback state machine (using NullBackend)."""

import pytest
from soundkeys.backends.null_backend import NullBackend
from soundkeys.core.bindings import KeyBindingTable
from soundkeys.core.catalog import GroupCatalog
from soundkeys.core.exceptions import SoundIndexError
from soundkeys.core.models import GlobalState, PlaybackMode
from soundkeys.services.playback import PlaybackService


def playing(group):
    return [h.is_playing() for h in group.sounds]


def test_sequential_exhaustion(make_group, playback):
    """Test 0, 1, 2, then Idle without playback, then 0 again."""
    group = make_group(count=3)

    indices = [playback.trigger_sequential(group) for _ in range(3)]
    assert indices == [0, 1, 2]
    assert group.last_played_index == 2
    assert playing(group) == [False, False, True]

    assert playback.trigger_sequential(group) is None
    assert group.last_played_index == -1
    assert group.is_idle
    assert playing(group) == [False, False, False]

    assert playback.trigger_sequential(group) == 0
    assert playing(group) == [True, False, False]


def test_sequential_stops_previous(make_group, playback):
    """Test that advancing stops the sound that was playing."""
    group = make_group(count=2)
    playback.trigger_sequential(group)
    playback.trigger_sequential(group)

    assert group.sounds[0].calls[-1] == "stop"
    assert group.sounds[1].calls[-2:] == ["seek", "play"]


def test_single_sound_group_toggles(make_group, playback):
    """Test that a one-sound group alternates between playing and idle."""
    group = make_group(count=1)

    assert playback.trigger_sequential(group) == 0
    assert playback.trigger_sequential(group) is None
    assert playback.trigger_sequential(group) == 0


def test_stack_mode_overlay(make_group, playback):
    """Test that stacking keeps earlier sounds playing."""
    group = make_group(count=3)
    group.stack_enabled = True

    playback.trigger_sequential(group)
    playback.trigger_sequential(group)

    assert playing(group) == [True, True, False]
    assert "stop" not in group.sounds[0].calls


def test_stack_mode_exhaustion_keeps_sounds(make_group, playback):
    """Test that completing a stacked sequence stops nothing."""
    group = make_group(count=2)
    group.stack_enabled = True

    playback.trigger_sequential(group)
    playback.trigger_sequential(group)
    assert playback.trigger_sequential(group) is None

    assert group.is_idle
    assert playing(group) == [True, True]


def test_trigger_specific(make_group, playback):
    """Test direct playback of one index."""
    group = make_group(count=3)
    playback.trigger_sequential(group)

    assert playback.trigger_specific(group, 2) == 2
    assert group.last_played_index == 2
    assert playing(group) == [False, False, True]

    # The sequence continues from the directly played index
    assert playback.trigger_sequential(group) is None


@pytest.mark.parametrize("index", [-1, 3, 10])
def test_trigger_specific_out_of_range(make_group, playback, index):
    """Test that invalid indices raise and leave state alone."""
    group = make_group(count=3)

    with pytest.raises(SoundIndexError):
        playback.trigger_specific(group, index)
    assert group.is_idle


def test_trigger_specific_stacked(make_group, playback):
    """Test that direct playback does not stop others when stacking."""
    group = make_group(count=3)
    group.stack_enabled = True

    playback.trigger_specific(group, 0)
    playback.trigger_specific(group, 2)

    assert playing(group) == [True, False, True]


def test_loop_restart(make_group, playback):
    """Test that an ended sound is restarted on the next tick, once."""
    group = make_group(count=2)
    group.loop_enabled = True
    playback.trigger_sequential(group)
    handle = group.sounds[0]

    # Not at end: nothing happens, however many ticks
    assert playback.loop_tick([group]) == 0
    assert playback.loop_tick([group]) == 0
    assert handle.calls.count("play") == 1

    handle.finish()
    assert handle.is_at_end()

    assert playback.loop_tick([group]) == 1
    assert handle.is_playing()
    assert handle.is_at_start()
    assert handle.calls.count("play") == 2

    assert playback.loop_tick([group]) == 0
    assert group.last_played_index == 0


def test_loop_restart_by_clock(make_group, playback, clock):
    """Test that running off the end of the sound counts as natural end."""
    group = make_group(count=1)
    group.loop_enabled = True
    playback.trigger_sequential(group)

    clock.now += 4.0
    assert playback.loop_tick([group]) == 0

    clock.now += 2.0
    assert playback.loop_tick([group]) == 1
    assert group.sounds[0].is_playing()


def test_no_loop_no_restart(make_group, playback):
    """Test that non-looping groups are left alone at end."""
    group = make_group(count=1)
    playback.trigger_sequential(group)
    group.sounds[0].finish()

    assert playback.loop_tick([group]) == 0
    assert not group.sounds[0].is_playing()


def test_loop_non_stacked_inspects_current_only(make_group, playback):
    """Test that only the last played sound loops without stacking."""
    group = make_group(count=2)
    group.loop_enabled = True
    group.stack_enabled = True
    playback.trigger_sequential(group)
    playback.trigger_sequential(group)
    group.stack_enabled = False

    group.sounds[0].finish()
    assert playback.loop_tick([group]) == 0

    group.sounds[1].finish()
    assert playback.loop_tick([group]) == 1


def test_loop_stacked_inspects_all_played(make_group, playback):
    """Test that stacked looping restarts every ended sound up to the current one."""
    group = make_group(count=3)
    group.loop_enabled = True
    group.stack_enabled = True
    playback.trigger_sequential(group)
    playback.trigger_sequential(group)

    group.sounds[0].finish()
    group.sounds[1].finish()

    assert playback.loop_tick([group]) == 2
    assert playing(group) == [True, True, False]


def test_loop_skips_idle_groups(make_group, playback):
    """Test that idle groups never restart."""
    group = make_group(count=1)
    group.loop_enabled = True

    assert playback.loop_tick([group]) == 0


def test_stop_all_keeps_state(make_group, playback):
    """Test that stop-all silences everything but keeps last played index."""
    birds = make_group("Birds", count=3)
    drums = make_group("Drums", count=2, prefix="002")
    playback.trigger_sequential(birds)
    playback.trigger_sequential(birds)
    playback.trigger_sequential(drums)

    playback.stop_all([birds, drums])

    assert playing(birds) == [False, False, False]
    assert playing(drums) == [False, False]
    assert birds.last_played_index == 1
    assert drums.last_played_index == 0

    # Resumes from the successor of the stopped sound
    assert playback.trigger_sequential(birds) == 2


def test_stop_all_silences_loops(make_group, playback):
    """Test that a stopped looping sound is not restarted."""
    group = make_group(count=1)
    group.loop_enabled = True
    playback.trigger_sequential(group)
    group.sounds[0].finish()

    playback.stop_all([group])

    assert playback.loop_tick([group]) == 0


def test_trigger_snapshots_global_state(make_group, playback):
    """Test that toggles only reach a group on its next trigger."""
    group = make_group(count=3)
    state = GlobalState()

    playback.trigger(group, state)
    assert not group.stack_enabled
    assert group.mode is PlaybackMode.SEQUENTIAL

    state.toggle_stack()
    state.toggle_loop()
    assert not group.stack_enabled
    assert not group.loop_enabled

    playback.trigger(group, state)
    assert group.stack_enabled
    assert group.loop_enabled
    assert group.mode is PlaybackMode.PARALLEL
    # The new flag applies to this trigger already
    assert playing(group) == [True, True, False]


def test_random_mode_plays_in_sequence(make_group):
    """Test that the reserved random mode behaves sequentially."""
    playback = PlaybackService(PlaybackMode.RANDOM)
    group = make_group(count=3)
    state = GlobalState()

    indices = [playback.trigger(group, state) for _ in range(4)]

    assert group.mode is PlaybackMode.RANDOM
    assert indices == [0, 1, 2, None]


def test_parallel_is_not_a_default_mode():
    """Test that PARALLEL must come from the stack toggle."""
    with pytest.raises(ValueError):
        PlaybackService(PlaybackMode.PARALLEL)


def test_adapter_errors_do_not_propagate(playback):
    """Test that a failing handle never raises out of the state machine."""
    backend = NullBackend(failing=["/s/001_Bad (1).wav"])
    catalog = GroupCatalog(backend, KeyBindingTable()).build(
        ["/s/001_Bad (1).wav", "/s/001_Bad (2).wav"]
    )
    group = catalog.get("Bad")
    group.loop_enabled = True

    assert playback.trigger_sequential(group) == 0
    assert playback.trigger_sequential(group) == 1
    assert group.sounds[1].is_playing()
    assert playback.loop_tick([group]) == 0
    playback.stop_all([group])
    assert playback.trigger_sequential(group) is None


def test_not_ready_handle_is_best_effort(playback):
    """Test that triggering a sound that never loaded still advances state."""
    backend = NullBackend(not_ready=["/s/001_Slow (1).wav"])
    catalog = GroupCatalog(backend, KeyBindingTable()).build(["/s/001_Slow (1).wav"])
    group = catalog.get("Slow")

    assert playback.trigger_sequential(group) == 0
    assert not group.sounds[0].is_playing()

"""Tests for directory scanning."""

from soundkeys.utils.scan import list_audio_files


def test_lists_sorted_audio_files(tmp_path):
    """Test that only .wav/.mp3 files are listed, sorted by name."""
    for name in ["002_B (1).mp3", "001_A (2).wav", "001_A (1).wav", "readme.md"]:
        (tmp_path / name).write_bytes(b"")
    (tmp_path / "003_sub.wav").mkdir()

    files = list_audio_files(str(tmp_path))

    assert files == [
        str(tmp_path / "001_A (1).wav"),
        str(tmp_path / "001_A (2).wav"),
        str(tmp_path / "002_B (1).mp3"),
    ]


def test_missing_directory(tmp_path):
    """Test that a missing directory yields nothing."""
    assert list_audio_files(str(tmp_path / "nope")) == []


def test_empty_directory(tmp_path):
    """Test that an empty directory yields nothing."""
    assert list_audio_files(str(tmp_path)) == []

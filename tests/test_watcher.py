"""
Unit tests for filetool.watcher module.

Drives the event handler directly with watchdog events instead of
running an observer.
"""

from pathlib import Path

import pytest
from watchdog.events import DirCreatedEvent, FileCreatedEvent, FileMovedEvent

from filetool.config import Config
from filetool.rules import CustomRule
from filetool.watcher import OrganizeEventHandler, organize_single_file, watch_directory


class TestOrganizeSingleFile:
    """Tests for organize_single_file function."""

    def test_moves_file(self, temp_dir: Path, capture_output: list, output_callback):
        f = temp_dir / "photo.png"
        f.write_text("x")

        action = organize_single_file(temp_dir, f, output=output_callback)

        assert action.destination_path == temp_dir / "images" / "photo.png"
        assert (temp_dir / "images" / "photo.png").exists()
        assert any("[watch] Moved: photo.png" in msg for msg in capture_output)

    def test_file_in_place_is_left_alone(self, temp_dir: Path, capture_output: list, output_callback):
        images = temp_dir / "images"
        images.mkdir()
        f = images / "photo.png"
        f.write_text("x")

        assert organize_single_file(temp_dir, f, output=output_callback) is None
        assert f.exists()
        assert capture_output == []

    def test_uses_rules(self, temp_dir: Path, output_callback):
        f = temp_dir / "paper.pdf"
        f.write_text("x")
        config = Config(rules=[CustomRule(folder="papers", extension=".pdf")])

        organize_single_file(temp_dir, f, config=config, output=output_callback)

        assert (temp_dir / "papers" / "paper.pdf").exists()


class TestOrganizeEventHandler:
    """Tests for OrganizeEventHandler."""

    def test_created_event(self, temp_dir: Path, output_callback):
        f = temp_dir / "song.mp3"
        f.write_text("x")
        handler = OrganizeEventHandler(temp_dir, output=output_callback)

        handler.on_created(FileCreatedEvent(str(f)))

        assert (temp_dir / "audio" / "song.mp3").exists()

    def test_moved_in_event(self, temp_dir: Path, output_callback):
        f = temp_dir / "clip.mp4"
        f.write_text("x")
        handler = OrganizeEventHandler(temp_dir, output=output_callback)

        handler.on_moved(FileMovedEvent("/elsewhere/clip.mp4", str(f)))

        assert (temp_dir / "videos" / "clip.mp4").exists()

    def test_directory_events_ignored(self, temp_dir: Path, output_callback):
        sub = temp_dir / "newdir"
        sub.mkdir()
        handler = OrganizeEventHandler(temp_dir, output=output_callback)

        handler.on_created(DirCreatedEvent(str(sub)))

        assert sub.is_dir()

    def test_vanished_file_is_ignored(self, temp_dir: Path, output_callback):
        handler = OrganizeEventHandler(temp_dir, output=output_callback)

        assert handler.handle(temp_dir / "gone.txt") is None

    def test_by_date(self, temp_dir: Path, output_callback):
        f = temp_dir / "a.txt"
        f.write_text("x")
        handler = OrganizeEventHandler(temp_dir, by="date", output=output_callback)

        action = handler.handle(f)

        assert action.destination_path.parent.parent.parent == temp_dir
        assert action.destination_path.exists()


class TestWatchDirectory:
    """Tests for watch_directory function."""

    def test_invalid_directory_raises_error(self, temp_dir: Path, output_callback):
        with pytest.raises(ValueError, match="not a valid directory"):
            watch_directory(temp_dir / "nonexistent", output=output_callback)

"""
Watch a directory and organize new files as they appear.

Each created or moved-in file goes through the same single-file planner
the organize command uses. Events are handled one at a time; files that
vanish before they can be read are ignored.
"""

import time
from pathlib import Path
from typing import Optional, Sequence

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .config import Config, DEFAULT_CONFIG
from .models import MoveAction
from .operations import (
    ORGANIZE_BY_TYPE,
    OutputCallback,
    default_output,
    plan_file_move,
)
from .rules import CustomRule
from .utils import move_file


def organize_single_file(
    root: Path,
    file_path: Path,
    by: str = ORGANIZE_BY_TYPE,
    rules: Optional[Sequence[CustomRule]] = None,
    config: Config = DEFAULT_CONFIG,
    output: OutputCallback = default_output,
) -> Optional[MoveAction]:
    """
    Move one file to where organize would put it.

    Returns:
        The move performed, or None if the file was already in place

    Raises:
        OSError: If the file cannot be read or moved
    """
    action = plan_file_move(root, file_path, by, rules, config)
    if action is None:
        return None
    move_file(action.source_path, action.destination_path)
    output(f"[watch] Moved: {action.file_name} -> {action.destination_path}")
    return action


class OrganizeEventHandler(FileSystemEventHandler):
    """Organizes files reported by watchdog."""

    def __init__(
        self,
        root: Path,
        by: str = ORGANIZE_BY_TYPE,
        rules: Optional[Sequence[CustomRule]] = None,
        config: Config = DEFAULT_CONFIG,
        output: OutputCallback = default_output,
    ):
        self.root = root
        self.by = by
        self.rules = rules
        self.config = config
        self.output = output

    def on_created(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self.handle(Path(event.src_path))

    def on_moved(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self.handle(Path(event.dest_path))

    def handle(self, file_path: Path) -> Optional[MoveAction]:
        try:
            if not file_path.is_file():
                return None
            return organize_single_file(
                self.root, file_path, self.by, self.rules, self.config, self.output
            )
        except OSError:
            # Removed or still being written
            return None


def watch_directory(
    root: Path,
    by: str = ORGANIZE_BY_TYPE,
    rules: Optional[Sequence[CustomRule]] = None,
    config: Config = DEFAULT_CONFIG,
    output: OutputCallback = default_output,
    poll_interval: float = 1.0,
) -> None:
    """
    Organize new files under root until interrupted (Ctrl+C).

    Raises:
        ValueError: If root is not a valid directory
    """
    if not root.is_dir():
        raise ValueError(f"'{root}' is not a valid directory")

    handler = OrganizeEventHandler(root, by, rules, config, output)
    observer = Observer()
    observer.schedule(handler, str(root), recursive=True)
    observer.start()

    output(f"Watching: {root} (organize by {by}). Press Ctrl+C to stop.")
    try:
        while True:
            time.sleep(poll_interval)
    except KeyboardInterrupt:
        pass
    finally:
        observer.stop()
        observer.join()

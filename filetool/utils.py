"""
Utility functions for filetool.

Path helpers and formatters are pure. The rest are thin wrappers over the
filesystem: listing, metadata reads, hashing, and the move/rename/delete
primitives the executors call.
"""

import hashlib
import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Union

from .models import FileRecord

PathLike = Union[str, Path]

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def get_extension(file_path: PathLike) -> str:
    """
    Get the lowercase extension of a file, including the dot.

    Returns "" for files without an extension (and for dotfiles like ".bashrc").
    """
    return Path(file_path).suffix.lower()


def get_stem(file_path: PathLike) -> str:
    """Get the file name without its extension ("photo" for "photo.JPG")."""
    return Path(file_path).stem


def get_file_mtime(file_path: Path) -> datetime:
    """
    Get the modification time of a file as a local datetime.

    Args:
        file_path: Path to the file

    Returns:
        Datetime of last modification
    """
    return datetime.fromtimestamp(file_path.stat().st_mtime)


def _created_timestamp(stat: os.stat_result) -> float:
    birth = getattr(stat, "st_birthtime", None)
    return stat.st_mtime if birth is None else birth


def get_file_created(file_path: Path) -> datetime:
    """
    Get the creation time of a file as a local datetime.

    Uses the birth time where the platform reports one. Elsewhere the
    modification time is used; st_ctime changes on every rename.

    Args:
        file_path: Path to the file

    Returns:
        Datetime of creation
    """
    return datetime.fromtimestamp(_created_timestamp(file_path.stat()))


def get_file_size_bytes(file_path: Path) -> int:
    """
    Get the size of a file in bytes.

    Args:
        file_path: Path to the file

    Returns:
        File size in bytes
    """
    return file_path.stat().st_size


def read_file_record(
    file_path: Path,
    created_at: Optional[Callable[[Path], datetime]] = None,
) -> FileRecord:
    """
    Read the per-file facts the planners work from.

    Args:
        file_path: Path to the file
        created_at: Creation time reader (optional, for testing)

    Returns:
        FileRecord for the file
    """
    stat = file_path.stat()
    if created_at is None:
        created = datetime.fromtimestamp(_created_timestamp(stat))
    else:
        created = created_at(file_path)
    return FileRecord(
        path=file_path,
        extension=get_extension(file_path),
        size_bytes=stat.st_size,
        created_at=created,
        stem=get_stem(file_path),
    )


def format_file_size(size_bytes: int) -> str:
    """
    Convert bytes to human-readable format (KB, MB, GB).

    Args:
        size_bytes: Size in bytes

    Returns:
        Human-readable string like "1.5 GB" or "256 MB"

    Example:
        >>> format_file_size(1536000000)
        '1.43 GB'
    """
    size = float(size_bytes)
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size < 1024:
            return f"{size:.2f} {unit}" if unit != 'B' else f"{int(size)} {unit}"
        size /= 1024
    return f"{size:.2f} PB"


def format_date_iso(moment: datetime) -> str:
    """Format a datetime as YYYY-MM-DD."""
    return moment.strftime("%Y-%m-%d")


def month_folder(moment: datetime) -> Path:
    """Relative date folder for a datetime, e.g. 2024/January."""
    return Path(f"{moment.year:04d}") / MONTH_NAMES[moment.month - 1]


def compute_file_hash(file_path: Path, buffer_size: int = 64 * 1024) -> str:
    """
    Compute the SHA-256 hash of a file for duplicate detection.

    Reads the file in chunks to handle large files efficiently.

    Args:
        file_path: Path to the file to hash
        buffer_size: Size of chunks to read

    Returns:
        SHA-256 hash as a 64-character hex string
    """
    hasher = hashlib.sha256()

    with open(file_path, 'rb') as f:
        while chunk := f.read(buffer_size):
            hasher.update(chunk)

    return hasher.hexdigest()


def _sorted_entries(directory: Path) -> Iterator[Path]:
    try:
        return iter(sorted(directory.iterdir(), key=lambda p: p.name))
    except OSError:
        # Permission denied or vanished directory: skip it
        return iter(())


def list_files(directory: Path, recursive: bool = False) -> List[Path]:
    """
    List regular files under a directory, depth-first.

    Entries are visited in name order and a subdirectory is walked where it
    is met, so the listing order is stable for a given tree. Symlinks are
    not followed and unreadable directories are skipped.

    Args:
        directory: Directory to list
        recursive: If True, descend into subdirectories

    Returns:
        File paths in listing order
    """
    files: List[Path] = []
    stack = [_sorted_entries(Path(directory))]

    while stack:
        entry = next(stack[-1], None)
        if entry is None:
            stack.pop()
            continue
        if entry.is_symlink():
            continue
        if entry.is_file():
            files.append(entry)
        elif recursive and entry.is_dir():
            stack.append(_sorted_entries(entry))

    return files


def ensure_directory(directory: Path) -> None:
    """Create a directory and its parents if missing."""
    directory.mkdir(parents=True, exist_ok=True)


def move_file(source: Path, destination: Path) -> None:
    """Move a file, creating the destination's parent directories."""
    ensure_directory(destination.parent)
    shutil.move(str(source), str(destination))


def rename_file(old_path: Path, new_path: Path) -> None:
    """Rename a file, creating the new path's parent directories."""
    ensure_directory(new_path.parent)
    old_path.replace(new_path)


def delete_file(file_path: Path) -> None:
    """Delete a file."""
    file_path.unlink()

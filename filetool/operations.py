"""
Core file operations for filetool.

Planners (plan_organize, plan_rename, scan_duplicates) read the tree and
return fresh action lists without touching the filesystem. Executors apply a
previously computed plan in list order. Executors use a callback pattern for
output to separate concerns from the CLI.
"""

import re
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, TypeVar

from .config import Config, DEFAULT_CONFIG
from .models import (
    DuplicateGroup,
    DuplicateScan,
    FileRecord,
    MoveAction,
    OperationError,
    RenameAction,
    SkippedFile,
)
from .rules import CustomRule, match_rules
from .utils import (
    compute_file_hash,
    delete_file,
    format_date_iso,
    get_extension,
    get_file_created,
    get_file_size_bytes,
    list_files,
    month_folder,
    move_file,
    read_file_record,
    rename_file,
)

ORGANIZE_BY_TYPE = "type"
ORGANIZE_BY_DATE = "date"
ORGANIZE_MODES = (ORGANIZE_BY_TYPE, ORGANIZE_BY_DATE)

PLACEHOLDER_PATTERN = re.compile(r"\{(\w+)\}")


@dataclass
class OperationResult:
    """Result of executing a plan, with statistics."""
    success_count: int = 0
    skip_count: int = 0
    error_count: int = 0
    errors: List[OperationError] = field(default_factory=list)

    # For duplicate deletion
    space_recovered: int = 0


# Type alias for output callback
OutputCallback = Callable[[str], None]

# Reads a file's creation time; injectable for testing
CreatedAtReader = Callable[[Path], datetime]

T = TypeVar("T")


def default_output(message: str) -> None:
    """Default output callback that prints to stdout."""
    print(message)


def _require_directory(directory: Path) -> None:
    if not directory.is_dir():
        raise ValueError(f"'{directory}' is not a valid directory")


# ---------------------------------------------------------------------------
# Organize
# ---------------------------------------------------------------------------

def plan_file_move(
    root: Path,
    file_path: Path,
    by: str = ORGANIZE_BY_TYPE,
    rules: Optional[Sequence[CustomRule]] = None,
    config: Config = DEFAULT_CONFIG,
    created_at: CreatedAtReader = get_file_created,
) -> Optional[MoveAction]:
    """
    Decide where one file belongs under root.

    Args:
        root: Directory being organized
        file_path: File to place
        by: "type" (rules, then category map) or "date" (root/YYYY/Month)
        rules: Custom rules (default: config.rules)
        config: Configuration to use
        created_at: Creation time reader (optional, for testing)

    Returns:
        MoveAction, or None when the file is already where it belongs

    Raises:
        ValueError: If `by` is not a known mode
        OSError: If the file's metadata cannot be read
    """
    if by == ORGANIZE_BY_DATE:
        target_dir = root / month_folder(created_at(file_path))
    elif by == ORGANIZE_BY_TYPE:
        if rules is None:
            rules = config.rules
        extension = get_extension(file_path)
        folder = match_rules(extension, get_file_size_bytes(file_path), rules)
        if folder is None:
            folder = config.get_category(extension)
        target_dir = root / folder
    else:
        raise ValueError(f"Unknown organize mode: {by!r}")

    destination = target_dir / file_path.name
    if destination == file_path or file_path.parent == target_dir:
        return None

    return MoveAction(
        source_path=file_path,
        destination_path=destination,
        file_name=file_path.name,
    )


def plan_organize(
    directory: Path,
    by: str = ORGANIZE_BY_TYPE,
    recursive: bool = False,
    rules: Optional[Sequence[CustomRule]] = None,
    config: Config = DEFAULT_CONFIG,
    created_at: CreatedAtReader = get_file_created,
) -> List[MoveAction]:
    """
    Plan moves that organize a directory by file type or by date.

    Nothing is moved. Actions come back in listing order; files already in
    their target folder produce no action, so planning again after executing
    a plan yields an empty list.

    Args:
        directory: Directory to organize
        by: "type" or "date"
        recursive: If True, include files in subdirectories
        rules: Custom rules (default: config.rules)
        config: Configuration to use
        created_at: Creation time reader (optional, for testing)

    Returns:
        List of MoveAction

    Raises:
        ValueError: If directory is not valid
    """
    _require_directory(directory)

    actions: List[MoveAction] = []
    for file_path in list_files(directory, recursive):
        action = plan_file_move(directory, file_path, by, rules, config, created_at)
        if action is not None:
            actions.append(action)
    return actions


# ---------------------------------------------------------------------------
# Rename
# ---------------------------------------------------------------------------

def template_values(record: FileRecord, index: int) -> Dict[str, str]:
    """Placeholder values for one file."""
    return {
        "date": format_date_iso(record.created_at),
        "original": record.stem,
        "index": str(index),
        "ext": record.extension.lstrip("."),
        "size": str(record.size_bytes),
    }


def apply_template(template: str, values: Dict[str, str]) -> str:
    """
    Substitute {placeholders} in a template.

    Unknown placeholders are left as written. Substituted values are not
    scanned again, so a file named "{index}" stays "{index}".

    Example:
        >>> apply_template("{date}_{index}", {"date": "2024-01-01", "index": "3"})
        '2024-01-01_3'
    """
    return PLACEHOLDER_PATTERN.sub(lambda m: values.get(m.group(1), m.group(0)), template)


def plan_rename(
    directory: Path,
    template: Optional[str] = None,
    recursive: bool = False,
    config: Config = DEFAULT_CONFIG,
    created_at: Optional[CreatedAtReader] = None,
) -> List[RenameAction]:
    """
    Plan renames of every file in a directory from a template.

    The template names the file without its extension; the original
    extension is appended. {index} counts listed files from 1, including
    files whose name would not change. Two files mapping to the same new
    name are not detected.

    Args:
        directory: Directory whose files to rename
        template: Name template (default: config.rename_template)
        recursive: If True, include files in subdirectories
        config: Configuration to use
        created_at: Creation time reader (optional, for testing)

    Returns:
        List of RenameAction

    Raises:
        ValueError: If directory is not valid
    """
    _require_directory(directory)

    if template is None:
        template = config.rename_template

    actions: List[RenameAction] = []
    for index, file_path in enumerate(list_files(directory, recursive), start=1):
        record = read_file_record(file_path, created_at)
        new_name = apply_template(template, template_values(record, index)) + record.extension
        new_path = file_path.parent / new_name

        if new_path == file_path:
            continue

        actions.append(RenameAction(
            old_path=file_path,
            new_path=new_path,
            old_name=file_path.name,
            new_name=new_name,
        ))
    return actions


# ---------------------------------------------------------------------------
# Duplicates
# ---------------------------------------------------------------------------

def scan_duplicates(
    directory: Path,
    recursive: bool = False,
    config: Config = DEFAULT_CONFIG,
) -> DuplicateScan:
    """
    Group files in a directory by SHA-256 content hash.

    Files that cannot be read are left out of every group and listed in
    the scan's `skipped`.

    Args:
        directory: Directory to scan
        recursive: If True, scan subdirectories too
        config: Configuration to use

    Returns:
        DuplicateScan with groups of 2+ identical files, in first-seen order

    Raises:
        ValueError: If directory is not valid
    """
    _require_directory(directory)

    hash_to_files: Dict[str, List[Path]] = defaultdict(list)
    hash_to_size: Dict[str, int] = {}
    skipped: List[SkippedFile] = []

    for file_path in list_files(directory, recursive):
        try:
            file_hash = compute_file_hash(file_path, config.hash_buffer_size)
            size = get_file_size_bytes(file_path)
        except OSError as e:
            skipped.append(SkippedFile(path=file_path, reason=str(e)))
            continue
        hash_to_files[file_hash].append(file_path)
        hash_to_size[file_hash] = size

    # Only hashes with 2+ files are actual duplicates
    groups = [
        DuplicateGroup(content_hash=h, member_paths=paths, size_bytes=hash_to_size[h])
        for h, paths in hash_to_files.items()
        if len(paths) > 1
    ]
    return DuplicateScan(groups=groups, skipped=skipped)


def find_duplicates(
    directory: Path,
    recursive: bool = False,
    config: Config = DEFAULT_CONFIG,
) -> List[DuplicateGroup]:
    """
    Find duplicate files in a directory by comparing file hashes.

    Returns:
        Duplicate groups; the first member of each is the one to keep
    """
    return scan_duplicates(directory, recursive, config).groups


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------

def _execute(
    items: Sequence[T],
    apply: Callable[[T], None],
    describe: Callable[[T], str],
    error_path: Callable[[T], Path],
    verb: str,
    output: OutputCallback,
    verbose: bool,
    stop_on_error: bool,
    confirm: Optional[Callable[[T], bool]] = None,
) -> OperationResult:
    result = OperationResult()

    for item in items:
        if confirm is not None and not confirm(item):
            result.skip_count += 1
            continue
        try:
            apply(item)
        except OSError as e:
            if stop_on_error:
                raise
            error = OperationError(path=error_path(item), message=str(e))
            output(f"  [ERROR] {error.path}: {error.message}")
            result.errors.append(error)
            result.error_count += 1
            continue
        result.success_count += 1
        if verbose:
            output(f"  {verb}: {describe(item)}")

    return result


def execute_moves(
    actions: Sequence[MoveAction],
    output: OutputCallback = default_output,
    verbose: bool = False,
    stop_on_error: bool = False,
    confirm: Optional[Callable[[MoveAction], bool]] = None,
) -> OperationResult:
    """
    Apply planned moves in order, creating target folders as needed.

    Failed moves are not retried or rolled back. They are recorded in the
    result, or re-raised when stop_on_error is set.

    Args:
        actions: Moves from plan_organize
        output: Callback for output messages
        verbose: If True, report each successful move
        stop_on_error: If True, raise the first failure
        confirm: Asked before each move; a False answer skips it

    Returns:
        OperationResult with statistics
    """
    return _execute(
        actions,
        apply=lambda a: move_file(a.source_path, a.destination_path),
        describe=lambda a: f"{a.file_name} -> {a.destination_path}",
        error_path=lambda a: a.source_path,
        verb="Moved",
        output=output,
        verbose=verbose,
        stop_on_error=stop_on_error,
        confirm=confirm,
    )


def execute_renames(
    actions: Sequence[RenameAction],
    output: OutputCallback = default_output,
    verbose: bool = False,
    stop_on_error: bool = False,
) -> OperationResult:
    """
    Apply planned renames in order.

    A rename onto a name taken earlier in the same plan replaces that file.

    Args:
        actions: Renames from plan_rename
        output: Callback for output messages
        verbose: If True, report each successful rename
        stop_on_error: If True, raise the first failure

    Returns:
        OperationResult with statistics
    """
    return _execute(
        actions,
        apply=lambda a: rename_file(a.old_path, a.new_path),
        describe=lambda a: f"{a.old_name} -> {a.new_name}",
        error_path=lambda a: a.old_path,
        verb="Renamed",
        output=output,
        verbose=verbose,
        stop_on_error=stop_on_error,
    )


def delete_duplicates(
    groups: Sequence[DuplicateGroup],
    output: OutputCallback = default_output,
    verbose: bool = False,
    stop_on_error: bool = False,
) -> OperationResult:
    """
    Delete every member of each group except the first.

    Args:
        groups: Groups from find_duplicates
        output: Callback for output messages
        verbose: If True, report each deleted file
        stop_on_error: If True, raise the first failure

    Returns:
        OperationResult with statistics; space_recovered counts deleted bytes
    """
    sizes = {path: group.size_bytes for group in groups for path in group.extras}
    result = _execute(
        list(sizes),
        apply=delete_file,
        describe=str,
        error_path=lambda p: p,
        verb="Deleted",
        output=output,
        verbose=verbose,
        stop_on_error=stop_on_error,
    )
    failed = {error.path for error in result.errors}
    result.space_recovered = sum(size for path, size in sizes.items() if path not in failed)
    return result

"""
Command-line interface for filetool.

Handles argument parsing, path validation, confirmation prompts and
console output, and orchestrates the planners and executors.
"""

import argparse
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

from . import __version__
from .config import Config, get_config_path, load_config, write_default_config
from .metadata import get_metadata
from .operations import (
    ORGANIZE_MODES,
    OutputCallback,
    default_output,
    delete_duplicates,
    execute_moves,
    execute_renames,
    plan_organize,
    plan_rename,
    scan_duplicates,
)
from .report import duplicates_report, organize_report, rename_report, write_report
from .utils import format_file_size
from .watcher import watch_directory

# Asks a yes/no question and returns the answer
AskCallback = Callable[[str], bool]


def ask_yes_no(question: str) -> bool:
    """Prompt on stdin; only "y" or "yes" counts as consent."""
    try:
        answer = input(question)
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def create_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser for the CLI.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="filetool",
        description="Organize files, rename them from templates, and find duplicates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Rename placeholders:
  {date}      - creation date, YYYY-MM-DD
  {original}  - original name without extension
  {index}     - position in the listing, starting at 1
  {ext}       - extension without the dot
  {size}      - size in bytes

Config:
  Rules, folder mapping, the rename template and the dry-run default are
  read from .filetoolrc.json in the current directory (see `filetool init`).
        """
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Config file to use (default: ./.filetoolrc.json)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    organize = subparsers.add_parser("organize", help="Organize files by type or by date into subfolders")
    organize.add_argument("path", type=str, help="Directory to organize")
    organize.add_argument("--by", choices=ORGANIZE_MODES, default="type", help="Organize by file type or by creation date")
    _add_common_flags(organize)
    organize.add_argument("--interactive", "-i", action="store_true", help="Prompt before each move")

    rename = subparsers.add_parser("rename", help="Rename files using a template")
    rename.add_argument("path", type=str, help="Directory whose files to rename")
    rename.add_argument("--format", "-f", dest="template", default=None, help="Rename template (default: {date}_{index})")
    _add_common_flags(rename)

    duplicates = subparsers.add_parser("duplicates", help="Find duplicate files by content (SHA-256)")
    duplicates.add_argument("path", type=str, help="Directory to scan")
    _add_common_flags(duplicates)
    duplicates.add_argument("--delete", action="store_true", help="Delete duplicates after confirmation (keeps one per group)")

    metadata = subparsers.add_parser("metadata", help="Show file metadata (size, dates, image details)")
    metadata.add_argument("file", type=str, help="File to inspect")

    watch = subparsers.add_parser("watch", help="Watch a directory and organize new files")
    watch.add_argument("path", type=str, help="Directory to watch")
    watch.add_argument("--by", choices=ORGANIZE_MODES, default="type", help="Organize by file type or by creation date")

    subparsers.add_parser("init", help="Create .filetoolrc.json with the default config")

    return parser


def _add_common_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--recursive", "-r", action="store_true", help="Include subdirectories")
    parser.add_argument(
        "--dry-run", "-n",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Show planned actions without executing (default from config)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Detailed output")
    parser.add_argument("--report", type=Path, default=None, help="Report file (default: ./report.json)")


def _error(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)


def _resolve_directory(path_arg: str) -> Optional[Path]:
    directory = Path(path_arg).expanduser().resolve()
    if not directory.exists():
        _error(f"Path not found: {directory}")
        return None
    if not directory.is_dir():
        _error(f"Not a directory: {directory}")
        return None
    return directory


def _load_config(args: argparse.Namespace, output: OutputCallback) -> Config:
    result = load_config(args.config)
    if getattr(args, "verbose", False):
        if result.loaded:
            output(f"Using config: {result.path}")
        else:
            output(f"No config loaded ({result.reason}); using defaults")
    return result.config


def _dry_run(args: argparse.Namespace, config: Config) -> bool:
    return config.default_dry_run if args.dry_run is None else args.dry_run


def cmd_organize(args: argparse.Namespace, output: OutputCallback, ask: AskCallback) -> int:
    directory = _resolve_directory(args.path)
    if directory is None:
        return 1

    config = _load_config(args, output)
    actions = plan_organize(directory, by=args.by, recursive=args.recursive, config=config)

    if not actions:
        output("No files to organize.")
        return 0

    if _dry_run(args, config):
        output(f"[DRY RUN] Would move {len(actions)} file(s):")
        for action in actions:
            output(f"  {action.file_name} -> {action.destination_path}")
        return 0

    if args.interactive:
        result = execute_moves(
            actions,
            output=output,
            verbose=args.verbose,
            confirm=lambda a: ask(f'Move "{a.file_name}" to {a.destination_path}? [y/N] '),
        )
        output(f"Organized {result.success_count} file(s), {result.skip_count} skipped.")
        return 1 if result.error_count else 0

    result = execute_moves(actions, output=output, verbose=args.verbose)
    output(f"Organized {result.success_count} file(s).")

    report_path = write_report(organize_report(directory, actions, result.errors), args.report)
    if args.verbose:
        output(f"Report written to {report_path}")
    return 1 if result.error_count else 0


def cmd_rename(args: argparse.Namespace, output: OutputCallback, ask: AskCallback) -> int:
    directory = _resolve_directory(args.path)
    if directory is None:
        return 1

    config = _load_config(args, output)
    actions = plan_rename(directory, template=args.template, recursive=args.recursive, config=config)

    if not actions:
        output("No files to rename.")
        return 0

    if _dry_run(args, config):
        output(f"[DRY RUN] Would rename {len(actions)} file(s):")
        for action in actions:
            output(f"  {action.old_name} -> {action.new_name}")
        return 0

    result = execute_renames(actions, output=output, verbose=args.verbose)
    output(f"Renamed {result.success_count} file(s).")

    report_path = write_report(rename_report(directory, actions, result.errors), args.report)
    if args.verbose:
        output(f"Report written to {report_path}")
    return 1 if result.error_count else 0


def cmd_duplicates(args: argparse.Namespace, output: OutputCallback, ask: AskCallback) -> int:
    directory = _resolve_directory(args.path)
    if directory is None:
        return 1

    config = _load_config(args, output)
    scan = scan_duplicates(directory, recursive=args.recursive, config=config)

    if args.verbose:
        for skipped in scan.skipped:
            output(f"  [SKIPPED] {skipped.path}: {skipped.reason}")

    if not scan.groups:
        output("No duplicate groups found.")
        return 0

    for number, group in enumerate(scan.groups, start=1):
        output(f"Duplicate Group {number}:")
        for path in group.member_paths:
            output(f"  - {path}")
    output(f"\nTotal space that could be saved: {format_file_size(scan.total_reclaimable_bytes)}")

    report_path = write_report(duplicates_report(directory, scan.groups), args.report)
    if args.verbose:
        output(f"Report written to {report_path}")

    if not args.delete or _dry_run(args, config):
        return 0

    if not ask("Delete duplicate files (keep one per group)? [y/N] "):
        output("Aborted.")
        return 0

    result = delete_duplicates(scan.groups, output=output, verbose=args.verbose)
    output(f"Deleted {result.success_count} duplicate file(s), freed {format_file_size(result.space_recovered)}.")
    return 1 if result.error_count else 0


def cmd_metadata(args: argparse.Namespace, output: OutputCallback, ask: AskCallback) -> int:
    file_path = Path(args.file).expanduser().resolve()
    if not file_path.exists():
        _error(f"File not found: {file_path}")
        return 1
    if not file_path.is_file():
        _error(f"Not a file: {file_path}")
        return 1

    meta = get_metadata(file_path)
    output(f"Path:       {meta.path}")
    output(f"Size:       {meta.size_formatted}")
    output(f"Type:       {meta.type_label}")
    output(f"Created:    {meta.created_at.isoformat()}")
    output(f"Modified:   {meta.modified_at.isoformat()}")
    if meta.dimensions:
        output(f"Dimensions: {meta.dimensions}")
    if meta.exif:
        output(f"EXIF:       {len(meta.exif)} tag(s)")
    return 0


def cmd_watch(args: argparse.Namespace, output: OutputCallback, ask: AskCallback) -> int:
    directory = _resolve_directory(args.path)
    if directory is None:
        return 1

    config = _load_config(args, output)
    watch_directory(directory, by=args.by, config=config, output=output)
    return 0


def cmd_init(args: argparse.Namespace, output: OutputCallback, ask: AskCallback) -> int:
    config_path = args.config or get_config_path()
    if not write_default_config(config_path):
        output(f"{config_path.name} already exists. Edit it to customize rules.")
        return 0
    output(f"Created {config_path}")
    return 0


COMMANDS: Dict[str, Callable[[argparse.Namespace, OutputCallback, AskCallback], int]] = {
    "organize": cmd_organize,
    "rename": cmd_rename,
    "duplicates": cmd_duplicates,
    "metadata": cmd_metadata,
    "watch": cmd_watch,
    "init": cmd_init,
}


def run(
    args: argparse.Namespace,
    output: OutputCallback = default_output,
    ask: AskCallback = ask_yes_no,
) -> int:
    """
    Run the command selected by the parsed arguments.

    Args:
        args: Parsed command-line arguments
        output: Callback for output messages
        ask: Callback for yes/no confirmation prompts

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        return COMMANDS[args.command](args, output, ask)
    except Exception as e:
        _error(str(e))
        return 1


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())

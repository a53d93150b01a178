"""
filetool - Organize, rename and deduplicate local files.

This package plans filesystem actions (organize by type or date, template
renames, duplicate groups by content hash) before anything is executed, so
every operation can be previewed with a dry run.
"""

__version__ = "1.0.0"

from .config import Config, load_config
from .models import DuplicateGroup, MoveAction, RenameAction
from .operations import (
    delete_duplicates,
    execute_moves,
    execute_renames,
    find_duplicates,
    plan_organize,
    plan_rename,
    scan_duplicates,
)
from .rules import CustomRule, match_rules

__all__ = [
    "Config",
    "CustomRule",
    "DuplicateGroup",
    "MoveAction",
    "RenameAction",
    "delete_duplicates",
    "execute_moves",
    "execute_renames",
    "find_duplicates",
    "load_config",
    "match_rules",
    "plan_organize",
    "plan_rename",
    "scan_duplicates",
]

"""
Value objects shared by planners, executors and reports.

Actions describe intended filesystem changes; nothing here touches disk.
The `to_dict` methods give the JSON shape used in report files.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class FileRecord:
    """Per-file facts read at plan time."""
    path: Path
    extension: str
    size_bytes: int
    created_at: datetime
    stem: str


@dataclass(frozen=True)
class MoveAction:
    """One planned move. Produced by the organize planner."""
    source_path: Path
    destination_path: Path
    file_name: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "sourcePath": str(self.source_path),
            "destinationPath": str(self.destination_path),
            "fileName": self.file_name,
        }


@dataclass(frozen=True)
class RenameAction:
    """One planned rename. Produced by the rename planner."""
    old_path: Path
    new_path: Path
    old_name: str
    new_name: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "oldPath": str(self.old_path),
            "newPath": str(self.new_path),
            "oldName": self.old_name,
            "newName": self.new_name,
        }


@dataclass(frozen=True)
class DuplicateGroup:
    """
    Files sharing one content hash.

    The first member is kept by convention; the rest are deletion candidates.
    """
    content_hash: str
    member_paths: List[Path]
    size_bytes: int

    @property
    def reclaimable_bytes(self) -> int:
        return (len(self.member_paths) - 1) * self.size_bytes

    @property
    def extras(self) -> List[Path]:
        return self.member_paths[1:]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "contentHash": self.content_hash,
            "memberPaths": [str(p) for p in self.member_paths],
            "sizeBytes": self.size_bytes,
        }


@dataclass(frozen=True)
class SkippedFile:
    """A file left out of a result, with the reason."""
    path: Path
    reason: str


@dataclass(frozen=True)
class DuplicateScan:
    """Duplicate groups found under a root, plus the files that could not be read."""
    groups: List[DuplicateGroup]
    skipped: List[SkippedFile] = field(default_factory=list)

    @property
    def total_reclaimable_bytes(self) -> int:
        return sum(group.reclaimable_bytes for group in self.groups)


@dataclass(frozen=True)
class OperationError:
    """A failed action recorded by an executor."""
    path: Path
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"path": str(self.path), "message": self.message}


@dataclass(frozen=True)
class OperationReport:
    """
    Record of one organize, rename or duplicates run.

    Built once after the run and written once.
    """
    timestamp: datetime
    operation: str
    target_path: Path
    files_moved: Optional[List[MoveAction]] = None
    files_renamed: Optional[List[RenameAction]] = None
    duplicate_groups: Optional[List[DuplicateGroup]] = None
    space_saved_bytes: Optional[int] = None
    errors: List[OperationError] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "timestamp": self.timestamp.isoformat(),
            "operation": self.operation,
            "targetPath": str(self.target_path),
        }
        if self.files_moved is not None:
            data["filesMoved"] = [a.to_dict() for a in self.files_moved]
        if self.files_renamed is not None:
            data["filesRenamed"] = [a.to_dict() for a in self.files_renamed]
        if self.duplicate_groups is not None:
            data["duplicateGroups"] = [g.to_dict() for g in self.duplicate_groups]
        if self.space_saved_bytes is not None:
            data["spaceSavedBytes"] = self.space_saved_bytes
        data["errors"] = [e.to_dict() for e in self.errors]
        return data

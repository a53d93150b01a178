"""
Operation reports.

After an organize, rename or duplicates run the CLI writes one JSON report
(report.json in the working directory unless another path is given).
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from .config import REPORT_FILENAME
from .models import (
    DuplicateGroup,
    MoveAction,
    OperationError,
    OperationReport,
    RenameAction,
)


def organize_report(
    target_path: Path,
    actions: Sequence[MoveAction],
    errors: Sequence[OperationError] = (),
) -> OperationReport:
    return OperationReport(
        timestamp=datetime.now().astimezone(),
        operation="organize",
        target_path=target_path,
        files_moved=list(actions),
        errors=list(errors),
    )


def rename_report(
    target_path: Path,
    actions: Sequence[RenameAction],
    errors: Sequence[OperationError] = (),
) -> OperationReport:
    return OperationReport(
        timestamp=datetime.now().astimezone(),
        operation="rename",
        target_path=target_path,
        files_renamed=list(actions),
        errors=list(errors),
    )


def duplicates_report(
    target_path: Path,
    groups: Sequence[DuplicateGroup],
    errors: Sequence[OperationError] = (),
) -> OperationReport:
    return OperationReport(
        timestamp=datetime.now().astimezone(),
        operation="duplicates",
        target_path=target_path,
        duplicate_groups=list(groups),
        space_saved_bytes=sum(g.reclaimable_bytes for g in groups),
        errors=list(errors),
    )


def write_report(report: OperationReport, output_path: Optional[Path] = None) -> Path:
    """
    Write a report as indented JSON.

    Args:
        report: Report to write
        output_path: Destination (default: ./report.json)

    Returns:
        Path the report was written to
    """
    path = output_path or Path.cwd() / REPORT_FILENAME
    path.write_text(json.dumps(report.to_dict(), indent=2) + "\n", encoding="utf-8")
    return path

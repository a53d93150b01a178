"""
Custom organize rules.

A rule maps files to a folder when every predicate it carries holds.
Rules are checked in list order and the first full match wins; nothing is
scored, reordered, or merged.
"""

import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

BYTES_PER_MB = 1024 * 1024


@dataclass(frozen=True)
class CustomRule:
    """
    A user-supplied rule from the config file.

    Example:
        # PDFs go to "papers", anything over 100 MB goes to "large-files"
        rules = [
            CustomRule(folder="papers", extension=".pdf"),
            CustomRule(folder="large-files", min_size_bytes=100 * BYTES_PER_MB),
        ]
    """
    folder: str
    extension: Optional[str] = None
    min_size_bytes: Optional[int] = None
    max_size_bytes: Optional[int] = None

    def matches(self, extension: str, size_bytes: int) -> bool:
        """Check whether all predicates present on this rule hold."""
        if self.extension is not None and self.extension.lower() != extension.lower():
            return False
        if self.min_size_bytes is not None and size_bytes < self.min_size_bytes:
            return False
        if self.max_size_bytes is not None and size_bytes > self.max_size_bytes:
            return False
        return True


def match_rules(
    extension: str,
    size_bytes: int,
    rules: Sequence[CustomRule],
) -> Optional[str]:
    """
    Find the folder of the first rule matching a file.

    Args:
        extension: File extension including dot (e.g., ".pdf"), or ""
        size_bytes: File size in bytes
        rules: Rules in priority order

    Returns:
        Folder name of the first matching rule, or None if no rule matches
    """
    for rule in rules:
        if rule.matches(extension, size_bytes):
            return rule.folder
    return None


def _normalize_extension(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    ext = str(value).lower()
    if not ext.startswith("."):
        ext = "." + ext
    return ext


def _size_bound(
    data: Dict[str, Any],
    bytes_key: str,
    mb_key: str,
    round_bytes: Callable[[float], int],
) -> Optional[int]:
    """
    Read one size bound in bytes.

    Raises:
        ValueError: If the bound is not a number
    """
    if data.get(bytes_key) is not None:
        raw, scale = data[bytes_key], 1
    elif data.get(mb_key) is not None:
        raw, scale = data[mb_key], BYTES_PER_MB
    else:
        return None
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        raise ValueError(f"{bytes_key}/{mb_key} must be a number, got {raw!r}")
    value = float(raw) * scale
    if not math.isfinite(value):
        raise ValueError(f"{bytes_key}/{mb_key} must be finite, got {raw!r}")
    return round_bytes(value)


def rule_from_dict(data: Dict[str, Any]) -> Optional[CustomRule]:
    """
    Build a rule from its JSON form.

    Sizes may be given in bytes (minSizeBytes/maxSizeBytes) or in
    mebibytes (minSizeMB/maxSizeMB). Bytes win when both are present.

    Args:
        data: One entry of the config's "rules" list

    Returns:
        The rule, or None if the entry has no usable folder or a size
        bound that is not a number
    """
    if not isinstance(data, dict):
        return None
    folder = data.get("folder")
    if not isinstance(folder, str) or not folder.strip():
        return None
    try:
        # Fractional bounds round inward
        min_size = _size_bound(data, "minSizeBytes", "minSizeMB", math.ceil)
        max_size = _size_bound(data, "maxSizeBytes", "maxSizeMB", math.floor)
    except ValueError:
        return None
    return CustomRule(
        folder=folder,
        extension=_normalize_extension(data.get("extension")),
        min_size_bytes=min_size,
        max_size_bytes=max_size,
    )


def rules_from_list(items: Any) -> List[CustomRule]:
    """Build rules from the config's "rules" list, dropping unusable entries."""
    if not isinstance(items, list):
        return []
    rules = []
    for item in items:
        rule = rule_from_dict(item)
        if rule is not None:
            rules.append(rule)
    return rules

"""
Configuration for filetool.

Uses a dataclass to make configuration testable and injectable.
Default values are the built-in behavior; a `.filetoolrc.json` file in the
working directory can override rules, folder mapping, the rename template
and the dry-run default.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

from .rules import CustomRule, rules_from_list

CONFIG_FILENAME = ".filetoolrc.json"
REPORT_FILENAME = "report.json"
DEFAULT_RENAME_TEMPLATE = "{date}_{index}"

# Written by `filetool init`
DEFAULT_CONFIG_DOCUMENT: Dict[str, Any] = {
    "rules": [
        {"extension": ".pdf", "folder": "documents"},
        {"minSizeMB": 100, "folder": "large-files"},
    ],
    "folderMapping": {},
    "renameTemplate": DEFAULT_RENAME_TEMPLATE,
    "defaultDryRun": False,
}


@dataclass
class Config:
    """
    Configuration for organize, rename and duplicate operations.

    All settings can be overridden when creating a Config instance,
    making it easy to test with different values.

    Example:
        # Use defaults
        config = Config()

        # Override for testing
        config = Config(rules=[CustomRule(folder="papers", extension=".pdf")])
    """

    # File extension to category mapping (organize by type)
    categories: Dict[str, Set[str]] = field(default_factory=lambda: {
        "images": {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".tiff", ".tif", ".svg", ".ico"},
        "videos": {".mp4", ".mov", ".avi", ".mkv", ".webm", ".wmv", ".flv", ".m4v"},
        "documents": {".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx", ".txt", ".rtf", ".odt", ".ods"},
        "archives": {".zip", ".rar", ".7z", ".tar", ".gz", ".bz2"},
        "audio": {".mp3", ".wav", ".flac", ".aac", ".ogg"},
    })

    # Default category for unrecognized or missing extensions
    default_category: str = "others"

    # Extension -> folder overrides, checked before `categories`
    folder_mapping: Dict[str, str] = field(default_factory=dict)

    # Custom rules, first match wins
    rules: List[CustomRule] = field(default_factory=list)

    # Rename settings
    rename_template: str = DEFAULT_RENAME_TEMPLATE

    default_dry_run: bool = False

    # Duplicate detection settings
    hash_buffer_size: int = 64 * 1024

    def get_category(self, extension: str) -> str:
        """
        Get the folder for a file extension.

        Args:
            extension: File extension including dot (e.g., ".jpg"), or ""

        Returns:
            Folder name, or default_category if the extension is unmapped
        """
        ext_lower = extension.lower()
        if not ext_lower:
            return self.default_category
        if ext_lower in self.folder_mapping:
            return self.folder_mapping[ext_lower]
        for category, extensions in self.categories.items():
            if ext_lower in extensions:
                return category
        return self.default_category

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """
        Build a Config from a parsed `.filetoolrc.json` document.

        Missing keys keep their built-in defaults.
        """
        config = cls()
        config.rules = rules_from_list(data.get("rules"))

        mapping = data.get("folderMapping")
        if isinstance(mapping, dict):
            config.folder_mapping = {
                _dotted(ext): folder
                for ext, folder in mapping.items()
                if isinstance(folder, str) and folder
            }

        template = data.get("renameTemplate")
        if isinstance(template, str) and template:
            config.rename_template = template

        if isinstance(data.get("defaultDryRun"), bool):
            config.default_dry_run = data["defaultDryRun"]

        return config


def _dotted(extension: str) -> str:
    ext = extension.lower()
    return ext if ext.startswith(".") else "." + ext


# Default configuration instance
DEFAULT_CONFIG = Config()


def folder_for_extension(extension: str, config: Config = DEFAULT_CONFIG) -> str:
    """Look up the default folder for an extension ("others" if unmapped)."""
    return config.get_category(extension)


@dataclass(frozen=True)
class ConfigLoadResult:
    """Outcome of reading the config file: the config in effect and why."""
    config: Config
    path: Path
    loaded: bool
    reason: Optional[str] = None


def get_config_path(directory: Optional[Path] = None) -> Path:
    """Path of the config file in `directory` (default: working directory)."""
    return (directory or Path.cwd()) / CONFIG_FILENAME


def load_config(config_path: Optional[Path] = None) -> ConfigLoadResult:
    """
    Load the config file, falling back to built-in defaults.

    A missing file, unreadable file or invalid JSON is never fatal: the
    result carries the default Config and the reason it was not loaded.

    Args:
        config_path: Config file to read (default: ./.filetoolrc.json)

    Returns:
        ConfigLoadResult with the Config to use
    """
    path = config_path or get_config_path()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return ConfigLoadResult(Config(), path, loaded=False, reason="not found")
    except (OSError, ValueError) as e:
        return ConfigLoadResult(Config(), path, loaded=False, reason=str(e))

    if not isinstance(data, dict):
        return ConfigLoadResult(Config(), path, loaded=False, reason="expected a JSON object")

    return ConfigLoadResult(Config.from_dict(data), path, loaded=True)


def write_default_config(config_path: Optional[Path] = None) -> bool:
    """
    Create a config file with the default document.

    Args:
        config_path: Where to write (default: ./.filetoolrc.json)

    Returns:
        True if the file was created, False if it already existed
    """
    path = config_path or get_config_path()
    if path.exists():
        return False
    path.write_text(json.dumps(DEFAULT_CONFIG_DOCUMENT, indent=2) + "\n", encoding="utf-8")
    return True

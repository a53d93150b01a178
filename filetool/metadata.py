"""
File metadata for the `metadata` command.

Builds on the stat-based readers in utils and, for images, asks Pillow for
pixel dimensions and EXIF tags. Image read failures are ignored; the stat
fields are always present.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from PIL import Image, UnidentifiedImageError
from PIL.ExifTags import TAGS

from .utils import (
    format_file_size,
    get_extension,
    get_file_created,
    get_file_mtime,
    get_file_size_bytes,
)

# Image extensions we try to read with Pillow
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".tiff", ".tif", ".bmp"}

TYPE_LABELS = {
    ".jpg": "Image", ".jpeg": "Image", ".png": "Image", ".gif": "Image", ".webp": "Image",
    ".pdf": "Document", ".doc": "Document", ".docx": "Document",
    ".mp4": "Video", ".mov": "Video", ".avi": "Video",
    ".zip": "Archive", ".rar": "Archive", ".7z": "Archive",
}


@dataclass(frozen=True)
class FileMetadata:
    """Metadata shown for a single file."""
    path: Path
    size_bytes: int
    size_formatted: str
    created_at: datetime
    modified_at: datetime
    extension: str
    type_label: str
    dimensions: Optional[str] = None
    exif: Optional[Dict[str, Any]] = None


def get_type_label(extension: str) -> str:
    """Human-readable type for an extension ("File" if unknown)."""
    return TYPE_LABELS.get(extension.lower(), "File")


def read_image_info(file_path: Path) -> Tuple[Optional[str], Optional[Dict[str, Any]]]:
    """
    Read pixel dimensions and EXIF tags from an image.

    Args:
        file_path: Path to an image file

    Returns:
        ("W x H", {tag name: value}) with None for whatever could not be read
    """
    try:
        with Image.open(file_path) as im:
            dimensions = f"{im.width} x {im.height}"
            raw = im.getexif()
    except (UnidentifiedImageError, OSError):
        return None, None

    exif = {TAGS.get(tag, str(tag)): value for tag, value in raw.items()}
    return dimensions, exif or None


def get_metadata(file_path: Path) -> FileMetadata:
    """
    Extract metadata for one file: stat fields plus image details.

    Raises:
        OSError: If the file cannot be stat'ed
    """
    size = get_file_size_bytes(file_path)
    extension = get_extension(file_path)

    dimensions = None
    exif = None
    if extension in IMAGE_EXTENSIONS:
        dimensions, exif = read_image_info(file_path)

    return FileMetadata(
        path=file_path,
        size_bytes=size,
        size_formatted=format_file_size(size),
        created_at=get_file_created(file_path),
        modified_at=get_file_mtime(file_path),
        extension=extension,
        type_label=get_type_label(extension),
        dimensions=dimensions,
        exif=exif,
    )

"""
Pytest fixtures for filetool tests.

Provides reusable test fixtures for creating temporary directories,
test files, and configurations.
"""

import pytest
from datetime import datetime
from pathlib import Path

from filetool.config import Config
from filetool.rules import CustomRule


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Create a temporary directory for testing."""
    return tmp_path


@pytest.fixture
def test_config() -> Config:
    """Create a test configuration with a small-file rule."""
    return Config(
        rules=[
            CustomRule(folder="papers", extension=".pdf"),
            CustomRule(folder="large-files", min_size_bytes=1024),
        ],
        hash_buffer_size=16,
    )


@pytest.fixture
def sample_files(temp_dir: Path) -> dict:
    """
    Create sample files of different types for testing.

    Each file has UNIQUE content to avoid being detected as duplicates.

    Returns a dict mapping expected folder to list of created files.
    """
    files = {
        "images": [],
        "documents": [],
        "audio": [],
        "others": [],
    }

    for i, ext in enumerate([".jpg", ".png"]):
        f = temp_dir / f"image{ext}"
        f.write_text(f"fake image content {i} {ext}")  # Unique per file
        files["images"].append(f)

    for i, ext in enumerate([".pdf", ".txt"]):
        f = temp_dir / f"document{ext}"
        f.write_text(f"fake document content {i} {ext}")
        files["documents"].append(f)

    f = temp_dir / "audio.mp3"
    f.write_text("fake audio content")
    files["audio"].append(f)

    # Unknown and missing extensions
    for name in ["unknown.xyz", "README"]:
        f = temp_dir / name
        f.write_text(f"other content {name}")
        files["others"].append(f)

    return files


@pytest.fixture
def duplicate_files(temp_dir: Path) -> list:
    """Create duplicate files with identical content."""
    content = "This is duplicate content that will produce the same hash."

    files = []
    for name in ["x.txt", "y.txt"]:
        f = temp_dir / name
        f.write_text(content)
        files.append(f)

    return files


@pytest.fixture
def fixed_created():
    """Creation time reader that reports the same moment for every file."""
    moment = datetime(2024, 1, 1, 12, 0, 0)

    def reader(path: Path) -> datetime:
        return moment

    return reader


@pytest.fixture
def capture_output() -> list:
    """Create a list to capture output from operations."""
    return []


@pytest.fixture
def output_callback(capture_output: list):
    """Create an output callback that captures messages."""
    def callback(message: str) -> None:
        capture_output.append(message)
    return callback

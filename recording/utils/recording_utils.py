"""
Recording Utilities

Shared utility functions for recording operations.
Extracted here to follow DRY (Don't Repeat Yourself) principle.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from config.settings import (
    DEFAULT_AUDIO_FORMAT,
    DEFAULT_VIDEO_FORMAT,
    OUTPUT_FILENAME_FORMAT,
)
from recording.constants import RecordingMode

logger = logging.getLogger(__name__)


def default_extension(mode: RecordingMode) -> str:
    """Container used when the user gives no extension."""
    if mode == RecordingMode.AUDIO:
        return DEFAULT_AUDIO_FORMAT
    return DEFAULT_VIDEO_FORMAT


def generate_filename(
    base_path: Path,
    mode: RecordingMode = RecordingMode.VIDEO,
    timestamp: Optional[datetime] = None,
    format_string: str = OUTPUT_FILENAME_FORMAT,
) -> Path:
    """
    Generate timestamped filename for recording.

    Args:
        base_path: Directory where file will be saved
        mode: Recording mode, picks the default extension
        timestamp: Time to encode (default: now)
        format_string: strftime format for filename

    Returns:
        Complete file path with timestamp

    Example:
        path = generate_filename(Path("."), RecordingMode.AUDIO)
        # Returns: recording_2025-01-15_143022.mp3
    """
    timestamp = timestamp or datetime.now()
    filename = f"{timestamp.strftime(format_string)}.{default_extension(mode)}"
    return base_path / filename


def ensure_extension(path: Path, mode: RecordingMode) -> Path:
    """
    Append the mode's default extension if the path has none.

    Paths that already have an extension are returned unchanged, even if
    the extension is unsupported (validation reports that separately).

    Example:
        ensure_extension(Path("demo"), RecordingMode.VIDEO)  # demo.mp4
    """
    if path.suffix:
        return path

    extended = path.with_name(f"{path.name}.{default_extension(mode)}")
    logger.info(f"No extension given, recording to {extended}")
    return extended


def validate_output_path(path: Path) -> tuple[bool, Optional[str]]:
    """
    Validate output path for recording.

    Checks:
    - Parent directory exists or can be created
    - Parent is a directory
    - Directory is writable

    Args:
        path: Output file path to validate

    Returns:
        Tuple of (is_valid, error_message)
        error_message is None if valid

    Example:
        valid, error = validate_output_path(Path("clips/demo.mp4"))
        if not valid:
            print(f"Invalid path: {error}")
    """
    parent = path.parent
    if not parent.exists():
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return False, f"Cannot create directory: {e}"

    if not parent.is_dir():
        return False, f"Parent path is not a directory: {parent}"

    # Try to write a test file
    test_file = parent / ".write_test"
    try:
        test_file.touch()
        test_file.unlink()
    except OSError as e:
        return False, f"Directory not writable: {e}"

    return True, None


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted string (e.g., "42.3 MB", "1.2 GB")

    Example:
        size = format_file_size(45000000)
        print(size)  # "42.9 MB"
    """
    # Handle negative or zero
    if size_bytes <= 0:
        return "0 B"

    units = ['B', 'KB', 'MB', 'GB', 'TB']
    unit_index = 0
    size = float(size_bytes)

    while size >= 1024.0 and unit_index < len(units) - 1:
        size /= 1024.0
        unit_index += 1

    if unit_index == 0:
        return f"{int(size)} {units[unit_index]}"
    return f"{size:.1f} {units[unit_index]}"


def format_duration(seconds: float) -> str:
    """
    Format duration in seconds to human-readable string.

    Example:
        format_duration(630) -> "10:30"
        format_duration(3725) -> "1:02:05"
    """
    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"

"""
Recording Utilities Package

Exposes shared utility functions for recording operations.
"""

from recording.utils.recording_utils import (
    default_extension,
    ensure_extension,
    format_duration,
    format_file_size,
    generate_filename,
    validate_output_path,
)
from recording.utils.selection import parse_xwininfo, select_area, select_window

# Public API
__all__ = [
    "default_extension",
    "ensure_extension",
    "format_duration",
    "format_file_size",
    "generate_filename",
    "parse_xwininfo",
    "select_area",
    "select_window",
    "validate_output_path",
]

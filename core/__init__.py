"""
Core utilities and modules.

Public API:
    - DisplayServer: X11 / Wayland tag, selected once at startup
    - detect_display_server: Read XDG_SESSION_TYPE
    - check_dependencies: Raise if required binaries are missing
    - list_audio_sources / list_windows: Device enumeration
    - RecorderError and subclasses: Error kinds reported to the user

Usage:
    from core import detect_display_server, check_dependencies

    display_server = detect_display_server()
    check_dependencies(display_server)
"""

from core.devices import AudioSourceInfo, WindowInfo, list_audio_sources, list_windows
from core.environment import (
    DisplayInfo,
    DisplayServer,
    check_dependencies,
    detect_display_server,
    find_missing_dependencies,
    find_missing_optional_dependencies,
    format_install_hints,
    get_display_info,
)
from core.exceptions import (
    ChildProcessFailureError,
    MissingDependencyError,
    ProcessSpawnError,
    RecorderError,
    SelectionCancelledError,
    UnsupportedFormatError,
)

__all__ = [
    "AudioSourceInfo",
    "ChildProcessFailureError",
    "DisplayInfo",
    "DisplayServer",
    "MissingDependencyError",
    "ProcessSpawnError",
    "RecorderError",
    "SelectionCancelledError",
    "UnsupportedFormatError",
    "WindowInfo",
    "check_dependencies",
    "detect_display_server",
    "find_missing_dependencies",
    "find_missing_optional_dependencies",
    "format_install_hints",
    "get_display_info",
    "list_audio_sources",
    "list_windows",
]

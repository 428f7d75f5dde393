"""
Environment Detection

Read-only inspection of the desktop session the recorder runs in:
- Which display server is active (X11 or Wayland)
- Which helper binaries are installed
- Screen resolution of the primary output

Nothing here changes system state; callers decide what to do with the
results (e.g. abort when dependencies are missing).
"""

import logging
import os
import re
import shutil
import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Mapping, Optional

from config.settings import (
    DEFAULT_DISPLAY_HEIGHT,
    DEFAULT_DISPLAY_WIDTH,
    QUERY_TIMEOUT,
)
from core.exceptions import MissingDependencyError

logger = logging.getLogger(__name__)


class DisplayServer(Enum):
    """Windowing system; selected once at startup."""

    X11 = "x11"
    WAYLAND = "wayland"


@dataclass(frozen=True)
class DisplayInfo:
    """Resolution of the primary output."""

    width: int
    height: int
    detected: bool = True

    @property
    def size(self) -> str:
        return f"{self.width}x{self.height}"


# =============================================================================
# DEPENDENCY TABLES
# =============================================================================

COMMON_DEPENDENCIES = ["ffmpeg"]

REQUIRED_DEPENDENCIES = {
    DisplayServer.WAYLAND: ["wf-recorder", "pipewire", "wireplumber", "slurp"],
    DisplayServer.X11: ["xrandr", "pulseaudio"],
}

# Only needed by individual features (listing windows, interactive selection)
OPTIONAL_DEPENDENCIES = {
    DisplayServer.WAYLAND: ["wlr-randr"],
    DisplayServer.X11: ["wmctrl", "slop", "xwininfo"],
}

INSTALL_COMMANDS = [
    ("Arch Linux", "sudo pacman -S"),
    ("Ubuntu/Debian", "sudo apt install"),
    ("Fedora", "sudo dnf install"),
]


def detect_display_server(environ: Optional[Mapping[str, str]] = None) -> DisplayServer:
    """
    Detect the active display server from XDG_SESSION_TYPE.

    Anything other than "wayland" is treated as X11, matching what
    x11grab can capture (including XWayland-less X sessions).

    Args:
        environ: Environment mapping (default: os.environ)

    Returns:
        DisplayServer.WAYLAND or DisplayServer.X11
    """
    environ = os.environ if environ is None else environ
    session_type = environ.get("XDG_SESSION_TYPE", "").strip().lower()

    if session_type == "wayland":
        return DisplayServer.WAYLAND
    return DisplayServer.X11


def get_required_dependencies(display_server: DisplayServer) -> List[str]:
    """Binaries that must be present to record on this display server."""
    return COMMON_DEPENDENCIES + REQUIRED_DEPENDENCIES[display_server]


def get_optional_dependencies(display_server: DisplayServer) -> List[str]:
    """Binaries used only by specific features."""
    return list(OPTIONAL_DEPENDENCIES[display_server])


def find_missing_dependencies(
    display_server: DisplayServer,
    which: Callable[[str], Optional[str]] = shutil.which,
) -> List[str]:
    """
    Report required binaries that are not on PATH.

    Args:
        display_server: Display server to check requirements for
        which: Lookup function (injectable for tests)

    Returns:
        Names of missing binaries, in declaration order (empty if all found)
    """
    missing = [dep for dep in get_required_dependencies(display_server) if not which(dep)]

    if missing:
        logger.debug(f"Missing dependencies for {display_server.value}: {missing}")
    return missing


def find_missing_optional_dependencies(
    display_server: DisplayServer,
    which: Callable[[str], Optional[str]] = shutil.which,
) -> List[str]:
    """Optional binaries that are not on PATH (never fatal)."""
    return [dep for dep in get_optional_dependencies(display_server) if not which(dep)]


def format_install_hints(missing: List[str]) -> str:
    """
    Build per-distribution install commands for the missing binaries.

    Example:
        format_install_hints(["ffmpeg"])
        # Arch Linux:
        #   sudo pacman -S ffmpeg
        # ...
    """
    packages = " ".join(missing)
    lines = []
    for distro, command in INSTALL_COMMANDS:
        lines.append(f"{distro}:")
        lines.append(f"  {command} {packages}")
    return "\n".join(lines)


def check_dependencies(
    display_server: DisplayServer,
    which: Callable[[str], Optional[str]] = shutil.which,
) -> None:
    """
    Verify required binaries are installed.

    Raises:
        MissingDependencyError: If any required binary is absent
    """
    missing = find_missing_dependencies(display_server, which=which)
    if missing:
        raise MissingDependencyError(missing, hints=format_install_hints(missing))

    logger.debug(f"All {display_server.value} dependencies present")


def run_query(command: List[str]) -> Optional[str]:
    """
    Run a read-only query command and return its stdout.

    Returns None when the binary is missing, times out, or exits non-zero.
    Output is forced to the C locale so parsers see stable text.
    """
    env = {**os.environ, "LC_ALL": "C"}
    try:
        result = subprocess.run(
            command,
            check=False,
            capture_output=True,
            text=True,
            timeout=QUERY_TIMEOUT,
            env=env,
        )
    except FileNotFoundError:
        logger.debug(f"{command[0]} not found")
        return None
    except subprocess.TimeoutExpired:
        logger.warning(f"{command[0]} timed out after {QUERY_TIMEOUT}s")
        return None

    if result.returncode != 0:
        logger.debug(f"{' '.join(command)} exited with code {result.returncode}")
        return None

    return result.stdout


def get_display_info(display_server: DisplayServer) -> DisplayInfo:
    """
    Query the primary output resolution.

    Wayland uses wlr-randr (the "current" mode line), X11 uses xrandr
    (the output positioned at +0+0). Falls back to 1920x1080.
    """
    fallback = DisplayInfo(DEFAULT_DISPLAY_WIDTH, DEFAULT_DISPLAY_HEIGHT, detected=False)

    if display_server == DisplayServer.WAYLAND:
        output = run_query(["wlr-randr"])
        if output is None:
            return fallback
        for line in output.splitlines():
            if "current" in line:
                match = re.search(r"(\d+)x(\d+)", line)
                if match:
                    return DisplayInfo(int(match.group(1)), int(match.group(2)))
        return fallback

    output = run_query(["xrandr"])
    if output is None:
        return fallback
    match = re.search(r"(\d+)x(\d+)\+0\+0", output)
    if match:
        return DisplayInfo(int(match.group(1)), int(match.group(2)))
    return fallback

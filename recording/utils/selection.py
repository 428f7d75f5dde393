"""
Interactive Selection Helpers

Runs the external selection tool synchronously and turns its output
into a Rect:
- Wayland: slurp prints "x,y wxh"
- X11: slop prints the same format when given SLOP_FORMAT
- X11 windows: xwininfo prints a block with absolute position and size

These are the only calls the command builder makes that block on the user.
"""

import logging
import re
import subprocess
from typing import List

from config.settings import SLOP_FORMAT
from core.environment import DisplayServer
from core.exceptions import MissingDependencyError, SelectionCancelledError
from recording.models.recording_request import Rect

logger = logging.getLogger(__name__)

_XWININFO_FIELDS = {
    "x": re.compile(r"Absolute upper-left X:\s*(-?\d+)"),
    "y": re.compile(r"Absolute upper-left Y:\s*(-?\d+)"),
    "width": re.compile(r"^\s*Width:\s*(\d+)", re.MULTILINE),
    "height": re.compile(r"^\s*Height:\s*(\d+)", re.MULTILINE),
}


def get_area_selector_command(display_server: DisplayServer) -> List[str]:
    """Selection tool for drawing a rectangle on this display server."""
    if display_server == DisplayServer.WAYLAND:
        return ["slurp"]
    return ["slop", "-f", SLOP_FORMAT]


def _run_selector(command: List[str]) -> str:
    """
    Run a selection tool, letting it talk to the terminal on stderr.

    Returns:
        Stripped stdout

    Raises:
        MissingDependencyError: Tool not installed
        SelectionCancelledError: Tool exited non-zero or printed nothing
    """
    logger.debug(f"Running selection helper: {' '.join(command)}")

    try:
        result = subprocess.run(
            command,
            check=False,
            stdout=subprocess.PIPE,
            text=True,
        )
    except FileNotFoundError:
        raise MissingDependencyError([command[0]]) from None

    output = (result.stdout or "").strip()
    if result.returncode != 0 or not output:
        raise SelectionCancelledError("Area selection cancelled")

    return output


def select_area(display_server: DisplayServer) -> Rect:
    """
    Let the user draw the recording area.

    Example:
        rect = select_area(DisplayServer.WAYLAND)
        print(rect.to_geometry())  # "120,80 1280x720"
    """
    print("🎯 Use your mouse to select the recording area...")
    print("📌 Click and drag to select the area")

    output = _run_selector(get_area_selector_command(display_server))

    # Only the first line carries the geometry
    geometry = output.splitlines()[0]
    try:
        rect = Rect.from_geometry(geometry)
    except ValueError as e:
        raise SelectionCancelledError(f"Unexpected selection output: {geometry!r}") from e

    print(f"✅ Selected area: {rect.to_geometry()}")
    return rect


def parse_xwininfo(output: str) -> Rect:
    """
    Extract the window rectangle from xwininfo output.

    Raises:
        ValueError: If a field is missing
    """
    values = {}
    for name, pattern in _XWININFO_FIELDS.items():
        match = pattern.search(output)
        if not match:
            raise ValueError(f"xwininfo output has no {name}")
        values[name] = int(match.group(1))

    # Windows partly off-screen report negative offsets; clamp to the screen
    return Rect(
        x=max(0, values["x"]),
        y=max(0, values["y"]),
        width=values["width"],
        height=values["height"],
    )


def select_window() -> Rect:
    """
    Let the user click the window to record (X11 only).

    Raises:
        MissingDependencyError: xwininfo not installed
        SelectionCancelledError: Selection aborted or unreadable
    """
    print("🪟 Click the window you want to record...")

    output = _run_selector(["xwininfo"])
    try:
        rect = parse_xwininfo(output)
    except ValueError as e:
        raise SelectionCancelledError(f"Could not read window geometry: {e}") from e

    print(f"✅ Selected window: {rect.to_geometry()}")
    return rect

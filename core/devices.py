"""
Device Enumeration

Lists what can be recorded from:
- Audio sources via `pactl list sources short` (PulseAudio / pipewire-pulse)
- Top-level windows via `wmctrl -l -G -p` (X11 only)

Both are best-effort: a failed query yields an empty list.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from core.environment import DisplayServer, run_query

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AudioSourceInfo:
    """One line of `pactl list sources short`."""

    raw: str
    index: Optional[int] = None
    name: str = ""
    driver: str = ""
    sample_spec: str = ""
    state: str = ""

    @property
    def is_monitor(self) -> bool:
        """Monitor sources expose what another device is playing."""
        return self.name.endswith(".monitor")


@dataclass(frozen=True)
class WindowBounds:
    """Window position and size."""

    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True)
class WindowInfo:
    """Information about a window."""

    title: str
    window_id: str
    pid: Optional[int] = None
    bounds: Optional[WindowBounds] = None


def parse_audio_sources(output: str) -> List[AudioSourceInfo]:
    """
    Parse `pactl list sources short` output.

    Columns are tab separated: index, name, driver, sample spec, state.
    Lines that don't split cleanly are kept with only `raw` set.
    """
    sources = []
    for line in output.splitlines():
        line = line.strip()
        if not line:
            continue

        parts = line.split("\t")
        if len(parts) < 2:
            parts = line.split()

        if len(parts) >= 2 and parts[0].isdigit():
            padded = parts + [""] * (5 - len(parts))
            sources.append(AudioSourceInfo(
                raw=line,
                index=int(padded[0]),
                name=padded[1],
                driver=padded[2],
                sample_spec=padded[3],
                state=padded[4],
            ))
        else:
            sources.append(AudioSourceInfo(raw=line))

    return sources


def list_audio_sources() -> List[AudioSourceInfo]:
    """
    Enumerate audio sources.

    The same query serves X11 and Wayland sessions (pipewire-pulse
    answers pactl on Wayland desktops).
    """
    output = run_query(["pactl", "list", "sources", "short"])
    if output is None:
        logger.warning("Could not query audio sources (is pactl installed?)")
        return []
    return parse_audio_sources(output)


def parse_windows(output: str) -> List[WindowInfo]:
    """
    Parse `wmctrl -l -G -p` output.

    Columns: id, desktop, pid, x, y, width, height, host, title...
    """
    windows = []
    for line in output.splitlines():
        if not line.strip():
            continue

        parts = line.split(None, 8)
        if len(parts) < 8:
            continue

        try:
            pid = int(parts[2])
            bounds = WindowBounds(
                x=int(parts[3]),
                y=int(parts[4]),
                width=int(parts[5]),
                height=int(parts[6]),
            )
        except ValueError:
            logger.debug(f"Skipping unparsable wmctrl line: {line!r}")
            continue

        windows.append(WindowInfo(
            title=parts[8] if len(parts) > 8 else "",
            window_id=parts[0],
            pid=pid if pid != -1 else None,
            bounds=bounds,
        ))

    return windows


def list_windows(display_server: DisplayServer) -> List[WindowInfo]:
    """
    Enumerate top-level windows.

    Only X11 exposes other clients' windows; on Wayland this depends on
    compositor-specific protocols, so an empty list is returned.
    """
    if display_server == DisplayServer.WAYLAND:
        logger.warning("Single application recording on Wayland requires compositor support")
        return []

    output = run_query(["wmctrl", "-l", "-G", "-p"])
    if output is None:
        logger.warning("Could not list windows (is wmctrl installed?)")
        return []
    return parse_windows(output)

"""
Recording Request Model

Immutable description of one recording, built once from command-line
input and consumed by the CommandBuilder.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple

from config.settings import (
    DEFAULT_FRAMERATE,
    SUPPORTED_AUDIO_FORMATS,
    SUPPORTED_VIDEO_FORMATS,
)
from core.environment import DisplayServer
from core.exceptions import UnsupportedFormatError
from recording.constants import AudioSource, RecordingMode, RegionKind

# "x,y wxh" as printed by slurp and slop
_GEOMETRY_PATTERN = re.compile(r"^\s*(-?\d+),(-?\d+)\s+(\d+)x(\d+)\s*$")


@dataclass(frozen=True)
class Rect:
    """Screen rectangle in pixels."""

    x: int
    y: int
    width: int
    height: int

    def __post_init__(self):
        if self.x < 0 or self.y < 0:
            raise ValueError(f"Area offset must not be negative: {self.x},{self.y}")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Area size must be positive: {self.width}x{self.height}")

    @classmethod
    def parse(cls, text: str) -> "Rect":
        """
        Parse the command-line form "x,y,w,h".

        Raises:
            ValueError: If text is not four comma-separated integers

        Example:
            Rect.parse("100,100,800,600")
            # Rect(x=100, y=100, width=800, height=600)
        """
        parts = [part.strip() for part in text.split(",")]
        if len(parts) != 4:
            raise ValueError(f"Expected x,y,width,height but got: {text!r}")

        try:
            x, y, width, height = (int(part) for part in parts)
        except ValueError:
            raise ValueError(f"Area values must be integers: {text!r}") from None

        return cls(x, y, width, height)

    @classmethod
    def from_geometry(cls, text: str) -> "Rect":
        """
        Parse the selection-helper form "x,y wxh".

        Raises:
            ValueError: If text doesn't match the geometry format
        """
        match = _GEOMETRY_PATTERN.match(text)
        if not match:
            raise ValueError(f"Unrecognized geometry: {text!r}")
        x, y, width, height = (int(group) for group in match.groups())
        return cls(x, y, width, height)

    def to_geometry(self) -> str:
        """Format as "x,y wxh" (wf-recorder -g)."""
        return f"{self.x},{self.y} {self.width}x{self.height}"

    @property
    def size(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True)
class CaptureRegion:
    """Tagged capture area; `rect` is set only for RECTANGLE."""

    kind: RegionKind = RegionKind.FULLSCREEN
    rect: Optional[Rect] = None

    def __post_init__(self):
        if (self.kind == RegionKind.RECTANGLE) != (self.rect is not None):
            raise ValueError("A rectangle is required for, and only for, RECTANGLE regions")

    @classmethod
    def fullscreen(cls) -> "CaptureRegion":
        return cls(RegionKind.FULLSCREEN)

    @classmethod
    def rectangle(cls, rect: Rect) -> "CaptureRegion":
        return cls(RegionKind.RECTANGLE, rect)

    @classmethod
    def select(cls) -> "CaptureRegion":
        return cls(RegionKind.SELECT)

    @classmethod
    def window(cls) -> "CaptureRegion":
        return cls(RegionKind.WINDOW)


@dataclass(frozen=True)
class RecordingRequest:
    """
    Everything needed to build one delegate command.

    Read-only after construction. Call validate() before building;
    it enforces the output-format invariant.

    Usage:
        request = RecordingRequest(
            output=Path("demo.mp4"),
            display_server=DisplayServer.X11,
            audio_source=AudioSource.MICROPHONE,
        )
        request.validate()
    """

    output: Path
    display_server: DisplayServer
    record_video: bool = True
    audio_source: AudioSource = AudioSource.NONE
    region: CaptureRegion = field(default_factory=CaptureRegion.fullscreen)
    framerate: int = DEFAULT_FRAMERATE
    audio_device: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def record_audio(self) -> bool:
        return self.audio_source != AudioSource.NONE

    @property
    def mode(self) -> RecordingMode:
        return RecordingMode.VIDEO if self.record_video else RecordingMode.AUDIO

    @property
    def extension(self) -> str:
        """Lower-case output extension without the dot ("" if none)."""
        return self.output.suffix.lower().lstrip(".")

    @property
    def supported_formats(self) -> Tuple[str, ...]:
        if self.mode == RecordingMode.VIDEO:
            return SUPPORTED_VIDEO_FORMATS
        return SUPPORTED_AUDIO_FORMATS

    def validate(self) -> None:
        """
        Check the request can be turned into a command.

        Raises:
            UnsupportedFormatError: Extension not supported for the mode
            ValueError: Non-positive framerate, or audio-only without audio
        """
        if self.extension not in self.supported_formats:
            raise UnsupportedFormatError(
                self.extension,
                self.supported_formats,
                self.mode.value,
            )

        if self.framerate <= 0:
            raise ValueError(f"Framerate must be positive: {self.framerate}")

        if not self.record_video and not self.record_audio:
            raise ValueError("Audio-only recording needs an audio source")

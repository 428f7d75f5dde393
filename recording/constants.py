"""
Recording Constants

Centralized enums and lookup tables for the recording system.
All codec choices, state names, and output markers in one place.

Why separate constants?
- Easy to tune encoder behavior
- Codec tables are fixed data, not logic
- Single source of truth for builder and tests

Note: Tunable values (framerate, devices, paths) live in config/settings.py.
This file contains only enums, codec tables, and output markers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Tuple

# =============================================================================
# RECORDING STATE TRACKING
# =============================================================================


class RecordingState(Enum):
    """
    States a supervised recording can be in.

    Lifecycle: IDLE -> LAUNCHING -> RUNNING -> TERMINATING -> DONE
    """

    IDLE = "idle"  # Nothing launched yet
    LAUNCHING = "launching"  # Spawning the delegate process
    RUNNING = "running"  # Delegate is recording
    TERMINATING = "terminating"  # Stop requested or delegate exited, awaiting exit
    DONE = "done"  # Exit observed, exit code available


# Allowed transitions; anything else is a programming error
STATE_TRANSITIONS: Dict[RecordingState, Tuple[RecordingState, ...]] = {
    RecordingState.IDLE: (RecordingState.LAUNCHING,),
    RecordingState.LAUNCHING: (RecordingState.RUNNING, RecordingState.DONE),
    RecordingState.RUNNING: (RecordingState.TERMINATING,),
    RecordingState.TERMINATING: (RecordingState.DONE,),
    RecordingState.DONE: (),
}


# =============================================================================
# REQUEST ENUMS
# =============================================================================


class AudioSource(Enum):
    """Which audio to capture."""

    NONE = "none"
    MICROPHONE = "microphone"
    INTERNAL = "internal"  # System output via the monitor device
    BOTH = "both"  # Requested, but recorded as INTERNAL (no mixing)


class RegionKind(Enum):
    """How the capture area is chosen."""

    FULLSCREEN = "fullscreen"
    RECTANGLE = "rectangle"  # Explicit x,y,w,h
    SELECT = "select"  # Drawn interactively with slurp / slop
    WINDOW = "window"  # Picked by clicking a window (X11)


class RecordingMode(Enum):
    """Determines the supported extension set."""

    VIDEO = "video"
    AUDIO = "audio"


# =============================================================================
# CODEC TABLES
# =============================================================================


@dataclass(frozen=True)
class VideoCodec:
    """Encoder settings for one video container."""

    video_codec: str
    video_options: Tuple[str, ...] = field(default_factory=tuple)
    audio_codec: str = "aac"


@dataclass(frozen=True)
class AudioCodec:
    """Encoder settings for one audio-only container."""

    codec: str
    options: Tuple[str, ...] = field(default_factory=tuple)


# x11grab -> ffmpeg
VIDEO_CODECS: Dict[str, VideoCodec] = {
    "mp4": VideoCodec("libx264", ("-preset", "ultrafast", "-crf", "23")),
    "mov": VideoCodec("libx264", ("-preset", "ultrafast", "-crf", "23")),
    "mkv": VideoCodec("libx264", ("-preset", "ultrafast")),
    "avi": VideoCodec("libx264"),
    "webm": VideoCodec("libvpx-vp9", audio_codec="libvorbis"),
}

# wf-recorder; software encoders only
WAYLAND_VIDEO_CODECS: Dict[str, VideoCodec] = {
    "mp4": VideoCodec("libx264"),
    "mov": VideoCodec("libx264"),
    "mkv": VideoCodec("libx264"),
    "avi": VideoCodec("libx264"),
    "webm": VideoCodec("libvpx-vp9", audio_codec="libvorbis"),
}

# pulse -> ffmpeg, no video
AUDIO_CODECS: Dict[str, AudioCodec] = {
    "mp3": AudioCodec("libmp3lame", ("-b:a", "192k")),
    "ogg": AudioCodec("libvorbis", ("-q:a", "6")),
    "wav": AudioCodec("pcm_s16le"),
    "flac": AudioCodec("flac", ("-compression_level", "8")),
    "aac": AudioCodec("aac", ("-b:a", "128k")),
}


# =============================================================================
# DELEGATE OUTPUT MARKERS
# =============================================================================

# Substrings in ffmpeg / wf-recorder stderr. Matching is cosmetic only:
# progress lines are echoed in place, error lines become warnings.
PROGRESS_MARKERS = ("frame=", "time=")
ERROR_MARKERS = ("error", "Error")

"""
Central Configuration File

ALL configuration values live here. This is the single source of truth.

Guidelines:
- Per-user overrides go in the environment or a .env file, NOT here
- Import these settings in modules: from config.settings import DEFAULT_FRAMERATE
- Nothing in this file is written back; the recorder persists no state
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# =============================================================================
# OUTPUT CONFIGURATION
# =============================================================================

# Directory for auto-named recordings (positional output path wins)
OUTPUT_DIR = Path(os.getenv("SCREENREC_OUTPUT_DIR", "."))

# Output File Naming
OUTPUT_FILENAME_PREFIX = "recording"
OUTPUT_FILENAME_FORMAT = f"{OUTPUT_FILENAME_PREFIX}_%Y-%m-%d_%H%M%S"

# Supported containers, first entry is the default for the mode
SUPPORTED_VIDEO_FORMATS = ("mp4", "mkv", "avi", "webm", "mov")
SUPPORTED_AUDIO_FORMATS = ("mp3", "ogg", "wav", "flac", "aac")
DEFAULT_VIDEO_FORMAT = SUPPORTED_VIDEO_FORMATS[0]
DEFAULT_AUDIO_FORMAT = SUPPORTED_AUDIO_FORMATS[0]

# =============================================================================
# VIDEO CONFIGURATION
# =============================================================================

DEFAULT_FRAMERATE = int(os.getenv("SCREENREC_FRAMERATE", "30"))

# X11 display used by x11grab; region offsets are appended as "+x,y"
X11_DISPLAY = os.getenv("SCREENREC_X11_DISPLAY", ":0.0")

# Fallback resolution when xrandr / wlr-randr cannot be queried
DEFAULT_DISPLAY_WIDTH = 1920
DEFAULT_DISPLAY_HEIGHT = 1080

# wf-recorder pixel format (software encoding, widest player support)
WAYLAND_PIXEL_FORMAT = "yuv420p"

# =============================================================================
# AUDIO CONFIGURATION
# =============================================================================

# PulseAudio (or pipewire-pulse) input
AUDIO_INPUT_FORMAT = "pulse"
MICROPHONE_DEVICE = os.getenv("SCREENREC_MICROPHONE_DEVICE", "default")
MONITOR_DEVICE = os.getenv("SCREENREC_MONITOR_DEVICE", "default.monitor")

# Metadata title written into audio-only recordings
AUDIO_METADATA_TITLE_PREFIX = "Audio Recording"

# =============================================================================
# EXTERNAL TOOL CONFIGURATION
# =============================================================================

# Timeout for read-only queries (pactl, wmctrl, xrandr, ...) in seconds
QUERY_TIMEOUT = float(os.getenv("SCREENREC_QUERY_TIMEOUT", "5.0"))

# Format string handed to slop so it prints the same "x,y wxh" line as slurp
SLOP_FORMAT = "%x,%y %wx%h"

# Exit codes the delegates use when they stop because we interrupted them
# (ffmpeg exits 255 after SIGINT; a child killed by the signal reports -2)
INTERRUPTED_EXIT_CODES = (255, -2)

# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

LOG_LEVEL = os.getenv("SCREENREC_LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("SCREENREC_LOG_FILE", "")
LOG_BACKUP_COUNT = 7

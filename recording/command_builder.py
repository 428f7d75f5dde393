"""
Command Builder

Turns a validated RecordingRequest into the argument list of exactly one
delegate process:

    Wayland + video   -> wf-recorder
    X11 + video       -> ffmpeg (x11grab)
    audio only        -> ffmpeg (pulse), on either display server

Building is deterministic for a given request. The only side effect is
the interactive selection helper, run synchronously when the request
asks for a drawn area or a clicked window.
"""

import logging
from typing import Callable, List, Optional

from config.settings import (
    AUDIO_INPUT_FORMAT,
    AUDIO_METADATA_TITLE_PREFIX,
    MICROPHONE_DEVICE,
    MONITOR_DEVICE,
    WAYLAND_PIXEL_FORMAT,
    X11_DISPLAY,
)
from core.environment import DisplayServer
from recording.constants import (
    AUDIO_CODECS,
    VIDEO_CODECS,
    WAYLAND_VIDEO_CODECS,
    AudioSource,
    RegionKind,
)
from recording.models.recording_request import RecordingRequest, Rect
from recording.utils.selection import select_area, select_window

AreaSelector = Callable[[DisplayServer], Rect]
WindowSelector = Callable[[], Rect]


class CommandBuilder:
    """
    Builds delegate command lines.

    Selection helpers are injected so tests can replace the interactive
    tools with fixed rectangles.

    Usage:
        builder = CommandBuilder()
        command = builder.build(request)
        # ['ffmpeg', '-y', '-framerate', '30', '-f', 'x11grab', ...]
    """

    def __init__(
        self,
        area_selector: AreaSelector = select_area,
        window_selector: WindowSelector = select_window,
    ):
        self.logger = logging.getLogger(__name__)
        self._area_selector = area_selector
        self._window_selector = window_selector

    def build(self, request: RecordingRequest) -> List[str]:
        """
        Build the command for a request.

        The request must already have passed validate().

        Raises:
            SelectionCancelledError: Interactive selection aborted
            MissingDependencyError: Selection helper not installed
        """
        if not request.record_video:
            command = self.build_audio_only_command(request)
        elif request.display_server == DisplayServer.WAYLAND:
            command = self.build_wayland_command(request)
        else:
            command = self.build_x11_command(request)

        self.logger.debug(f"Built command: {' '.join(command)}")
        return command

    # =========================================================================
    # SHARED RESOLUTION
    # =========================================================================

    def resolve_audio_source(self, request: RecordingRequest) -> AudioSource:
        """
        Collapse the requested audio source to one capturable device.

        Microphone + internal would need a mixing filter graph; only the
        internal (monitor) source is recorded in that case.
        """
        if request.audio_source == AudioSource.BOTH:
            self.logger.warning(
                "Both audio sources requested: mixing is not supported, "
                "recording internal audio only"
            )
            return AudioSource.INTERNAL
        return request.audio_source

    def resolve_audio_device(self, request: RecordingRequest) -> Optional[str]:
        """PulseAudio source name for the request, or None without audio."""
        source = self.resolve_audio_source(request)
        if source == AudioSource.INTERNAL:
            return MONITOR_DEVICE
        if source == AudioSource.MICROPHONE:
            return request.audio_device or MICROPHONE_DEVICE
        return None

    def resolve_region(self, request: RecordingRequest) -> Optional[Rect]:
        """
        Rectangle to capture, or None for the full screen.

        Runs the selection helper for SELECT and (on X11) WINDOW regions.
        """
        kind = request.region.kind

        if kind == RegionKind.RECTANGLE:
            return request.region.rect

        if kind == RegionKind.SELECT:
            return self._area_selector(request.display_server)

        if kind == RegionKind.WINDOW:
            if request.display_server == DisplayServer.WAYLAND:
                self.logger.warning(
                    "Window selection on Wayland requires compositor support, "
                    "recording the full screen"
                )
                return None
            return self._window_selector()

        return None

    # =========================================================================
    # COMMAND SHAPES
    # =========================================================================

    def build_x11_command(self, request: RecordingRequest) -> List[str]:
        """
        ffmpeg x11grab capture.

        Input device is ":0.0" for the full screen or ":0.0+x,y" with an
        explicit -video_size for a region.
        """
        codec = VIDEO_CODECS[request.extension]
        rect = self.resolve_region(request)
        audio_device = self.resolve_audio_device(request)

        command = [
            "ffmpeg",
            "-y",  # Overwrite existing files
            "-framerate",
            str(request.framerate),
            "-f",
            "x11grab",
        ]

        if rect is not None:
            command.extend([
                "-video_size",
                rect.size,
                "-i",
                f"{X11_DISPLAY}+{rect.x},{rect.y}",
            ])
        else:
            command.extend(["-i", X11_DISPLAY])

        if audio_device is not None:
            command.extend(["-f", AUDIO_INPUT_FORMAT, "-i", audio_device])

        command.extend(["-c:v", codec.video_codec, *codec.video_options])

        if audio_device is not None:
            command.extend(["-c:a", codec.audio_codec])

        command.append(str(request.output))
        return command

    def build_wayland_command(self, request: RecordingRequest) -> List[str]:
        """
        wf-recorder capture.

        wf-recorder takes the audio device as an optional value of --audio;
        a bare --audio records the default source.
        """
        codec = WAYLAND_VIDEO_CODECS[request.extension]
        audio_source = self.resolve_audio_source(request)
        rect = self.resolve_region(request)

        command = ["wf-recorder", "-r", str(request.framerate)]

        if audio_source == AudioSource.INTERNAL:
            command.append(f"--audio={MONITOR_DEVICE}")
        elif audio_source == AudioSource.MICROPHONE:
            if request.audio_device:
                command.append(f"--audio={request.audio_device}")
            else:
                command.append("--audio")

        if rect is not None:
            command.extend(["-g", rect.to_geometry()])

        command.extend(["-c", codec.video_codec])

        if audio_source != AudioSource.NONE:
            command.extend(["-C", codec.audio_codec])

        command.extend([
            "--pixel-format",
            WAYLAND_PIXEL_FORMAT,
            "-f",
            str(request.output),
        ])
        return command

    def build_audio_only_command(self, request: RecordingRequest) -> List[str]:
        """
        ffmpeg pulse capture with no video stream.

        Works the same on X11 and Wayland (pipewire-pulse).
        """
        codec = AUDIO_CODECS[request.extension]
        audio_device = self.resolve_audio_device(request)
        title = (
            f"{AUDIO_METADATA_TITLE_PREFIX} "
            f"{request.created_at.isoformat(timespec='seconds')}"
        )

        return [
            "ffmpeg",
            "-y",
            "-f",
            AUDIO_INPUT_FORMAT,
            "-i",
            audio_device or MICROPHONE_DEVICE,
            "-c:a",
            codec.codec,
            *codec.options,
            "-metadata",
            f"title={title}",
            str(request.output),
        ]

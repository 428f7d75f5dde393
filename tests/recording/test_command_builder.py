"""
Command Builder Tests

Tests for CommandBuilder showing:
- X11 ffmpeg commands (full screen, region, audio)
- Wayland wf-recorder commands
- Audio-only ffmpeg commands
- Audio source resolution (both -> internal)
- Region resolution via selection helpers

To run:
    pytest tests/recording/test_command_builder.py -v
"""

import logging

import pytest

from config.settings import MICROPHONE_DEVICE, MONITOR_DEVICE, X11_DISPLAY
from core.environment import DisplayServer
from core.exceptions import SelectionCancelledError
from recording.command_builder import CommandBuilder
from recording.constants import AudioSource, RegionKind
from recording.models.recording_request import CaptureRegion, Rect


def value_after(command, flag):
    """Argument following `flag` in a command list."""
    return command[command.index(flag) + 1]


# =============================================================================
# X11 TESTS
# =============================================================================

@pytest.mark.unit
def test_x11_fullscreen_mp4(command_builder, make_request):
    """Test full screen mp4 without audio."""
    command = command_builder.build(make_request("out.mp4"))

    assert command == [
        "ffmpeg", "-y",
        "-framerate", "30",
        "-f", "x11grab",
        "-i", X11_DISPLAY,
        "-c:v", "libx264", "-preset", "ultrafast", "-crf", "23",
        "out.mp4",
    ]


@pytest.mark.unit
def test_x11_output_path_is_last(command_builder, make_request):
    """Test output path is the final argument for every container."""
    for extension in ("mp4", "mkv", "avi", "webm", "mov"):
        command = command_builder.build(make_request(f"clip.{extension}"))
        assert command[-1] == f"clip.{extension}"


@pytest.mark.unit
def test_x11_rectangle_region(command_builder, make_request):
    """Test explicit area becomes -video_size and a display offset."""
    request = make_request(
        "out.mp4",
        region=CaptureRegion.rectangle(Rect(100, 100, 800, 600)),
    )

    command = command_builder.build(request)

    assert value_after(command, "-video_size") == "800x600"
    assert value_after(command, "-i") == f"{X11_DISPLAY}+100,100"
    # Size must precede the input it applies to
    assert command.index("-video_size") < command.index("-i")


@pytest.mark.unit
def test_x11_microphone_audio(command_builder, make_request):
    """Test microphone adds a pulse input and aac audio codec."""
    request = make_request("out.mp4", audio_source=AudioSource.MICROPHONE)

    command = command_builder.build(request)

    pulse_index = command.index("pulse")
    assert command[pulse_index - 1] == "-f"
    assert command[pulse_index + 1:pulse_index + 3] == ["-i", MICROPHONE_DEVICE]
    assert value_after(command, "-c:a") == "aac"


@pytest.mark.unit
def test_x11_custom_microphone_device(command_builder, make_request):
    """Test -d device name is passed to the pulse input."""
    request = make_request(
        "out.mkv",
        audio_source=AudioSource.MICROPHONE,
        audio_device="alsa_input.usb-mic",
    )

    command = command_builder.build(request)

    assert "alsa_input.usb-mic" in command
    assert MICROPHONE_DEVICE not in command


@pytest.mark.unit
def test_x11_internal_audio_uses_monitor(command_builder, make_request):
    """Test internal audio records the monitor source."""
    request = make_request("out.mp4", audio_source=AudioSource.INTERNAL)

    command = command_builder.build(request)

    assert MONITOR_DEVICE in command


@pytest.mark.unit
def test_x11_webm_uses_vp9_and_vorbis(command_builder, make_request):
    """Test webm container codecs."""
    request = make_request("out.webm", audio_source=AudioSource.MICROPHONE)

    command = command_builder.build(request)

    assert value_after(command, "-c:v") == "libvpx-vp9"
    assert value_after(command, "-c:a") == "libvorbis"


@pytest.mark.unit
def test_x11_mkv_and_avi_codec_options(command_builder, make_request):
    """Test per-container encoder options."""
    mkv = command_builder.build(make_request("out.mkv"))
    avi = command_builder.build(make_request("out.avi"))

    assert mkv[mkv.index("-c:v"):-1] == ["-c:v", "libx264", "-preset", "ultrafast"]
    assert avi[avi.index("-c:v"):-1] == ["-c:v", "libx264"]


@pytest.mark.unit
def test_x11_no_audio_has_no_audio_codec(command_builder, make_request):
    """Test audio codec only appears with an audio input."""
    command = command_builder.build(make_request("out.mp4"))

    assert "-c:a" not in command
    assert "pulse" not in command


@pytest.mark.unit
def test_x11_framerate(command_builder, make_request):
    """Test framerate is passed through."""
    command = command_builder.build(make_request("out.mp4", framerate=60))

    assert value_after(command, "-framerate") == "60"


# =============================================================================
# WAYLAND TESTS
# =============================================================================

@pytest.mark.unit
def test_wayland_fullscreen(command_builder, make_request):
    """Test wf-recorder full screen command."""
    request = make_request("out.mp4", display_server=DisplayServer.WAYLAND)

    command = command_builder.build(request)

    assert command == [
        "wf-recorder",
        "-r", "30",
        "-c", "libx264",
        "--pixel-format", "yuv420p",
        "-f", "out.mp4",
    ]


@pytest.mark.unit
def test_wayland_rectangle_region(command_builder, make_request):
    """Test area becomes -g geometry."""
    request = make_request(
        "out.mkv",
        display_server=DisplayServer.WAYLAND,
        region=CaptureRegion.rectangle(Rect(0, 0, 1280, 720)),
    )

    command = command_builder.build(request)

    assert value_after(command, "-g") == "0,0 1280x720"


@pytest.mark.unit
def test_wayland_microphone_default_device(command_builder, make_request):
    """Test bare --audio records the default source."""
    request = make_request(
        "out.mp4",
        display_server=DisplayServer.WAYLAND,
        audio_source=AudioSource.MICROPHONE,
    )

    command = command_builder.build(request)

    assert "--audio" in command
    assert value_after(command, "-C") == "aac"


@pytest.mark.unit
def test_wayland_microphone_custom_device(command_builder, make_request):
    """Test device name is attached to --audio."""
    request = make_request(
        "out.mp4",
        display_server=DisplayServer.WAYLAND,
        audio_source=AudioSource.MICROPHONE,
        audio_device="usb-mic",
    )

    command = command_builder.build(request)

    assert "--audio=usb-mic" in command


@pytest.mark.unit
def test_wayland_internal_audio(command_builder, make_request):
    """Test internal audio selects the monitor device."""
    request = make_request(
        "out.webm",
        display_server=DisplayServer.WAYLAND,
        audio_source=AudioSource.INTERNAL,
    )

    command = command_builder.build(request)

    assert f"--audio={MONITOR_DEVICE}" in command
    assert value_after(command, "-c") == "libvpx-vp9"
    assert value_after(command, "-C") == "libvorbis"


@pytest.mark.unit
def test_wayland_output_follows_f(command_builder, make_request):
    """Test output path is the final argument, after -f."""
    request = make_request("clip.mov", display_server=DisplayServer.WAYLAND)

    command = command_builder.build(request)

    assert command[-2:] == ["-f", "clip.mov"]


# =============================================================================
# AUDIO-ONLY TESTS
# =============================================================================

@pytest.mark.unit
@pytest.mark.parametrize("extension,codec", [
    ("mp3", "libmp3lame"),
    ("ogg", "libvorbis"),
    ("wav", "pcm_s16le"),
    ("flac", "flac"),
    ("aac", "aac"),
])
def test_audio_only_codecs(command_builder, make_request, extension, codec):
    """Test each audio container picks its codec."""
    request = make_request(
        f"sound.{extension}",
        record_video=False,
        audio_source=AudioSource.MICROPHONE,
    )

    command = command_builder.build(request)

    assert command[0] == "ffmpeg"
    assert value_after(command, "-c:a") == codec
    assert "x11grab" not in command
    assert command[-1] == f"sound.{extension}"


@pytest.mark.unit
def test_audio_only_same_on_wayland(command_builder, make_request):
    """Test audio-only uses ffmpeg regardless of display server."""
    x11 = command_builder.build(make_request(
        "sound.mp3", record_video=False, audio_source=AudioSource.MICROPHONE,
    ))
    wayland = command_builder.build(make_request(
        "sound.mp3",
        display_server=DisplayServer.WAYLAND,
        record_video=False,
        audio_source=AudioSource.MICROPHONE,
    ))

    assert x11 == wayland


@pytest.mark.unit
def test_audio_only_metadata_title(command_builder, make_request):
    """Test metadata title carries the request timestamp."""
    request = make_request(
        "sound.mp3",
        record_video=False,
        audio_source=AudioSource.MICROPHONE,
    )

    command = command_builder.build(request)

    assert value_after(command, "-metadata") == "title=Audio Recording 2025-01-15T14:30:22"


@pytest.mark.unit
def test_audio_only_internal(command_builder, make_request):
    """Test --internal-only records the monitor device."""
    request = make_request(
        "system.ogg",
        record_video=False,
        audio_source=AudioSource.INTERNAL,
    )

    command = command_builder.build(request)

    assert value_after(command, "-i") == MONITOR_DEVICE


@pytest.mark.unit
def test_audio_only_mp3_bitrate(command_builder, make_request):
    """Test mp3 encoder options."""
    request = make_request(
        "sound.mp3",
        record_video=False,
        audio_source=AudioSource.MICROPHONE,
    )

    command = command_builder.build(request)

    assert value_after(command, "-b:a") == "192k"


# =============================================================================
# AUDIO SOURCE RESOLUTION TESTS
# =============================================================================

@pytest.mark.unit
def test_both_audio_records_internal_only(command_builder, make_request, caplog):
    """Test microphone + internal collapses to internal with a warning."""
    request = make_request("out.mp4", audio_source=AudioSource.BOTH)

    with caplog.at_level(logging.WARNING):
        command = command_builder.build(request)

    # Exactly one audio input, the monitor
    assert command.count("pulse") == 1
    assert command[command.index("pulse") + 2] == MONITOR_DEVICE
    assert "mixing is not supported" in caplog.text


@pytest.mark.unit
def test_both_audio_on_wayland(command_builder, make_request):
    """Test both-audio on Wayland also uses the monitor device."""
    request = make_request(
        "out.mp4",
        display_server=DisplayServer.WAYLAND,
        audio_source=AudioSource.BOTH,
    )

    command = command_builder.build(request)

    assert f"--audio={MONITOR_DEVICE}" in command
    assert len([arg for arg in command if arg.startswith("--audio")]) == 1


@pytest.mark.unit
def test_resolve_audio_device_none(command_builder, make_request):
    """Test no audio resolves to no device."""
    assert command_builder.resolve_audio_device(make_request()) is None


# =============================================================================
# REGION RESOLUTION TESTS
# =============================================================================

@pytest.mark.unit
def test_select_region_runs_area_selector(command_builder, make_request, selector_calls):
    """Test interactive area selection on X11."""
    request = make_request("out.mp4", region=CaptureRegion.select())

    command = command_builder.build(request)

    assert selector_calls == [("area", DisplayServer.X11)]
    assert value_after(command, "-video_size") == "300x200"
    assert value_after(command, "-i") == f"{X11_DISPLAY}+10,20"


@pytest.mark.unit
def test_select_region_on_wayland(command_builder, make_request, selector_calls):
    """Test interactive area selection on Wayland uses -g."""
    request = make_request(
        "out.mp4",
        display_server=DisplayServer.WAYLAND,
        region=CaptureRegion.select(),
    )

    command = command_builder.build(request)

    assert selector_calls == [("area", DisplayServer.WAYLAND)]
    assert value_after(command, "-g") == "10,20 300x200"


@pytest.mark.unit
def test_window_region_on_x11(command_builder, make_request, selector_calls):
    """Test window selection becomes a rectangle capture."""
    request = make_request("out.mp4", region=CaptureRegion.window())

    command = command_builder.build(request)

    assert selector_calls == [("window", None)]
    assert value_after(command, "-video_size") == "640x480"
    assert value_after(command, "-i") == f"{X11_DISPLAY}+50,60"


@pytest.mark.unit
def test_window_region_on_wayland_falls_back(command_builder, make_request, selector_calls, caplog):
    """Test window selection on Wayland records the full screen."""
    request = make_request(
        "out.mp4",
        display_server=DisplayServer.WAYLAND,
        region=CaptureRegion.window(),
    )

    with caplog.at_level(logging.WARNING):
        command = command_builder.build(request)

    assert selector_calls == []
    assert "-g" not in command
    assert "compositor support" in caplog.text


@pytest.mark.unit
def test_fullscreen_does_not_select(command_builder, make_request, selector_calls):
    """Test full screen runs no selection helper."""
    command_builder.build(make_request("out.mp4"))

    assert selector_calls == []
    assert make_request().region.kind == RegionKind.FULLSCREEN


@pytest.mark.unit
def test_cancelled_selection_propagates(make_request):
    """Test a cancelled selection aborts the build."""

    def cancelled(display_server):
        raise SelectionCancelledError("Area selection cancelled")

    builder = CommandBuilder(area_selector=cancelled)
    request = make_request("out.mp4", region=CaptureRegion.select())

    with pytest.raises(SelectionCancelledError):
        builder.build(request)


@pytest.mark.unit
def test_build_is_deterministic(command_builder, make_request):
    """Test the same request always builds the same command."""
    request = make_request("out.mkv", audio_source=AudioSource.INTERNAL)

    assert command_builder.build(request) == command_builder.build(request)

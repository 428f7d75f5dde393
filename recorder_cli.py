#!/usr/bin/env python3
"""
Linux Screen Recorder CLI

Command-line entry point. Parses flags, detects the display server,
builds one ffmpeg / wf-recorder command, and supervises it until it
exits or the user presses Ctrl+C.

Flow:
    parse args -> (--check-deps | --list-audio | --list-windows) -> exit
               -> build + validate request -> check dependencies
               -> build command (may run the selection helper)
               -> supervise delegate -> relay exit status

Exit codes:
    0  Recording finished (or informational command succeeded)
    1  Missing dependency, unsupported format, cancelled selection,
       spawn failure, or delegate failure
"""

import argparse
import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from config.settings import (
    DEFAULT_FRAMERATE,
    LOG_BACKUP_COUNT,
    LOG_FILE,
    LOG_LEVEL,
    OUTPUT_DIR,
    SUPPORTED_AUDIO_FORMATS,
    SUPPORTED_VIDEO_FORMATS,
)
from core.devices import list_audio_sources, list_windows
from core.environment import (
    DisplayServer,
    check_dependencies,
    detect_display_server,
    find_missing_dependencies,
    find_missing_optional_dependencies,
    format_install_hints,
    get_display_info,
)
from core.exceptions import ChildProcessFailureError, RecorderError
from recording.command_builder import CommandBuilder
from recording.constants import AudioSource, RecordingMode
from recording.controllers.recording_supervisor import RecordingSupervisor
from recording.factory import RecordingFactory
from recording.interfaces.capture_process_interface import CaptureProcessInterface
from recording.models.recording_request import CaptureRegion, RecordingRequest, Rect
from recording.utils.recording_utils import (
    ensure_extension,
    format_duration,
    format_file_size,
    generate_filename,
    validate_output_path,
)

logger = logging.getLogger(__name__)

CONSOLE_HANDLER_NAME = "screenrec-console"
FILE_HANDLER_NAME = "screenrec-file"

AREA_SELECT_KEYWORDS = ("select", "slurp")

EPILOG = f"""
examples:
  # Full screen recording with microphone
  %(prog)s -f -A recording.mp4

  # Interactive area selection
  %(prog)s -a select partial.mkv

  # Manual area (x=100, y=100, width=800, height=600)
  %(prog)s -a 100,100,800,600 partial.mkv

  # Audio only (microphone)
  %(prog)s --audio-only -A sound.mp3

  # Internal audio only (system audio)
  %(prog)s --internal-only system-audio.ogg

  # High framerate recording
  %(prog)s -f -r 60 smooth.mp4

supported formats:
  video: {", ".join(SUPPORTED_VIDEO_FORMATS)} (first is default)
  audio: {", ".join(SUPPORTED_AUDIO_FORMATS)} (first is default)

notes:
  - File format is determined by the extension
  - Microphone + internal audio are not mixed; internal audio is recorded
  - Press Ctrl+C to stop recording
"""


# =============================================================================
# ARGUMENT PARSING
# =============================================================================


def parse_area(value: str):
    """argparse type for -a: "select" or "x,y,w,h"."""
    if value.strip().lower() in AREA_SELECT_KEYWORDS:
        return CaptureRegion.select()
    try:
        return CaptureRegion.rectangle(Rect.parse(value))
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def positive_int(value: str) -> int:
    """argparse type for -r."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="screen-recorder",
        description="Record the Linux desktop (X11 or Wayland) with ffmpeg / wf-recorder",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "output",
        nargs="?",
        help="output file (default: timestamped name in the current directory)",
    )

    region = parser.add_mutually_exclusive_group()
    region.add_argument(
        "-f", "--fullscreen",
        action="store_true",
        help="record the full screen (default)",
    )
    region.add_argument(
        "-a", "--area",
        type=parse_area,
        metavar="x,y,w,h|select",
        help="record a specific area, or draw one interactively with 'select'",
    )
    region.add_argument(
        "-w", "--window",
        action="store_true",
        help="click a window to record (X11)",
    )

    audio = parser.add_argument_group("audio")
    audio.add_argument("-A", "--audio", action="store_true", help="include microphone audio")
    audio.add_argument("-I", "--internal", action="store_true", help="include internal/system audio")
    audio.add_argument(
        "-B", "--both-audio",
        action="store_true",
        help="request microphone and internal audio (records internal only)",
    )
    audio.add_argument(
        "-d", "--audio-device",
        metavar="NAME",
        help="PulseAudio source for the microphone (see --list-audio)",
    )
    audio.add_argument("--audio-only", action="store_true", help="record audio only (microphone)")
    audio.add_argument(
        "--internal-only",
        action="store_true",
        help="record internal audio only (system audio)",
    )

    parser.add_argument(
        "-r", "--framerate",
        type=positive_int,
        default=DEFAULT_FRAMERATE,
        metavar="N",
        help=f"frames per second (default: {DEFAULT_FRAMERATE})",
    )

    info = parser.add_argument_group("information")
    info.add_argument("--list-audio", action="store_true", help="list available audio devices")
    info.add_argument("--list-windows", action="store_true", help="list available windows (X11)")
    info.add_argument("--check-deps", action="store_true", help="check system dependencies")

    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")

    return parser


def resolve_audio_source(args: argparse.Namespace) -> AudioSource:
    """Combine the audio flags into one AudioSource."""
    microphone = args.audio
    internal = args.internal or args.internal_only

    if args.both_audio or (microphone and internal):
        return AudioSource.BOTH
    if internal:
        return AudioSource.INTERNAL
    if microphone or args.audio_only or args.audio_device:
        return AudioSource.MICROPHONE
    return AudioSource.NONE


def build_request(
    args: argparse.Namespace,
    display_server: DisplayServer,
    now: Optional[datetime] = None,
) -> RecordingRequest:
    """
    Translate parsed arguments into a RecordingRequest.

    Does not validate; call request.validate() before building a command.
    """
    now = now or datetime.now()
    audio_only = args.audio_only or args.internal_only
    mode = RecordingMode.AUDIO if audio_only else RecordingMode.VIDEO

    if args.output:
        output = ensure_extension(Path(args.output).expanduser(), mode)
    else:
        output = generate_filename(OUTPUT_DIR, mode, timestamp=now)

    if args.area is not None:
        region = args.area
    elif args.window:
        region = CaptureRegion.window()
    else:
        region = CaptureRegion.fullscreen()

    return RecordingRequest(
        output=output,
        display_server=display_server,
        record_video=not audio_only,
        audio_source=resolve_audio_source(args),
        region=region,
        framerate=args.framerate,
        audio_device=args.audio_device,
        created_at=now,
    )


# =============================================================================
# INFORMATIONAL COMMANDS
# =============================================================================


def run_check_deps(display_server: DisplayServer) -> int:
    """--check-deps: report missing binaries, 0 if none are missing."""
    missing = find_missing_dependencies(display_server)

    if missing:
        print("\n❌ Missing dependencies:", file=sys.stderr)
        for dep in missing:
            print(f"  - {dep}", file=sys.stderr)
        print("\n📦 Install commands:", file=sys.stderr)
        print(format_install_hints(missing), file=sys.stderr)
        return 1

    print(f"✅ All dependencies are installed! ({display_server.value})")

    optional_missing = find_missing_optional_dependencies(display_server)
    if optional_missing:
        print(f"ℹ️  Optional tools not found: {', '.join(optional_missing)}")
    return 0


def run_list_audio() -> int:
    """--list-audio: print every source pactl reports."""
    sources = list_audio_sources()
    print("🎵 Available audio devices:")
    for index, source in enumerate(sources, start=1):
        print(f"  {index}. {source.raw}")
    return 0


def run_list_windows(display_server: DisplayServer) -> int:
    """--list-windows: print top-level windows (X11 only)."""
    windows = list_windows(display_server)
    print("🪟 Available windows:")
    for index, window in enumerate(windows, start=1):
        print(f"  {index}. {window.title} ({window.window_id})")
    return 0


# =============================================================================
# RECORDING
# =============================================================================


def print_banner(request: RecordingRequest) -> None:
    display = get_display_info(request.display_server) if request.record_video else None

    print("🎬 Starting recording...")
    print(f"📁 Output: {request.output}")
    print(f"🖥️  Display server: {request.display_server.value}"
          + (f" ({display.size})" if display else ""))
    print(f"🎥 Video: {'✅' if request.record_video else '❌'}")
    print(f"🎵 Audio: {'✅ ' + request.audio_source.value if request.record_audio else '❌'}")


def record(
    request: RecordingRequest,
    process: CaptureProcessInterface,
    builder: Optional[CommandBuilder] = None,
) -> int:
    """
    Build the delegate command for a validated request and supervise it.

    Returns:
        0 on a clean finish

    Raises:
        RecorderError: Selection cancelled, spawn failure, delegate failure
    """
    builder = builder or CommandBuilder()

    valid, error = validate_output_path(request.output)
    if not valid:
        raise RecorderError(f"Invalid output path: {error}")

    print_banner(request)
    command = builder.build(request)
    print(f"🔧 Command: {' '.join(command)}\n")

    supervisor = RecordingSupervisor(process)
    exit_code = supervisor.run(command)

    print(f"\n🎬 Recording finished with code {exit_code}")
    if not supervisor.is_clean_stop():
        raise ChildProcessFailureError(exit_code, program=command[0])

    size = ""
    if request.output.exists():
        size = f" ({format_file_size(request.output.stat().st_size)})"
    print(f"✅ Recording saved to: {request.output}{size}")
    print(f"⏱️  Duration: {format_duration(supervisor.get_elapsed_time())}")
    return 0


# =============================================================================
# LOGGING
# =============================================================================


def setup_logging(verbose: bool = False) -> None:
    """
    Setup logging.

    Diagnostics go to stderr so they never mix with listings or the
    progress line on stdout. If SCREENREC_LOG_FILE is set, a file
    handler with daily rotation is added as well.
    """
    root = logging.getLogger()
    level = logging.DEBUG if verbose else getattr(logging, LOG_LEVEL, logging.INFO)
    root.setLevel(level)

    # Replace our handlers if main() runs more than once in a process
    for handler in list(root.handlers):
        if handler.get_name() in (CONSOLE_HANDLER_NAME, FILE_HANDLER_NAME):
            root.removeHandler(handler)
            handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.set_name(CONSOLE_HANDLER_NAME)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    root.addHandler(console_handler)

    if LOG_FILE:
        try:
            file_handler = logging.handlers.TimedRotatingFileHandler(
                LOG_FILE,
                when="midnight",
                interval=1,
                backupCount=LOG_BACKUP_COUNT,
                encoding="utf-8",
            )
        except OSError as e:
            root.warning(f"Cannot write to log file {LOG_FILE}: {e}")
        else:
            file_handler.set_name(FILE_HANDLER_NAME)
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(
                "%(asctime)s %(levelname)s %(message)s | %(name)s",
            ))
            root.addHandler(file_handler)


# =============================================================================
# ENTRY POINT
# =============================================================================


def main(
    argv: Optional[List[str]] = None,
    process_factory: Callable[[], CaptureProcessInterface] = RecordingFactory.create_process,
    builder: Optional[CommandBuilder] = None,
) -> int:
    """
    Main entry point.

    Args:
        argv: Arguments without the program name (default: sys.argv[1:])
        process_factory: Creates the delegate process (tests pass a mock)
        builder: Command builder (tests inject fixed selection helpers)

    Returns:
        Process exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    display_server = detect_display_server()
    logger.debug(f"Detected display server: {display_server.value}")

    try:
        if args.check_deps:
            return run_check_deps(display_server)
        if args.list_audio:
            return run_list_audio()
        if args.list_windows:
            return run_list_windows(display_server)

        request = build_request(args, display_server)
        request.validate()
        check_dependencies(display_server)

        return record(request, process_factory(), builder=builder)

    except RecorderError as e:
        logger.error(f"❌ {e}")
        return e.exit_code
    except ValueError as e:
        logger.error(f"❌ Invalid request: {e}")
        return 1
    except KeyboardInterrupt:
        logger.warning("Cancelled")
        return 1
    except Exception as e:
        logger.critical(f"Fatal error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())

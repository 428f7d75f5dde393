"""
Recording Test Configuration and Fixtures

Shared fixtures for recording module tests.
"""

import io
import shutil
import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from core.environment import DisplayServer
from recording.command_builder import CommandBuilder
from recording.controllers.recording_supervisor import RecordingSupervisor
from recording.implementations.mock_capture import MockCapture
from recording.models.recording_request import RecordingRequest, Rect

# Rectangles returned by the stubbed selection helpers
SELECTED_AREA = Rect(10, 20, 300, 200)
SELECTED_WINDOW = Rect(50, 60, 640, 480)

FIXED_TIME = datetime(2025, 1, 15, 14, 30, 22)


# =============================================================================
# REQUEST FIXTURES
# =============================================================================


@pytest.fixture
def make_request():
    """
    Provide a RecordingRequest factory with test-friendly defaults.

    Usage:
        def test_x11(make_request):
            request = make_request("demo.mkv", audio_source=AudioSource.MICROPHONE)
    """

    def _make(output="out.mp4", display_server=DisplayServer.X11, **kwargs):
        kwargs.setdefault("framerate", 30)
        kwargs.setdefault("created_at", FIXED_TIME)
        return RecordingRequest(
            output=Path(output),
            display_server=display_server,
            **kwargs,
        )

    return _make


# =============================================================================
# BUILDER FIXTURES
# =============================================================================


@pytest.fixture
def selector_calls():
    """Record which selection helpers the builder invoked."""
    return []


@pytest.fixture
def command_builder(selector_calls):
    """
    Provide CommandBuilder with non-interactive selection helpers.

    The area helper returns SELECTED_AREA, the window helper SELECTED_WINDOW.
    """

    def area_selector(display_server):
        selector_calls.append(("area", display_server))
        return SELECTED_AREA

    def window_selector():
        selector_calls.append(("window", None))
        return SELECTED_WINDOW

    return CommandBuilder(area_selector=area_selector, window_selector=window_selector)


# =============================================================================
# PROCESS FIXTURES
# =============================================================================


@pytest.fixture
def mock_process():
    """
    Provide MockCapture that emits a few ffmpeg-like lines and exits 0.

    Usage:
        def test_run(mock_process):
            mock_process.start(["ffmpeg"])
    """
    process = MockCapture(output_lines=[
        "ffmpeg version 6.1 Copyright (c) 2000-2023",
        "frame=   10 fps=0.0 q=-1.0 size=256kB time=00:00:00.33",
        "frame=   40 fps= 30 q=-1.0 size=512kB time=00:00:01.33",
    ])
    yield process
    process.cleanup()


@pytest.fixture
def progress_stream():
    """In-memory stream for progress output."""
    return io.StringIO()


@pytest.fixture
def supervisor(mock_process, progress_stream):
    """
    Provide RecordingSupervisor driving the default mock process.

    Usage:
        def test_supervisor(supervisor):
            supervisor.run(["ffmpeg", "out.mp4"], handle_signals=False)
    """
    return RecordingSupervisor(mock_process, output_stream=progress_stream)


# =============================================================================
# TEMPORARY FILE/DIRECTORY FIXTURES
# =============================================================================


@pytest.fixture
def temp_recording_dir():
    """
    Provide temporary directory for recordings.

    Directory is automatically cleaned up after test.
    """
    temp_dir = Path(tempfile.mkdtemp())

    yield temp_dir

    # Cleanup
    if temp_dir.exists():
        shutil.rmtree(temp_dir)


# =============================================================================
# CALLBACK TRACKING FIXTURES
# =============================================================================


@pytest.fixture
def callback_tracker():
    """
    Provide helper for tracking callback calls.

    Usage:
        def test_callback(supervisor, callback_tracker):
            supervisor.on_warning = callback_tracker.track
            # ... trigger warning ...
            assert callback_tracker.was_called()
    """

    class CallbackTracker:
        def __init__(self):
            self.calls = []

        def track(self, *args, **kwargs):
            """Record a callback invocation"""
            self.calls.append({"args": args, "kwargs": kwargs})

        def was_called(self) -> bool:
            return len(self.calls) > 0

        def get_call_count(self) -> int:
            return len(self.calls)

        def get_all_args(self):
            """Positional arguments of every call, in order"""
            return [call["args"] for call in self.calls]

    return CallbackTracker()


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """
    Configure pytest with custom markers for recording tests.
    """
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "unit_integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests")

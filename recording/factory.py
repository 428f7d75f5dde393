"""
Recording Factory

Factory pattern for creating delegate process implementations.
Single place to decide between a real subprocess and the mock.

Unlike a long-running service, the CLI never falls back to the mock on
its own: a recorder that silently records nothing is worse than an error.
"""

import logging
from typing import Literal

from recording.implementations.mock_capture import MockCapture
from recording.implementations.subprocess_capture import SubprocessCapture
from recording.interfaces.capture_process_interface import CaptureProcessInterface

# Type alias for better type hints
CaptureMode = Literal["real", "mock"]


class RecordingFactory:
    """
    Factory for creating delegate process implementations.

    Usage:
        # Real subprocess (default)
        process = RecordingFactory.create_process()

        # Force mock (useful for testing)
        process = RecordingFactory.create_process(mode="mock")
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_process(cls, mode: CaptureMode = "real") -> CaptureProcessInterface:
        """
        Create a delegate process instance.

        Args:
            mode: "real" (subprocess) or "mock" (scripted, launches nothing)

        Returns:
            CaptureProcessInterface implementation

        Raises:
            ValueError: Unknown mode
        """
        if mode == "mock":
            cls._logger.info("Creating Mock Capture")
            return MockCapture()

        if mode == "real":
            cls._logger.debug("Creating Subprocess Capture")
            return SubprocessCapture()

        raise ValueError(f"Unknown capture mode: {mode}")


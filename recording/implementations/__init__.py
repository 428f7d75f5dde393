"""
Recording Implementations Package

Concrete delegate process implementations.
"""

from recording.implementations.mock_capture import MockCapture
from recording.implementations.subprocess_capture import SubprocessCapture

__all__ = [
    "MockCapture",
    "SubprocessCapture",
]

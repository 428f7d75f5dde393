"""
Recording Models Package

Exposes the immutable request types.
"""

from recording.models.recording_request import CaptureRegion, RecordingRequest, Rect

__all__ = [
    "CaptureRegion",
    "RecordingRequest",
    "Rect",
]

"""
Recording Interfaces Package

Exposes abstract interfaces for recording components.
"""

from recording.interfaces.capture_process_interface import CaptureProcessInterface

# Public API
__all__ = [
    "CaptureProcessInterface",
]

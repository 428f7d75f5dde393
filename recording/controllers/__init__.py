"""
Recording Controllers Package

High-level controllers that drive delegate processes.
"""

from recording.controllers.recording_supervisor import RecordingSupervisor

__all__ = [
    "RecordingSupervisor",
]

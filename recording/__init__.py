"""
Recording Module

Command construction and delegate supervision for desktop recording.

Public API:
    - RecordingRequest: Immutable description of one recording
    - CommandBuilder: Request -> ffmpeg / wf-recorder argument list
    - RecordingSupervisor: Runs the delegate, forwards stop signals
    - RecordingFactory: Real or mock delegate process
    - CaptureProcessInterface: Delegate process contract
    - RecordingState: Supervisor state enumeration

Usage:
    from recording import CommandBuilder, RecordingFactory, RecordingSupervisor

    command = CommandBuilder().build(request)
    supervisor = RecordingSupervisor(RecordingFactory.create_process())
    exit_code = supervisor.run(command)
"""

from recording.command_builder import CommandBuilder
from recording.constants import AudioSource, RecordingMode, RecordingState, RegionKind
from recording.controllers.recording_supervisor import RecordingSupervisor
from recording.factory import RecordingFactory
from recording.interfaces.capture_process_interface import CaptureProcessInterface
from recording.models.recording_request import CaptureRegion, RecordingRequest, Rect
from recording.utils.recording_utils import generate_filename

__all__ = [
    "AudioSource",
    "CaptureProcessInterface",
    "CaptureRegion",
    "CommandBuilder",
    "RecordingFactory",
    "RecordingMode",
    "RecordingRequest",
    "RecordingState",
    "RecordingSupervisor",
    "Rect",
    "RegionKind",
    "generate_filename",
]

"""
Recorder Exceptions

Every error the recorder can report to the user. All of them are terminal
for the invocation: the CLI prints the message on stderr and exits with 1.
"""

from typing import Iterable, Optional


class RecorderError(Exception):
    """
    Base exception for recorder errors.

    Examples:
    - Required binary not installed
    - Output extension not supported
    - Delegate process exited non-zero
    """

    exit_code = 1


class MissingDependencyError(RecorderError):
    """One or more required external binaries are absent"""

    def __init__(self, missing: Iterable[str], hints: Optional[str] = None):
        self.missing = list(missing)
        self.hints = hints
        message = f"Missing dependencies: {', '.join(self.missing)}"
        if hints:
            message += f"\n\n{hints}"
        super().__init__(message)


class UnsupportedFormatError(RecorderError):
    """Output extension is not in the supported set for the selected mode"""

    def __init__(self, extension: str, supported: Iterable[str], mode: str):
        self.extension = extension
        self.supported = list(supported)
        self.mode = mode
        super().__init__(
            f"Unsupported {mode} format: {extension or '(none)'} "
            f"(supported formats: {', '.join(self.supported)})"
        )


class SelectionCancelledError(RecorderError):
    """Interactive region or window selection was aborted"""
    pass


class ChildProcessFailureError(RecorderError):
    """Delegate process exited with a non-zero code"""

    def __init__(self, exit_code: int, program: str = "recorder"):
        self.child_exit_code = exit_code
        self.program = program
        super().__init__(f"{program} failed with exit code {exit_code}")


class ProcessSpawnError(RecorderError):
    """Delegate binary could not be started"""
    pass

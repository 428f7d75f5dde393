"""
Capture Process Interface

Abstract interface for the delegate process that does the recording.
Defines the contract the RecordingSupervisor drives.

This demonstrates Dependency Inversion Principle - the supervisor depends
on this abstraction, not on subprocess.Popen directly.

Why an interface?
1. Testability: Can use MockCapture instead of launching ffmpeg
2. Flexibility: Same supervisor for ffmpeg and wf-recorder
3. Clear contract: Documents exactly what the supervisor needs
"""

from abc import ABC, abstractmethod
from typing import Iterator, List, Optional


class CaptureProcessInterface(ABC):
    """
    Abstract base class for one delegate process.

    Lifecycle: start() once, iterate output until it ends, then wait()
    for the exit code. send_signal() may be called at any point while
    the process runs.
    """

    @abstractmethod
    def start(self, command: List[str]) -> int:
        """
        Launch the delegate.

        Should be NON-BLOCKING - returns as soon as the process exists.

        Args:
            command: Full argument list, program first

        Returns:
            Process ID

        Raises:
            ProcessSpawnError: If the program could not be started

        Example:
            pid = process.start(["ffmpeg", "-f", "x11grab", ...])
        """
        pass

    @abstractmethod
    def iter_output(self) -> Iterator[str]:
        """
        Yield diagnostic output lines until the process closes its stream.

        Lines are split on both "\\r" and "\\n" (progress lines are
        carriage-return terminated). Empty lines are skipped.

        Example:
            for line in process.iter_output():
                print(line)
        """
        pass

    @abstractmethod
    def send_signal(self, signum: int) -> bool:
        """
        Deliver a signal to the delegate.

        Returns:
            True if delivered, False if the process already exited
        """
        pass

    @abstractmethod
    def wait(self) -> int:
        """
        Block until the delegate exits.

        No timeout: recordings run until interrupted or self-terminated.

        Returns:
            Exit code (negative for death by signal, as subprocess reports it)
        """
        pass

    @abstractmethod
    def is_running(self) -> bool:
        """Check if the delegate is still alive."""
        pass

    @abstractmethod
    def get_pid(self) -> Optional[int]:
        """Process ID, or None before start()."""
        pass

    @abstractmethod
    def cleanup(self) -> None:
        """
        Release pipes and reap the process if it has exited.

        Never kills a running delegate and should never raise.
        """
        pass

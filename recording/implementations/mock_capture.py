"""
Mock Capture Implementation

Scripted delegate process for testing without ffmpeg or wf-recorder.
Mimics the output and exit behavior the supervisor relies on.

This is a "Fake" (test double) - it has working logic but launches nothing.
"""

import logging
import signal
from typing import Callable, Iterable, Iterator, List, Optional

from core.exceptions import ProcessSpawnError
from recording.interfaces.capture_process_interface import CaptureProcessInterface

MOCK_PID = 4242


class MockCapture(CaptureProcessInterface):
    """
    Mock delegate process for testing.

    Replays a fixed list of output lines and exits with a configured code.
    A forwarded signal ends the output early (like ffmpeg finishing its
    file after SIGINT) and switches the exit code to `signal_exit_code`.

    Usage:
        process = MockCapture(output_lines=["frame=  10 time=00:00:01"])
        process.start(["ffmpeg", "-i", ":0.0", "out.mp4"])
        list(process.iter_output())
        process.wait()  # 0
    """

    def __init__(
        self,
        output_lines: Iterable[str] = (),
        exit_code: int = 0,
        signal_exit_code: int = 255,
        exit_on_signal: bool = True,
    ):
        """
        Initialize mock process.

        Args:
            output_lines: Lines to replay from iter_output()
            exit_code: Code returned when the process ends on its own
            signal_exit_code: Code returned after a handled stop signal
            exit_on_signal: If False, signals are recorded but ignored
        """
        self.logger = logging.getLogger(__name__)

        self._output_lines = list(output_lines)
        self._exit_code = exit_code
        self._signal_exit_code = signal_exit_code
        self._exit_on_signal = exit_on_signal

        # State tracking
        self._command: Optional[List[str]] = None
        self._running = False
        self._stopped_by_signal = False
        self._returncode: Optional[int] = None
        self._signals: List[int] = []
        self._lines_emitted = 0

        # Configuration for test scenarios
        self._should_fail_spawn = False
        self._start_hook: Optional[Callable[[], None]] = None
        self._output_end_hook: Optional[Callable[[], None]] = None

    def start(self, command: List[str]) -> int:
        if self._command is not None:
            raise RuntimeError("Process already started")

        if self._should_fail_spawn:
            self.logger.error("[MOCK] Simulated spawn failure")
            raise ProcessSpawnError(f"Could not start {command[0]}: simulated failure")

        self._command = list(command)
        self._running = True
        self.logger.info(f"[MOCK] Started {command[0]} (PID: {MOCK_PID})")

        if self._start_hook:
            self._start_hook()

        return MOCK_PID

    def iter_output(self) -> Iterator[str]:
        for line in self._output_lines:
            if self._stopped_by_signal:
                break
            self._lines_emitted += 1
            yield line

        if self._output_end_hook:
            self._output_end_hook()

    def send_signal(self, signum: int) -> bool:
        if not self._running:
            return False

        self._signals.append(signum)
        self.logger.info(f"[MOCK] Received signal {signum}")

        if self._exit_on_signal and signum in (signal.SIGINT, signal.SIGTERM):
            self._stopped_by_signal = True
        return True

    def wait(self) -> int:
        if self._command is None:
            raise RuntimeError("Process not started")

        if self._returncode is None:
            self._returncode = (
                self._signal_exit_code if self._stopped_by_signal else self._exit_code
            )
            self._running = False
            self.logger.info(f"[MOCK] Exited with code {self._returncode}")

        return self._returncode

    def is_running(self) -> bool:
        return self._running

    def get_pid(self) -> Optional[int]:
        return MOCK_PID if self._command is not None else None

    def cleanup(self) -> None:
        self.logger.debug("[MOCK] Cleanup")

    # =========================================================================
    # TESTING HELPER METHODS (not part of CaptureProcessInterface)
    # =========================================================================

    def simulate_spawn_failure(self) -> None:
        """
        Configure mock to fail on the next start() call.

        Example:
            mock.simulate_spawn_failure()
            with pytest.raises(ProcessSpawnError):
                mock.start(["ffmpeg"])
        """
        self._should_fail_spawn = True

    def get_command(self) -> Optional[List[str]]:
        """Command passed to start(), or None if never started."""
        return self._command

    def get_signals(self) -> List[int]:
        """Signals delivered while running, in order."""
        return list(self._signals)

    def has_exited(self) -> bool:
        """True once wait() has observed the exit."""
        return self._returncode is not None

    def get_lines_emitted(self) -> int:
        return self._lines_emitted

    def set_start_hook(self, hook: Callable[[], None]) -> None:
        """
        Run `hook` inside start(), after the process exists.

        Example:
            mock.set_start_hook(lambda: os.kill(os.getpid(), signal.SIGINT))
        """
        self._start_hook = hook

    def set_output_end_hook(self, hook: Callable[[], None]) -> None:
        """Run `hook` when iter_output() has replayed its last line."""
        self._output_end_hook = hook

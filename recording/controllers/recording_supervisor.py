"""
Recording Supervisor

Owns the single delegate process for one recording and walks it through

    IDLE -> LAUNCHING -> RUNNING -> TERMINATING -> DONE(exit code)

Interrupt signals received by the recorder are forwarded to the delegate,
which then finalizes its output file and exits on its own. The supervisor
never force-kills; it simply waits for the exit to be observed.

While running, the delegate's stderr is scanned for progress and error
markers. That scan is cosmetic: it decides what the user sees, never what
the supervisor does.
"""

import logging
import signal
import sys
import time
from typing import Callable, List, Optional, TextIO

from config.settings import INTERRUPTED_EXIT_CODES
from core.exceptions import ProcessSpawnError
from recording.constants import (
    ERROR_MARKERS,
    PROGRESS_MARKERS,
    STATE_TRANSITIONS,
    RecordingState,
)
from recording.interfaces.capture_process_interface import CaptureProcessInterface

# Signals that stop a recording
STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class RecordingSupervisor:
    """
    Supervises one delegate process from launch to exit.

    Features:
    - Explicit state machine with logged transitions
    - SIGINT/SIGTERM forwarded to the delegate as SIGINT
    - Progress lines echoed in place, error lines surfaced as warnings
    - Exit code kept on the DONE state, no retries

    Usage:
        supervisor = RecordingSupervisor(SubprocessCapture())
        exit_code = supervisor.run(["ffmpeg", ...])
        if supervisor.is_clean_stop():
            print("Saved")
    """

    def __init__(
        self,
        process: CaptureProcessInterface,
        output_stream: Optional[TextIO] = None,
    ):
        """
        Initialize supervisor.

        Args:
            process: Delegate process implementation (not yet started)
            output_stream: Where progress lines go (default: sys.stdout)
        """
        self.logger = logging.getLogger(__name__)
        self.process = process
        self._output_stream = output_stream

        # Session state
        self.state = RecordingState.IDLE
        self.exit_code: Optional[int] = None
        self.stop_requested = False
        self._stop_pending = False
        self._program = "recorder"
        self._start_time: Optional[float] = None
        self._end_time: Optional[float] = None
        self._progress_shown = False
        self._previous_handlers: dict = {}

        # Callbacks for events
        self.on_state_change: Optional[Callable[[RecordingState, RecordingState], None]] = None
        self.on_progress: Optional[Callable[[str], None]] = None
        self.on_warning: Optional[Callable[[str], None]] = None

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def run(self, command: List[str], handle_signals: bool = True) -> int:
        """
        Launch the delegate and block until it exits.

        Args:
            command: Delegate argument list, program first
            handle_signals: Install SIGINT/SIGTERM forwarding for the
                            duration of the run (main thread only)

        Returns:
            Delegate exit code

        Raises:
            ProcessSpawnError: Delegate could not be started
            RuntimeError: Supervisor already used
        """
        if self.state != RecordingState.IDLE:
            raise RuntimeError(f"Cannot run - supervisor in state: {self.state.value}")

        self._program = command[0]
        self._transition_to(RecordingState.LAUNCHING, f"starting {self._program}")

        # Handlers must be in place before the child exists
        if handle_signals:
            self._install_signal_handlers()

        try:
            try:
                pid = self.process.start(command)
            except ProcessSpawnError:
                self._transition_to(RecordingState.DONE, "spawn failed")
                raise

            self._start_time = time.time()
            self._transition_to(RecordingState.RUNNING, f"PID {pid}")

            if self._stop_pending:
                self._stop_pending = False
                self.request_stop()

            for line in self.process.iter_output():
                self._handle_output_line(line)

            # No-op if a stop request already moved us to TERMINATING
            self._transition_to(RecordingState.TERMINATING, f"{self._program} exited")

            self.exit_code = self.process.wait()
            self._end_time = time.time()
            self._finish_progress_line()
            self._transition_to(RecordingState.DONE, f"exit code {self.exit_code}")
        finally:
            if handle_signals:
                self._restore_signal_handlers()
            self.process.cleanup()

        return self.exit_code

    def request_stop(self, signum: int = signal.SIGINT) -> bool:
        """
        Ask the delegate to stop by forwarding SIGINT.

        SIGINT is what both ffmpeg and wf-recorder treat as "finish the
        file and exit". Calling again while terminating forwards again.
        A request that arrives while launching is held until the
        delegate has a PID.

        Args:
            signum: Signal that triggered the stop (logged only)

        Returns:
            True if a signal was forwarded
        """
        if self.state == RecordingState.LAUNCHING:
            self._stop_pending = True
            self.logger.info("Stop requested while launching, forwarding once started")
            return False

        if self.state == RecordingState.RUNNING:
            self.stop_requested = True
            self._transition_to(
                RecordingState.TERMINATING,
                f"received {signal.Signals(signum).name}",
            )
        elif self.state == RecordingState.TERMINATING:
            self.logger.info("Already stopping, forwarding interrupt again")
        else:
            self.logger.debug(f"Ignoring stop request in state {self.state.value}")
            return False

        return self.process.send_signal(signal.SIGINT)

    # =========================================================================
    # STATUS
    # =========================================================================

    def is_clean_stop(self) -> bool:
        """
        Whether the run ended successfully.

        Exit code 0 always counts. After a user-requested stop, the
        delegates' interrupt exit codes count too.
        """
        if self.state != RecordingState.DONE or self.exit_code is None:
            return False
        if self.exit_code == 0:
            return True
        return self.stop_requested and self.exit_code in INTERRUPTED_EXIT_CODES

    def get_elapsed_time(self) -> float:
        """Seconds the delegate has been (or was) running."""
        if self._start_time is None:
            return 0.0
        end = self._end_time if self._end_time is not None else time.time()
        return end - self._start_time

    def get_status_info(self) -> dict:
        """Status snapshot for debugging."""
        return {
            "state": self.state.value,
            "program": self._program,
            "pid": self.process.get_pid(),
            "exit_code": self.exit_code,
            "stop_requested": self.stop_requested,
            "elapsed": self.get_elapsed_time(),
        }

    # =========================================================================
    # INTERNAL
    # =========================================================================

    def _transition_to(self, new_state: RecordingState, reason: str = "") -> None:
        """
        Move to a new state; illegal moves raise RuntimeError.

        TERMINATING -> TERMINATING is accepted as a no-op: the delegate
        exiting and a stop signal can both end RUNNING, in either order.
        """
        old_state = self.state
        if old_state == new_state == RecordingState.TERMINATING:
            return
        if new_state not in STATE_TRANSITIONS[old_state]:
            raise RuntimeError(
                f"Illegal state transition: {old_state.value} -> {new_state.value}"
            )

        self.state = new_state

        log_msg = f"State transition: {old_state.value} -> {new_state.value}"
        if reason:
            log_msg += f" ({reason})"
        self.logger.debug(log_msg)

        if self.on_state_change:
            try:
                self.on_state_change(old_state, new_state)
            except Exception as e:
                self.logger.error(f"Error in state change callback: {e}")

    def _handle_output_line(self, line: str) -> None:
        """Surface progress in place and errors as warnings; drop the rest."""
        if any(marker in line for marker in PROGRESS_MARKERS):
            stream = self._output_stream or sys.stdout
            stream.write(f"\r{line}")
            stream.flush()
            self._progress_shown = True
            if self.on_progress:
                self.on_progress(line)
            return

        if any(marker in line for marker in ERROR_MARKERS):
            self._finish_progress_line()
            self.logger.warning(f"{self._program}: {line.strip()}")
            if self.on_warning:
                self.on_warning(line)
            return

        self.logger.debug(f"{self._program}: {line}")

    def _finish_progress_line(self) -> None:
        """End the in-place progress line before printing anything else."""
        if self._progress_shown:
            stream = self._output_stream or sys.stdout
            stream.write("\n")
            stream.flush()
            self._progress_shown = False

    def _signal_handler(self, signum, _frame):
        """
        Handle stop signals.

        Args:
            signum: Signal number
            _frame: Current stack frame (unused, required by signal API)
        """
        self._finish_progress_line()
        print("⏹️  Stopping recording...")
        self.request_stop(signum)

    def _install_signal_handlers(self) -> None:
        for signum in STOP_SIGNALS:
            self._previous_handlers[signum] = signal.signal(signum, self._signal_handler)

    def _restore_signal_handlers(self) -> None:
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)
        self._previous_handlers.clear()

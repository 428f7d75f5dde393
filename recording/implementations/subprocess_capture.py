"""
Subprocess Capture Implementation

Real delegate process using subprocess.Popen.
Runs ffmpeg or wf-recorder and exposes its stderr as lines.

This wraps Popen to match our CaptureProcessInterface.
"""

import logging
import re
import subprocess
from typing import Iterator, List, Optional

from core.exceptions import ProcessSpawnError
from recording.interfaces.capture_process_interface import CaptureProcessInterface

_LINE_BREAK = re.compile(r"[\r\n]")

READ_CHUNK_SIZE = 4096


class SubprocessCapture(CaptureProcessInterface):
    """
    Delegate process backed by subprocess.Popen.

    The child gets its own session, so a terminal Ctrl+C reaches it only
    through the supervisor's forwarded signal (exactly once).

    Usage:
        process = SubprocessCapture()
        process.start(["ffmpeg", ...])
        for line in process.iter_output():
            ...
        code = process.wait()
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._process: Optional[subprocess.Popen] = None
        self._program: Optional[str] = None

    def start(self, command: List[str]) -> int:
        """
        Launch the delegate with stdin closed and stderr piped.

        stdin=DEVNULL keeps ffmpeg from reading the terminal (and from
        grabbing keystrokes meant for the recorder). stdout is left
        inherited; both delegates report status on stderr.
        """
        if self._process is not None:
            raise RuntimeError("Process already started")

        self._program = command[0]
        self.logger.debug(f"Spawning: {' '.join(command)}")

        try:
            self._process = subprocess.Popen(
                command,
                stdin=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                start_new_session=True,
            )
        except OSError as e:
            raise ProcessSpawnError(f"Could not start {self._program}: {e}") from e

        self.logger.info(f"Started {self._program} (PID: {self._process.pid})")
        return self._process.pid

    def iter_output(self) -> Iterator[str]:
        """
        Read stderr in chunks and split on CR/LF.

        read1() returns whatever is available, so carriage-return
        progress lines arrive without waiting for a newline.
        """
        if self._process is None or self._process.stderr is None:
            return

        stream = self._process.stderr
        pending = ""

        while True:
            chunk = stream.read1(READ_CHUNK_SIZE)
            if not chunk:
                break

            pending += chunk.decode("utf-8", errors="replace")
            *lines, pending = _LINE_BREAK.split(pending)
            for line in lines:
                if line.strip():
                    yield line

        if pending.strip():
            yield pending

    def send_signal(self, signum: int) -> bool:
        process = self._process
        if process is None or process.poll() is not None:
            return False

        try:
            process.send_signal(signum)
        except ProcessLookupError:
            # Exited between the poll and the signal
            return False

        self.logger.debug(f"Sent signal {signum} to PID {process.pid}")
        return True

    def wait(self) -> int:
        if self._process is None:
            raise RuntimeError("Process not started")
        return self._process.wait()

    def is_running(self) -> bool:
        if self._process is None:
            return False
        return self._process.poll() is None

    def get_pid(self) -> Optional[int]:
        return self._process.pid if self._process is not None else None

    def cleanup(self) -> None:
        """Close the stderr pipe and reap the process if it has exited."""
        if self._process is None:
            return

        if self._process.stderr is not None:
            try:
                self._process.stderr.close()
            except OSError as e:
                self.logger.debug(f"Error closing stderr pipe: {e}")

        if self._process.poll() is None:
            self.logger.warning(
                f"{self._program} (PID: {self._process.pid}) still running at cleanup"
            )


#!/usr/bin/env python3
"""
Subprocess execution with a hard wall-clock timeout.
"""

import logging
import os
import signal
import subprocess
import time
from enum import Enum
from typing import List, Optional, Sequence
from dataclasses import dataclass

from .config import LOCALE_NOISE_PREFIX

logger = logging.getLogger(__name__)


class InvocationStatus(str, Enum):
    SUCCESS = "success"
    TIMEOUT = "timeout"
    NON_ZERO_EXIT = "non_zero_exit"
    EMPTY_OUTPUT = "empty_output"


@dataclass(frozen=True)
class InvocationResult:
    """Outcome of one invocation; ``text`` is combined stdout and stderr"""
    status: InvocationStatus
    text: str = ""
    exit_code: Optional[int] = None
    duration: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status is InvocationStatus.SUCCESS


def _filter_output(output: str) -> str:
    lines = output.splitlines()
    return '\n'.join(line for line in lines if not line.startswith(LOCALE_NOISE_PREFIX))


class ProcessInvoker:
    """Runs a binary with an argument vector and classifies the outcome.

    The child gets its own session so that a timeout kills the whole process
    group, including grandchildren that still hold the output pipe.
    """

    def invoke(self, binary: str, args: Sequence[str], timeout: float) -> InvocationResult:
        cmd: List[str] = [binary, *args]
        start = time.monotonic()

        try:
            process = subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors='replace',
                start_new_session=True,
            )
        except OSError as e:
            exit_code = 126 if isinstance(e, PermissionError) else 127
            logger.warning("Could not start %s: %s", binary, e)
            return InvocationResult(InvocationStatus.NON_ZERO_EXIT, str(e), exit_code)

        try:
            output, _ = process.communicate(timeout=timeout)
        except subprocess.TimeoutExpired:
            self._kill(process)
            duration = time.monotonic() - start
            logger.warning("Timeout after %ss: %s", timeout, ' '.join(cmd))
            return InvocationResult(InvocationStatus.TIMEOUT, duration=duration)

        duration = time.monotonic() - start
        text = _filter_output(output or "")
        logger.debug("%s exited %s in %.2fs", ' '.join(cmd), process.returncode, duration)

        if process.returncode != 0:
            return InvocationResult(InvocationStatus.NON_ZERO_EXIT, text, process.returncode, duration)
        if not text.strip():
            return InvocationResult(InvocationStatus.EMPTY_OUTPUT, "", 0, duration)
        return InvocationResult(InvocationStatus.SUCCESS, text, 0, duration)

    @staticmethod
    def _kill(process: subprocess.Popen) -> None:
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except (ProcessLookupError, PermissionError):
            process.kill()
        # Reap the child and close its pipes
        process.communicate()

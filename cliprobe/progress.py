#!/usr/bin/env python3
"""
Progress indicators and timing helpers for cliprobe.

Everything here writes to stderr so that JSON on stdout stays clean.
"""

import functools
import logging
import sys
import threading
import time

logger = logging.getLogger(__name__)


def timed(func):
    """Log how long the wrapped call took at DEBUG level"""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start = time.time()
        try:
            return func(*args, **kwargs)
        finally:
            logger.debug("%s took %.2fs", func.__name__, time.time() - start)
    return wrapper


class ProgressIndicator:
    """Spinner line that updates in place while a long analysis runs"""

    SPINNER_CHARS = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"

    def __init__(self, enabled: bool = True, stream=None):
        self.stream = stream or sys.stderr
        # Spinner control characters only make sense on a terminal
        self.enabled = enabled and hasattr(self.stream, "isatty") and self.stream.isatty()
        self.current_message = ""
        self.spinner_index = 0
        self.spinner_thread = None
        self.stop_event = threading.Event()
        self._lock = threading.Lock()

    def _write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def update(self, message: str):
        """Replace the message shown next to the spinner"""
        if not self.enabled:
            return
        with self._lock:
            self.current_message = message
        if self.spinner_thread is None:
            self._write(f"\r{' ' * 80}\r{message}")

    def start_spinner(self, message: str):
        """Start continuous spinner animation"""
        if not self.enabled:
            return

        self.stop_spinner()
        self.current_message = message
        self.stop_event.clear()
        self.spinner_thread = threading.Thread(target=self._animate_spinner, daemon=True)
        self.spinner_thread.start()

    def stop_spinner(self):
        if self.spinner_thread is not None:
            self.stop_event.set()
            self.spinner_thread.join(timeout=0.5)
            self.spinner_thread = None

    def _animate_spinner(self):
        while not self.stop_event.is_set():
            spinner = self.SPINNER_CHARS[self.spinner_index % len(self.SPINNER_CHARS)]
            self.spinner_index += 1
            with self._lock:
                message = self.current_message
            self._write(f"\r{' ' * 80}\r{spinner} {message}")

            if self.stop_event.wait(0.1):
                break

    def complete(self, final_message: str = None):
        """Stop the spinner, clear the line and optionally print a summary"""
        if not self.enabled:
            return

        self.stop_spinner()
        self._write(f"\r{' ' * 80}\r")

        if final_message:
            self._write(final_message + "\n")

        self.current_message = ""

#!/usr/bin/env python3
"""
Error types raised by cliprobe.

Subprocess failures are not exceptions: they come back from the invoker as an
``InvocationStatus`` and degrade a single node of the analysis.
"""


class CliProbeError(Exception):
    """Base class for cliprobe errors"""


class BinaryValidationError(CliProbeError):
    """The binary path was rejected before analysis"""

    def __init__(self, binary: str, reason: str):
        super().__init__(f"{reason}: {binary}")
        self.binary = binary
        self.reason = reason


class ConfigLoadError(CliProbeError):
    """A rule table file is missing or malformed"""

    def __init__(self, path, reason: str):
        super().__init__(f"{reason}: {path}")
        self.path = path
        self.reason = reason

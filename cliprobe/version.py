#!/usr/bin/env python3
"""
Version detection utilities for analyzed binaries.
"""

import logging
import os
import re
from typing import Optional

from .config import VERSION_PROBE_TIMEOUT
from .invoker import ProcessInvoker

logger = logging.getLogger(__name__)

VERSION_PATTERNS = [
    re.compile(r'version\s+v?([0-9]+\.[0-9]+\.[0-9]+[^\s,;)]*)', re.IGNORECASE),
    re.compile(r'v?([0-9]+\.[0-9]+\.[0-9]+[^\s,;)]*)'),
    re.compile(r'([0-9]+\.[0-9]+)'),
    re.compile(r'Version:\s*([^\s]+)', re.IGNORECASE),
    re.compile(r'version\s+([^\s]+)', re.IGNORECASE),
]


class VersionDetector:
    """Detects the version string reported by a binary"""

    def __init__(self, invoker: Optional[ProcessInvoker] = None, timeout: float = VERSION_PROBE_TIMEOUT):
        self.invoker = invoker or ProcessInvoker()
        self.timeout = timeout

    def detect_version(self, binary: str) -> str:
        """Try version flags first, then the file modification time"""
        for flag in ("--version", "-V", "version"):
            version = self._try_version_flag(binary, flag)
            if version:
                logger.debug("Detected version %s via %s", version, flag)
                return version

        return self._get_file_modification_time(binary)

    def _try_version_flag(self, binary: str, flag: str) -> Optional[str]:
        result = self.invoker.invoke(binary, [flag], self.timeout)
        if result.text:
            return self.extract_version(result.text)
        return None

    @staticmethod
    def _get_file_modification_time(binary: str) -> str:
        """Use file modification time as version fallback"""
        try:
            return f"mtime-{int(os.stat(binary).st_mtime)}"
        except OSError:
            return "unknown"

    @staticmethod
    def extract_version(text: str) -> Optional[str]:
        """Extract version number from text using common patterns"""
        for pattern in VERSION_PATTERNS:
            match = pattern.search(text)
            if match:
                return match.group(1)
        return None

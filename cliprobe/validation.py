#!/usr/bin/env python3
"""
Pre-flight checks for binaries handed to the analyzer.
"""

import logging
import os
import shutil

from .config import BINARY_NAME_PATTERN, STANDARD_BINARY_PREFIXES
from .exceptions import BinaryValidationError

logger = logging.getLogger(__name__)


def validate_binary(binary: str) -> str:
    """Resolve ``binary`` to an absolute, symlink-free executable path.

    Bare names are looked up on PATH, then in the working directory. Raises
    BinaryValidationError when the name is unsafe or nothing executable is found.
    """
    if not binary:
        raise BinaryValidationError(binary, "Binary name is empty")

    if not BINARY_NAME_PATTERN.match(binary):
        raise BinaryValidationError(binary, "Binary name contains disallowed characters")

    if '..' in binary:
        raise BinaryValidationError(binary, "Path traversal detected in binary name")

    if '/' in binary:
        candidate = os.path.abspath(binary)
    else:
        candidate = shutil.which(binary)
        if candidate is None:
            local = os.path.join(os.getcwd(), binary)
            if not os.path.isfile(local):
                raise BinaryValidationError(binary, "Binary not found in PATH or working directory")
            candidate = local

    if not os.path.isfile(candidate):
        raise BinaryValidationError(candidate, "Binary not found")

    if not os.access(candidate, os.X_OK):
        raise BinaryValidationError(candidate, "Binary is not executable")

    resolved = os.path.realpath(candidate)
    if not resolved.startswith(STANDARD_BINARY_PREFIXES):
        logger.warning("CLI binary outside standard paths, proceed with caution: %s", resolved)

    logger.info("Validated CLI binary: %s", resolved)
    return resolved

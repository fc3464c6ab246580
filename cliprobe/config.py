#!/usr/bin/env python3
"""
Configuration constants and patterns for cliprobe.
"""

import re
from pathlib import Path

AGENT_VERSION = "0.3.0"

# Subprocess timeouts in seconds
HELP_TIMEOUT = 10
VERSION_TIMEOUT = 5
VERSION_PROBE_TIMEOUT = 2

# Subcommand recursion
DEFAULT_MAX_DEPTH = 3
DEFAULT_MAX_WORKERS = 4

# Root help fallback text when neither --help nor --version produce output
NO_HELP_AVAILABLE = "No help available"

# Help text parsing
SECTION_HEADING_PATTERNS = [
    re.compile(r'^(Available )?Commands?:?$'),
    re.compile(r'^Subcommands:?$'),
]
SUBCOMMAND_LINE_PATTERN = re.compile(r'^\s+[A-Za-z]')
OPTION_LINE_PATTERN = re.compile(r'^\s*-{1,2}[A-Za-z0-9]')
OPTION_TOKEN_PATTERN = re.compile(r'--?[A-Za-z0-9][A-Za-z0-9-]*')
# Option forms must start a word: "-f, --file" yields both, "some-file" neither
OPTION_FORM_PATTERN = re.compile(r'(?<![^\s,\[])--?[A-Za-z0-9][A-Za-z0-9-]*')
# Help columns are separated by two or more spaces
COLUMN_GAP_PATTERN = re.compile(r'\s{2,}')
USAGE_LINE_PATTERN = re.compile(r'^\s*usage:\s+', re.IGNORECASE)
REQUIRED_ARG_PATTERN = re.compile(r'<([^>]+)>')

# Enum extraction from help text (bounded to keep backtracking linear)
ENUM_SCAN_LIMIT = 1000
ENUM_BRACKET_PATTERN = re.compile(r'\[([A-Za-z0-9|_-]{1,100})\]')

# Numeric fallback when no constraint table entry matches
DEFAULT_NUMERIC_MIN = 0
DEFAULT_NUMERIC_MAX = 2147483647
DEFAULT_NUMERIC_TYPE = "integer"

# Rule tables
RULES_DIR_ENV = "CLIPROBE_RULES_DIR"
PACKAGED_RULES_DIR = Path(__file__).resolve().parent / "data"
OPTION_PATTERNS_FILE = "option-patterns.yaml"
NUMERIC_CONSTRAINTS_FILE = "numeric-constraints.yaml"
ENUM_DEFINITIONS_FILE = "enum-definitions.yaml"

# Logging
LOG_LEVEL_ENV = "CLIPROBE_LOG_LEVEL"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Binary validation
BINARY_NAME_PATTERN = re.compile(r'^[A-Za-z0-9/_.-]+$')
STANDARD_BINARY_PREFIXES = ('/bin/', '/usr/bin/', '/usr/local/bin/', '/opt/')

# Output lines emitted by misconfigured locales, dropped from captured text
LOCALE_NOISE_PREFIX = "Unknown locale"

#!/usr/bin/env python3
"""
Help text parsing: subcommand sections, option lines and the usage line.
"""

import logging
from enum import Enum
from typing import Dict, Iterable, List, Optional
from dataclasses import dataclass

from .config import (
    SECTION_HEADING_PATTERNS, SUBCOMMAND_LINE_PATTERN,
    OPTION_LINE_PATTERN, OPTION_TOKEN_PATTERN, OPTION_FORM_PATTERN,
    COLUMN_GAP_PATTERN, USAGE_LINE_PATTERN, REQUIRED_ARG_PATTERN,
)

logger = logging.getLogger(__name__)


class ParserState(Enum):
    OUTSIDE = "outside"
    IN_SECTION = "in_section"


@dataclass(frozen=True)
class OptionLine:
    """Forms and description declared on one option line"""
    short: Optional[str] = None
    long: Optional[str] = None
    description: str = ""


class HelpTextParser:
    """Extracts subcommand names and option tokens from free-form help output"""

    @staticmethod
    def is_section_heading(line: str) -> bool:
        return any(pattern.match(line) for pattern in SECTION_HEADING_PATTERNS)

    def iter_subcommand_entries(self, lines: Iterable[str]):
        """Yield ``(name, description)`` pairs in order of appearance.

        A heading line switches to IN_SECTION from either state and a blank
        line switches back to OUTSIDE. Inside a section every indented line
        starting with a letter contributes its first token. The description is
        the rest of the line after any argument column, so ``add [NAME]  Add one``
        describes ``add`` as ``Add one``.
        """
        state = ParserState.OUTSIDE

        for line in lines:
            if self.is_section_heading(line):
                state = ParserState.IN_SECTION
                continue

            if state is ParserState.OUTSIDE:
                continue

            if not line.strip():
                state = ParserState.OUTSIDE
                continue

            if SUBCOMMAND_LINE_PATTERN.match(line):
                parts = line.split(None, 1)
                name = parts[0]
                if not name[0].isalpha():
                    continue
                description = parts[1].strip() if len(parts) > 1 else ""
                columns = COLUMN_GAP_PATTERN.split(description, maxsplit=1)
                if len(columns) > 1 and columns[0][:1] in ('[', '<'):
                    description = columns[1]
                yield name, description

    def iter_subcommands(self, lines: Iterable[str]):
        for name, _ in self.iter_subcommand_entries(lines):
            yield name

    def parse_subcommands(self, text: str) -> List[str]:
        """Sorted, deduplicated subcommand names; empty when no section is found"""
        if not text:
            return []
        names = sorted(set(self.iter_subcommands(text.splitlines())))
        logger.debug("Extracted %d subcommands from %d chars of help", len(names), len(text))
        return names

    def parse_subcommand_descriptions(self, text: str) -> Dict[str, str]:
        """Name to one-line description; the first non-empty description wins"""
        descriptions: Dict[str, str] = {}
        if not text:
            return descriptions
        for name, description in self.iter_subcommand_entries(text.splitlines()):
            if not descriptions.get(name):
                descriptions[name] = description
        return descriptions

    def parse_options(self, text: str) -> List[str]:
        """Sorted, deduplicated option tokens from lines that start with a hyphen"""
        if not text:
            return []

        options = set()
        for line in text.splitlines():
            if not OPTION_LINE_PATTERN.match(line):
                continue
            match = OPTION_TOKEN_PATTERN.search(line)
            if match:
                options.add(match.group(0))

        logger.debug("Extracted %d options", len(options))
        return sorted(options)

    def option_context(self, text: str, token: str) -> Optional[str]:
        """First option line that declares ``token``, used to scope enum extraction"""
        if not text:
            return None

        for line in text.splitlines():
            if not OPTION_LINE_PATTERN.match(line):
                continue
            for match in OPTION_TOKEN_PATTERN.finditer(line):
                if match.group(0) == token:
                    return line.strip()
        return None

    @staticmethod
    def parse_option_line(line: str) -> OptionLine:
        """``-p, --port <n>   Port to bind`` -> ``-p``, ``--port``, ``Port to bind``"""
        columns: List[str] = COLUMN_GAP_PATTERN.split(line.strip(), maxsplit=1)
        short: Optional[str] = None
        long: Optional[str] = None

        for match in OPTION_FORM_PATTERN.finditer(columns[0]):
            form = match.group(0)
            if form.startswith('--'):
                long = long or form
            else:
                short = short or form

        description = columns[1].strip() if len(columns) > 1 else ""
        return OptionLine(short=short, long=long, description=description)

    @staticmethod
    def parse_required_args(text: str) -> List[str]:
        """``<ARG>`` names from the first usage line, in order"""
        if not text:
            return []

        for line in text.splitlines():
            if USAGE_LINE_PATTERN.match(line):
                args = REQUIRED_ARG_PATTERN.findall(line)
                logger.debug("Detected %d required arguments", len(args))
                return args
        return []


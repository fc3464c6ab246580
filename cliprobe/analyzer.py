#!/usr/bin/env python3
"""
CLI analysis engine for understanding command structure and options.
"""

import logging
import os
import time
from datetime import datetime, timezone
from typing import List, Optional

from .config import (
    AGENT_VERSION, HELP_TIMEOUT, VERSION_TIMEOUT, DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_WORKERS, NO_HELP_AVAILABLE,
)
from .invoker import ProcessInvoker, InvocationStatus
from .parser import HelpTextParser
from .classifier import OptionClassifier
from .constraints import ConstraintResolver
from .tree import SubcommandTreeBuilder
from .version import VersionDetector
from .rules import RuleTable, load_rule_table
from .models import CliAnalysis, OptionDescriptor

logger = logging.getLogger(__name__)


class CLIAnalyzer:
    """Help driven analysis of a single binary.

    Subprocess failures never abort the analysis: the affected node degrades
    to empty output and the rest of the tree is still built.
    """

    def __init__(self, rule_table: Optional[RuleTable] = None,
                 invoker: Optional[ProcessInvoker] = None,
                 max_depth: int = DEFAULT_MAX_DEPTH,
                 help_timeout: float = HELP_TIMEOUT,
                 version_timeout: float = VERSION_TIMEOUT,
                 max_workers: int = DEFAULT_MAX_WORKERS,
                 detect_version: bool = True):
        self.rule_table = rule_table if rule_table is not None else load_rule_table()
        self.invoker = invoker or ProcessInvoker()
        self.max_depth = max_depth
        self.help_timeout = help_timeout
        self.version_timeout = version_timeout
        self.detect_version = detect_version

        self.parser = HelpTextParser()
        self.resolver = ConstraintResolver(self.rule_table)
        self.classifier = OptionClassifier(self.rule_table, self.resolver)
        self.tree_builder = SubcommandTreeBuilder(
            invoker=self.invoker,
            parser=self.parser,
            classifier=self.classifier,
            timeout=help_timeout,
            max_workers=max_workers,
        )
        self.version_detector = VersionDetector(self.invoker)

    def analyze(self, binary: str, progress=None) -> CliAnalysis:
        """Analyze an already validated binary path"""
        start_time = time.time()
        logger.info("Analyzing CLI tool: %s", binary)

        self._progress(progress, f"Reading help for {os.path.basename(binary)}")
        help_text = self.get_root_help(binary)

        subcommands = self.parser.parse_subcommands(help_text)
        logger.info("Detected %d subcommands", len(subcommands))

        options = self.describe_options(help_text)
        logger.info("Detected %d options", len(options))

        self._progress(progress, f"Building command tree (max depth: {self.max_depth})")
        tree_start = time.time()
        descriptions = self.parser.parse_subcommand_descriptions(help_text)
        tree = self.tree_builder.build(binary, (), self.max_depth, subcommands, descriptions)
        logger.debug("Command tree for '%s' took %.2fs", binary, time.time() - tree_start)

        version = None
        if self.detect_version:
            self._progress(progress, "Detecting version")
            version = self.version_detector.detect_version(binary)

        analysis = CliAnalysis(
            binary=binary,
            binary_basename=os.path.basename(binary),
            help_text=help_text,
            subcommands=tree,
            options=options,
            analyzed_at=datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            agent_version=AGENT_VERSION,
            version=version,
            max_depth=self.max_depth,
            required_args=self.parser.parse_required_args(help_text),
        )

        logger.info("CLI analysis completed: %d subcommands, %d options", analysis.subcommand_count, analysis.option_count)
        logger.debug("Analysis of '%s' took %.2fs", binary, time.time() - start_time)
        return analysis

    def get_root_help(self, binary: str) -> str:
        """``--help`` output, falling back once to ``--version``"""
        result = self.invoker.invoke(binary, ["--help"], self.help_timeout)

        if result.status is InvocationStatus.TIMEOUT:
            logger.error("Timeout while getting help from %s", binary)
        elif result.status is InvocationStatus.NON_ZERO_EXIT:
            logger.warning("Failed to get help (exit code: %s), some CLIs may not support --help", result.exit_code)

        if result.ok:
            return result.text

        logger.warning("No help output received, trying --version")
        fallback = self.invoker.invoke(binary, ["--version"], self.version_timeout)
        if fallback.ok:
            return fallback.text
        return NO_HELP_AVAILABLE

    def describe_options(self, help_text: str) -> List[OptionDescriptor]:
        return self.tree_builder.describe_options(help_text)

    @staticmethod
    def _progress(progress, message: str) -> None:
        if progress is not None:
            progress.update(message)

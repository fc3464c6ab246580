#!/usr/bin/env python3
"""
Recursive subcommand discovery through ``--help``.
"""

import dataclasses
import logging
import threading
from typing import Dict, List, Optional, Sequence, Tuple
from concurrent.futures import ThreadPoolExecutor, as_completed

from .config import HELP_TIMEOUT, DEFAULT_MAX_DEPTH, DEFAULT_MAX_WORKERS
from .invoker import ProcessInvoker
from .parser import HelpTextParser
from .models import SubcommandNode, OptionDescriptor

logger = logging.getLogger(__name__)

CommandPath = Tuple[str, ...]


class SubcommandTreeBuilder:
    """Builds a bounded-depth tree of subcommands.

    Every discovered name costs one ``binary <path> <name> --help`` call.
    At most ``max_workers`` of those calls run at once across the whole
    tree, however deep the recursion goes.
    Recursion is bounded only by ``max_depth``; a CLI that lists itself as a
    subcommand produces repeated nodes until the budget runs out.
    """

    def __init__(self, invoker: Optional[ProcessInvoker] = None,
                 parser: Optional[HelpTextParser] = None,
                 classifier=None,
                 timeout: float = HELP_TIMEOUT,
                 max_workers: int = DEFAULT_MAX_WORKERS):
        self.invoker = invoker or ProcessInvoker()
        self.parser = parser or HelpTextParser()
        self.classifier = classifier
        self.timeout = timeout
        self.max_workers = max_workers
        self._slots = threading.BoundedSemaphore(max(1, max_workers))

    def build(self, binary: str, path_prefix: Sequence[str] = (),
              max_depth: int = DEFAULT_MAX_DEPTH,
              subcommands: Optional[List[str]] = None,
              descriptions: Optional[Dict[str, str]] = None) -> Dict[str, SubcommandNode]:
        """Return the subtree under ``binary *path_prefix`` keyed by name.

        When ``subcommands`` is omitted the names and their descriptions are
        discovered from the prefix's own help output.
        """
        if max_depth <= 0:
            logger.debug("Max depth reached, returning empty tree")
            return {}

        prefix: CommandPath = tuple(path_prefix)
        if subcommands is None:
            result = self._invoke_help(binary, prefix)
            help_text = result.text if result.ok else ""
            subcommands = self.parser.parse_subcommands(help_text)
            descriptions = self.parser.parse_subcommand_descriptions(help_text)
        descriptions = descriptions or {}

        names = sorted(set(subcommands))
        if not names:
            logger.debug("No subcommands under '%s', returning empty tree", ' '.join(prefix))
            return {}

        logger.debug("Processing %d subcommands under '%s' at depth %d", len(names), ' '.join(prefix), max_depth)

        nodes: Dict[str, SubcommandNode] = {}
        if self.max_workers <= 1 or len(names) == 1:
            for name in names:
                nodes[name] = self._build_node(binary, prefix, name, max_depth, descriptions.get(name, ""))
        else:
            # Sibling subtrees share no state, so they can run in parallel
            with ThreadPoolExecutor(max_workers=min(self.max_workers, len(names))) as executor:
                future_to_name = {
                    executor.submit(self._build_node, binary, prefix, name, max_depth, descriptions.get(name, "")): name
                    for name in names
                }
                for future in as_completed(future_to_name):
                    nodes[future_to_name[future]] = future.result()

        # Key order follows the sorted names, never completion order
        return {name: nodes[name] for name in names}

    def _invoke_help(self, binary: str, path: CommandPath):
        # Nested levels open their own pools; the semaphore bounds the subprocesses
        with self._slots:
            return self.invoker.invoke(binary, [*path, "--help"], self.timeout)

    def _build_node(self, binary: str, prefix: CommandPath, name: str, max_depth: int,
                    description: str = "") -> SubcommandNode:
        path = (*prefix, name)
        logger.debug("Analyzing subcommand: %s", ' '.join(path))

        result = self._invoke_help(binary, path)
        if not result.ok:
            logger.warning("Failed to get help for subcommand '%s' (%s)", ' '.join(path), result.status.value)
            return SubcommandNode(name=name, help_text="", depth=max_depth - 1, description=description)

        help_text = result.text
        nested_names = self.parser.parse_subcommands(help_text)

        nested: Dict[str, SubcommandNode] = {}
        if max_depth > 1 and nested_names:
            logger.debug("Recursively analyzing '%s' (depth=%d, nested=%d)",
                         ' '.join(path), max_depth - 1, len(nested_names))
            nested = self.build(binary, path, max_depth - 1, nested_names,
                                self.parser.parse_subcommand_descriptions(help_text))

        return SubcommandNode(
            name=name,
            help_text=help_text,
            depth=max_depth - 1,
            nested_names=nested_names,
            nested=nested,
            options=self.describe_options(help_text),
            description=description,
        )

    def describe_options(self, help_text: str) -> List[OptionDescriptor]:
        """Classified options of one help text with their declared forms"""
        if self.classifier is None:
            return []

        descriptors = []
        for token in self.parser.parse_options(help_text):
            line = self.parser.option_context(help_text, token)
            descriptor = self.classifier.describe(token, line)
            if line:
                forms = self.parser.parse_option_line(line)
                descriptor = dataclasses.replace(
                    descriptor, short=forms.short, long=forms.long, description=forms.description
                )
            descriptors.append(descriptor)
        return descriptors

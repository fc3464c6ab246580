#!/usr/bin/env python3
"""
Keyword based option type inference.
"""

import logging
from typing import Dict, Iterable, List, Optional

from .models import OptionType, OptionPattern, OptionDescriptor, normalize_option_name
from .rules import RuleTable
from .constraints import ConstraintResolver

logger = logging.getLogger(__name__)


def _normalize_keyword(keyword: str, case_sensitive: bool) -> str:
    keyword = keyword.replace('-', '_')
    return keyword if case_sensitive else keyword.lower()


class OptionClassifier:
    """Maps option tokens to an OptionType using the rule table's patterns.

    Patterns are tried by descending priority. The sort is stable, so patterns
    of equal priority keep their table order; callers must not rely on which
    of two equal-priority matches wins.
    """

    def __init__(self, rule_table: RuleTable, resolver: Optional[ConstraintResolver] = None):
        self.rule_table = rule_table
        self.resolver = resolver or ConstraintResolver(rule_table)
        self.settings = rule_table.settings
        self._patterns: List[OptionPattern] = sorted(
            rule_table.patterns, key=lambda pattern: pattern.priority, reverse=True
        )

    def _matches(self, name: str, pattern: OptionPattern) -> bool:
        for keyword in pattern.keywords:
            keyword = _normalize_keyword(keyword, self.settings.case_sensitive)
            if len(keyword) < self.settings.min_keyword_length:
                continue
            if self.settings.partial_match:
                if keyword in name:
                    return True
            elif keyword == name:
                return True
        return False

    def classify(self, token: str) -> OptionType:
        name = normalize_option_name(token, lowercase=not self.settings.case_sensitive)

        if name:
            for pattern in self._patterns:
                if self._matches(name, pattern):
                    logger.debug("Inferred type for '%s': %s", token, pattern.type.value)
                    return pattern.type

        logger.debug("No pattern matched for '%s', defaulting to %s", token, self.rule_table.default_type.value)
        return self.rule_table.default_type

    def describe(self, token: str, help_text: Optional[str] = None) -> OptionDescriptor:
        """Classify a token and attach the constraint for its type"""
        option_type = self.classify(token)
        return OptionDescriptor(
            raw_token=token,
            normalized_name=normalize_option_name(token),
            inferred_type=option_type,
            constraint=self.resolver.resolve(token, option_type, help_text),
        )

    def group_by_type(self, tokens: Iterable[str]) -> Dict[str, List[str]]:
        """Bucket tokens under every type name, empty buckets included"""
        groups: Dict[str, List[str]] = {option_type.value: [] for option_type in OptionType}
        for token in tokens:
            groups[self.classify(token).value].append(token)
        return groups

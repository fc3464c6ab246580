#!/usr/bin/env python3
"""
Constraint resolution for numeric and enum options.
"""

import logging
from typing import List, Optional

from .config import ENUM_SCAN_LIMIT, ENUM_BRACKET_PATTERN
from .models import OptionType, NumericConstraint, EnumDefinition, Constraint, normalize_option_name
from .rules import RuleTable, AliasRule

logger = logging.getLogger(__name__)


class ConstraintResolver:
    """Looks up ranges and value sets for classified options"""

    def __init__(self, rule_table: RuleTable):
        self.rule_table = rule_table

    @staticmethod
    def _find(rules: List[AliasRule], name: str) -> Optional[AliasRule]:
        """First rule with an alias equal to or contained in ``name``"""
        for rule in rules:
            for alias in rule.aliases:
                alias = normalize_option_name(alias)
                if alias and (alias == name or alias in name):
                    return rule
        return None

    def resolve_numeric(self, name: str) -> NumericConstraint:
        normalized = normalize_option_name(name)
        rule = self._find(self.rule_table.numeric_constraints, normalized)
        if rule:
            logger.debug("Found numeric constraint '%s' for '%s'", rule.name, name)
            return rule.value

        logger.debug("Using default numeric constraint for '%s'", name)
        return self.rule_table.default_numeric

    def resolve_enum(self, name: str, help_text: Optional[str] = None) -> EnumDefinition:
        normalized = normalize_option_name(name)
        rule = self._find(self.rule_table.enum_definitions, normalized)
        if rule:
            logger.debug("Found enum definition '%s' for '%s'", rule.name, name)
            return rule.value

        values = self.extract_enum_values(help_text)
        if values:
            logger.debug("Extracted enum values from help text for '%s': %s", name, values)
            return EnumDefinition(values=values, case_sensitive=True)

        logger.debug("No enum values found for '%s'", name)
        return EnumDefinition(values=[])

    @staticmethod
    def extract_enum_values(help_text: Optional[str]) -> List[str]:
        """Values of the first ``[a|b|c]`` group in the first 1000 characters"""
        if not help_text:
            return []

        match = ENUM_BRACKET_PATTERN.search(help_text[:ENUM_SCAN_LIMIT])
        if not match:
            return []
        return [value for value in match.group(1).split('|') if value]

    def resolve(self, name: str, option_type: OptionType, help_text: Optional[str] = None) -> Optional[Constraint]:
        if option_type is OptionType.NUMERIC:
            return self.resolve_numeric(name)
        if option_type is OptionType.ENUM:
            return self.resolve_enum(name, help_text)
        return None

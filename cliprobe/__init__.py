#!/usr/bin/env python3
"""
cliprobe - CLI introspection from help output

Runs an unmodified binary with ``--help``, parses what it prints and builds a
structured model of its interface: a bounded-depth subcommand tree and a list
of options classified as numeric, path, enum, boolean or string, with ranges
and allowed values taken from YAML rule tables.
"""

from .config import AGENT_VERSION
from .models import (
    CliAnalysis, SubcommandNode, OptionDescriptor, OptionType,
    NumericConstraint, EnumDefinition, normalize_option_name,
)
from .exceptions import CliProbeError, BinaryValidationError, ConfigLoadError
from .rules import RuleTable, load_rule_table, reload_rule_table
from .invoker import ProcessInvoker, InvocationResult, InvocationStatus
from .parser import HelpTextParser, ParserState
from .classifier import OptionClassifier
from .constraints import ConstraintResolver
from .tree import SubcommandTreeBuilder
from .analyzer import CLIAnalyzer
from .version import VersionDetector
from .validation import validate_binary

__version__ = AGENT_VERSION

# Main exports
__all__ = [
    "CLIAnalyzer",
    "CliAnalysis",
    "SubcommandNode",
    "OptionDescriptor",
    "OptionType",
    "NumericConstraint",
    "EnumDefinition",
    "normalize_option_name",
    "CliProbeError",
    "BinaryValidationError",
    "ConfigLoadError",
    "RuleTable",
    "load_rule_table",
    "reload_rule_table",
    "ProcessInvoker",
    "InvocationResult",
    "InvocationStatus",
    "HelpTextParser",
    "ParserState",
    "OptionClassifier",
    "ConstraintResolver",
    "SubcommandTreeBuilder",
    "VersionDetector",
    "validate_binary",
]

#!/usr/bin/env python3
"""
Rule store for option classification and constraint lookup.

Three YAML tables drive the classifier and the constraint resolver:

- ``option-patterns.yaml``: ``patterns`` (type, priority, keywords),
  ``default_type`` and matching ``settings``
- ``numeric-constraints.yaml``: ``constraints`` keyed by name, each with
  ``aliases``, ``min``, ``max``, ``type`` and ``unit``; ``default_constraints``
- ``enum-definitions.yaml``: ``enums`` keyed by name, each with ``aliases``,
  ``values`` and ``case_sensitive``

Tables are loaded once per directory and shared as an immutable ``RuleTable``.
A missing or malformed table is logged and replaced by its defaults.
"""

import functools
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Any, Union
from dataclasses import dataclass, field

import yaml

from .config import (
    RULES_DIR_ENV, PACKAGED_RULES_DIR, OPTION_PATTERNS_FILE,
    NUMERIC_CONSTRAINTS_FILE, ENUM_DEFINITIONS_FILE,
    DEFAULT_NUMERIC_MIN, DEFAULT_NUMERIC_MAX, DEFAULT_NUMERIC_TYPE,
)
from .exceptions import ConfigLoadError
from .models import OptionType, OptionPattern, NumericConstraint, EnumDefinition, Constraint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AliasRule:
    """Named table entry matched against option names through its aliases"""
    name: str
    aliases: List[str]
    value: Constraint


@dataclass(frozen=True)
class MatchSettings:
    case_sensitive: bool = False
    partial_match: bool = True
    min_keyword_length: int = 1


@dataclass(frozen=True)
class RuleTable:
    """Immutable snapshot of the three rule tables"""
    patterns: List[OptionPattern] = field(default_factory=list)
    numeric_constraints: List[AliasRule] = field(default_factory=list)
    enum_definitions: List[AliasRule] = field(default_factory=list)
    default_type: OptionType = OptionType.STRING
    default_numeric: NumericConstraint = NumericConstraint(
        DEFAULT_NUMERIC_MIN, DEFAULT_NUMERIC_MAX, DEFAULT_NUMERIC_TYPE
    )
    settings: MatchSettings = MatchSettings()
    source_dir: Optional[str] = None

    @classmethod
    def from_directory(cls, rules_dir: Union[str, Path]) -> "RuleTable":
        """Load every table found in ``rules_dir``, falling back per table"""
        rules_dir = Path(rules_dir)
        values: Dict[str, Any] = {"source_dir": str(rules_dir)}

        try:
            values.update(parse_option_patterns(read_table(rules_dir / OPTION_PATTERNS_FILE)))
        except ConfigLoadError as e:
            logger.warning("Option patterns unavailable, every option will be classified as string (%s)", e)

        try:
            values.update(parse_numeric_constraints(read_table(rules_dir / NUMERIC_CONSTRAINTS_FILE)))
        except ConfigLoadError as e:
            logger.warning("Numeric constraints unavailable, using default range (%s)", e)

        try:
            values.update(parse_enum_definitions(read_table(rules_dir / ENUM_DEFINITIONS_FILE)))
        except ConfigLoadError as e:
            logger.warning("Enum definitions unavailable, relying on help text extraction (%s)", e)

        table = cls(**values)
        logger.debug(
            "Loaded rule table from %s: %d patterns, %d numeric constraints, %d enums",
            rules_dir, len(table.patterns), len(table.numeric_constraints), len(table.enum_definitions)
        )
        return table


def read_table(path: Path) -> Dict[str, Any]:
    """Read one YAML table, raising ConfigLoadError when it cannot be used"""
    if not path.is_file():
        raise ConfigLoadError(path, "Rule file not found")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigLoadError(path, f"Failed to parse rule file ({e})") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError(path, "Rule file must contain a mapping")
    return data


def _string_list(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item is not None and str(item)]
    return []


def _section(data: Dict[str, Any], key: str, expected: type) -> Any:
    """Top-level section of a table, empty when absent"""
    value = data.get(key)
    if value is None:
        return expected()
    if not isinstance(value, expected):
        raise ConfigLoadError(key, f"Section must be a {expected.__name__}, got {type(value).__name__}")
    return value


def parse_option_patterns(data: Dict[str, Any]) -> Dict[str, Any]:
    patterns = []
    for index, entry in enumerate(_section(data, 'patterns', list)):
        if not isinstance(entry, dict):
            logger.warning("Skipping option pattern #%d: not a mapping", index)
            continue

        option_type = OptionType.parse(entry.get('type'))
        if option_type is None:
            logger.warning("Skipping option pattern #%d: unknown type %r", index, entry.get('type'))
            continue

        try:
            priority = int(entry.get('priority', 0))
        except (TypeError, ValueError):
            logger.warning("Skipping option pattern #%d: priority %r is not an integer", index, entry.get('priority'))
            continue

        patterns.append(OptionPattern(
            type=option_type,
            priority=priority,
            keywords=_string_list(entry.get('keywords')),
            description=str(entry.get('description') or ""),
        ))

    values: Dict[str, Any] = {"patterns": patterns}

    default_type = OptionType.parse(data.get('default_type', OptionType.STRING.value))
    values["default_type"] = default_type or OptionType.STRING

    settings = data.get('settings') or {}
    if isinstance(settings, dict):
        try:
            min_keyword_length = int(settings.get('min_keyword_length', 1))
        except (TypeError, ValueError):
            logger.warning("Ignoring non-integer min_keyword_length %r", settings.get('min_keyword_length'))
            min_keyword_length = 1
        values["settings"] = MatchSettings(
            case_sensitive=bool(settings.get('case_sensitive', False)),
            partial_match=bool(settings.get('partial_match', True)),
            min_keyword_length=min_keyword_length,
        )

    return values


def _numeric_constraint(entry: Dict[str, Any]) -> NumericConstraint:
    unit = entry.get('unit')
    return NumericConstraint(
        min=int(entry['min']),
        max=int(entry['max']),
        type=str(entry.get('type') or DEFAULT_NUMERIC_TYPE),
        unit=str(unit) if unit is not None else None,
    )


def parse_numeric_constraints(data: Dict[str, Any]) -> Dict[str, Any]:
    rules = []
    for name, entry in _section(data, 'constraints', dict).items():
        if not isinstance(entry, dict):
            logger.warning("Skipping numeric constraint %r: not a mapping", name)
            continue
        try:
            constraint = _numeric_constraint(entry)
        except (KeyError, TypeError, ValueError):
            logger.warning("Skipping numeric constraint %r: min and max must be integers", name)
            continue
        aliases = _string_list(entry.get('aliases')) or [str(name)]
        rules.append(AliasRule(name=str(name), aliases=aliases, value=constraint))

    values: Dict[str, Any] = {"numeric_constraints": rules}

    default = data.get('default_constraints')
    if isinstance(default, dict):
        try:
            values["default_numeric"] = _numeric_constraint(default)
        except (KeyError, TypeError, ValueError):
            logger.warning("Ignoring malformed default_constraints")

    return values


def parse_enum_definitions(data: Dict[str, Any]) -> Dict[str, Any]:
    rules = []
    for name, entry in _section(data, 'enums', dict).items():
        if not isinstance(entry, dict):
            logger.warning("Skipping enum definition %r: not a mapping", name)
            continue
        definition = EnumDefinition(
            values=_string_list(entry.get('values')),
            case_sensitive=bool(entry.get('case_sensitive', False)),
        )
        aliases = _string_list(entry.get('aliases')) or [str(name)]
        rules.append(AliasRule(name=str(name), aliases=aliases, value=definition))

    return {"enum_definitions": rules}


def resolve_rules_dir(rules_dir: Optional[Union[str, Path]] = None) -> Path:
    """Explicit directory, then $CLIPROBE_RULES_DIR, then the packaged tables"""
    if rules_dir:
        return Path(rules_dir).expanduser().resolve()
    from_env = os.environ.get(RULES_DIR_ENV)
    if from_env:
        return Path(from_env).expanduser().resolve()
    return PACKAGED_RULES_DIR


@functools.lru_cache(maxsize=None)
def _load_cached(rules_dir: Path) -> RuleTable:
    return RuleTable.from_directory(rules_dir)


def load_rule_table(rules_dir: Optional[Union[str, Path]] = None) -> RuleTable:
    """Return the rule table for a directory, loading it on first access"""
    return _load_cached(resolve_rules_dir(rules_dir))


def reload_rule_table(rules_dir: Optional[Union[str, Path]] = None) -> RuleTable:
    """Drop cached tables and read them from disk again"""
    _load_cached.cache_clear()
    logger.info("Rule table cache cleared")
    return load_rule_table(rules_dir)

#!/usr/bin/env python3
"""
Data models and classes for cliprobe.
"""

from enum import Enum
from typing import Dict, List, Optional, Any, Union
from dataclasses import dataclass, field


def normalize_option_name(token: str, lowercase: bool = True) -> str:
    """``--Max-Retries`` -> ``max_retries``"""
    name = token
    for _ in range(2):
        if name.startswith('-'):
            name = name[1:]
    if lowercase:
        name = name.lower()
    return name.replace('-', '_')


class OptionType(str, Enum):
    """Semantic type inferred for a command line option"""
    NUMERIC = "numeric"
    PATH = "path"
    ENUM = "enum"
    BOOLEAN = "boolean"
    STRING = "string"

    @classmethod
    def parse(cls, value: Any) -> Optional["OptionType"]:
        """Map a rule table type name to an OptionType, None if unknown"""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class NumericConstraint:
    """Valid range for a numeric option"""
    min: int
    max: int
    type: str = "integer"
    unit: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"min": self.min, "max": self.max, "type": self.type, "unit": self.unit}


@dataclass(frozen=True)
class EnumDefinition:
    """Allowed values for an enum option"""
    values: List[str] = field(default_factory=list)
    case_sensitive: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"values": list(self.values), "case_sensitive": self.case_sensitive}


Constraint = Union[NumericConstraint, EnumDefinition]


@dataclass(frozen=True)
class OptionPattern:
    """One keyword rule of the option type table"""
    type: OptionType
    priority: int
    keywords: List[str]
    description: str = ""


@dataclass(frozen=True)
class OptionDescriptor:
    """Classified option token with its resolved constraint"""
    raw_token: str
    normalized_name: str
    inferred_type: OptionType
    constraint: Optional[Constraint] = None
    short: Optional[str] = None
    long: Optional[str] = None
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "option": self.raw_token,
            "normalized_name": self.normalized_name,
            "type": self.inferred_type.value,
            "constraint": self.constraint.to_dict() if self.constraint else None,
            "short": self.short,
            "long": self.long,
            "description": self.description,
        }


@dataclass(frozen=True)
class SubcommandNode:
    """Help output of one subcommand and the subtree discovered beneath it.

    ``depth`` is the remaining recursion budget at this node; children always
    carry ``depth - 1`` and a node at depth 0 has no children.
    """
    name: str
    help_text: str
    depth: int
    nested_names: List[str] = field(default_factory=list)
    nested: Dict[str, "SubcommandNode"] = field(default_factory=dict)
    options: List[OptionDescriptor] = field(default_factory=list)
    description: str = ""

    @property
    def has_nested(self) -> bool:
        return bool(self.nested_names)

    def walk(self):
        """Yield this node and every descendant, depth first"""
        yield self
        for child in self.nested.values():
            yield from child.walk()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "help": self.help_text,
            "subcommands": list(self.nested_names),
            "tree": {name: node.to_dict() for name, node in self.nested.items()},
            "has_nested": self.has_nested,
            "option_details": [option.to_dict() for option in self.options],
            "description": self.description,
        }


@dataclass(frozen=True)
class CliAnalysis:
    """Result of CLI binary analysis"""
    binary: str
    binary_basename: str
    help_text: str
    subcommands: Dict[str, SubcommandNode]
    options: List[OptionDescriptor]
    analyzed_at: str
    agent_version: str
    version: Optional[str] = None
    max_depth: int = 0
    required_args: List[str] = field(default_factory=list)

    @property
    def subcommand_names(self) -> List[str]:
        return list(self.subcommands)

    @property
    def subcommand_count(self) -> int:
        return len(self.subcommands)

    @property
    def option_count(self) -> int:
        return len(self.options)

    def nodes(self):
        """Every node of the subcommand tree, depth first"""
        for node in self.subcommands.values():
            yield from node.walk()

    def all_options(self) -> List[OptionDescriptor]:
        """Options found at the root and at every node, first occurrence wins"""
        seen: Dict[str, OptionDescriptor] = {}
        for option in self.options:
            seen.setdefault(option.raw_token, option)
        for node in self.nodes():
            for option in node.options:
                seen.setdefault(option.raw_token, option)
        return [seen[token] for token in sorted(seen)]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the JSON shape consumed by test generators"""
        raw_options = [option.raw_token for option in self.options]
        return {
            "binary": self.binary,
            "binary_basename": self.binary_basename,
            "subcommands": self.subcommand_names,
            "subcommand_count": self.subcommand_count,
            "options": raw_options,
            "option_count": self.option_count,
            "command_tree": {name: node.to_dict() for name, node in self.subcommands.items()},
            "analyzed_at": self.analyzed_at,
            "agent_version": self.agent_version,
            "version": self.version,
            "option_details": [option.to_dict() for option in self.options],
            "required_args": list(self.required_args),
        }

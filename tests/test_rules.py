from __future__ import annotations

from pathlib import Path

import pytest

from cliprobe.config import PACKAGED_RULES_DIR
from cliprobe.exceptions import ConfigLoadError
from cliprobe.models import NumericConstraint, OptionType
from cliprobe.rules import RuleTable, load_rule_table, read_table, reload_rule_table


def _write(directory: Path, name: str, text: str) -> None:
    (directory / name).write_text(text, encoding="utf-8")


def test_packaged_tables_load():
    table = RuleTable.from_directory(PACKAGED_RULES_DIR)

    assert table.patterns
    assert table.numeric_constraints
    assert table.enum_definitions
    assert table.default_type is OptionType.STRING


def test_missing_directory_falls_back_to_defaults(tmp_path):
    table = RuleTable.from_directory(tmp_path / "nowhere")

    assert table.patterns == []
    assert table.numeric_constraints == []
    assert table.enum_definitions == []
    assert table.default_numeric == NumericConstraint(0, 2147483647, "integer", None)


def test_tables_load_independently(tmp_path):
    _write(tmp_path, "option-patterns.yaml", """
patterns:
  - type: numeric
    priority: 10
    keywords: [max, retry]
  - type: nonsense
    priority: 1
    keywords: [x]
  - type: path
    priority: high
    keywords: [path]
default_type: boolean
settings:
  partial_match: true
  min_keyword_length: 3
""")
    _write(tmp_path, "numeric-constraints.yaml", "constraints: [unclosed")

    table = RuleTable.from_directory(tmp_path)

    assert [p.type for p in table.patterns] == [OptionType.NUMERIC]
    assert table.patterns[0].keywords == ["max", "retry"]
    assert table.default_type is OptionType.BOOLEAN
    assert table.settings.min_keyword_length == 3
    assert table.numeric_constraints == []
    assert table.enum_definitions == []


def test_constraint_entries_are_validated(tmp_path):
    _write(tmp_path, "numeric-constraints.yaml", """
constraints:
  port:
    aliases: [port]
    min: 1
    max: 65535
    unit: null
  broken:
    aliases: [broken]
    min: low
  bare:
    min: 0
    max: 9
default_constraints:
  min: 0
  max: 1000
  type: integer
""")
    _write(tmp_path, "enum-definitions.yaml", """
enums:
  format:
    aliases: [format]
    values: [json, yaml]
    case_sensitive: true
""")

    table = RuleTable.from_directory(tmp_path)

    assert [rule.name for rule in table.numeric_constraints] == ["port", "bare"]
    assert table.numeric_constraints[1].aliases == ["bare"]
    assert table.default_numeric == NumericConstraint(0, 1000)
    assert table.enum_definitions[0].value.values == ["json", "yaml"]
    assert table.enum_definitions[0].value.case_sensitive is True


def test_read_table_errors(tmp_path):
    with pytest.raises(ConfigLoadError):
        read_table(tmp_path / "missing.yaml")

    _write(tmp_path, "list.yaml", "- a\n- b\n")
    with pytest.raises(ConfigLoadError):
        read_table(tmp_path / "list.yaml")

    _write(tmp_path, "empty.yaml", "")
    assert read_table(tmp_path / "empty.yaml") == {}


def test_load_is_cached_until_reload(tmp_path):
    _write(tmp_path, "option-patterns.yaml", "patterns:\n  - {type: path, priority: 1, keywords: [dir]}\n")

    first = load_rule_table(tmp_path)
    assert load_rule_table(tmp_path) is first

    _write(tmp_path, "option-patterns.yaml", "patterns: []\n")
    assert load_rule_table(tmp_path).patterns == first.patterns

    reloaded = reload_rule_table(tmp_path)
    assert reloaded is not first
    assert reloaded.patterns == []


def test_rules_dir_from_environment(tmp_path, monkeypatch):
    _write(tmp_path, "option-patterns.yaml", "default_type: path\n")
    monkeypatch.setenv("CLIPROBE_RULES_DIR", str(tmp_path))

    assert load_rule_table().default_type is OptionType.PATH


@pytest.mark.parametrize("filename, text", [
    ("option-patterns.yaml", "patterns: 5\n"),
    ("option-patterns.yaml", "patterns: {numeric: [max]}\n"),
    ("numeric-constraints.yaml", "constraints: [port, timeout]\n"),
    ("enum-definitions.yaml", "enums: [color]\n"),
])
def test_wrong_shaped_section_falls_back_to_defaults(tmp_path, filename, text):
    _write(tmp_path, filename, text)

    table = RuleTable.from_directory(tmp_path)

    assert table.patterns == []
    assert table.numeric_constraints == []
    assert table.enum_definitions == []
    assert table.default_type is OptionType.STRING


def test_wrong_shaped_section_only_drops_its_own_table(tmp_path):
    _write(tmp_path, "option-patterns.yaml", "patterns:\n  - {type: path, priority: 1, keywords: [dir]}\n")
    _write(tmp_path, "numeric-constraints.yaml", "constraints: [port]\n")
    _write(tmp_path, "enum-definitions.yaml", "enums:\n  color: {values: [auto, never]}\n")

    table = load_rule_table(tmp_path)

    assert [p.type for p in table.patterns] == [OptionType.PATH]
    assert table.numeric_constraints == []
    assert table.enum_definitions[0].value.values == ["auto", "never"]

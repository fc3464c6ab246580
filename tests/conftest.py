from __future__ import annotations

import stat
from pathlib import Path
from typing import Callable

import pytest

from cliprobe.models import EnumDefinition, NumericConstraint, OptionPattern, OptionType
from cliprobe.rules import AliasRule, RuleTable

from _cli_helpers import FakeInvoker


@pytest.fixture
def fake_invoker() -> Callable[[dict], FakeInvoker]:
    return FakeInvoker


@pytest.fixture
def make_cli(tmp_path: Path) -> Callable[[str, str], str]:
    """Write an executable shell script and return its absolute path"""

    def _make(name: str, body: str) -> str:
        path = tmp_path / name
        path.write_text("#!/bin/sh\n" + body, encoding="utf-8")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(path)

    return _make


@pytest.fixture
def rule_table() -> RuleTable:
    return RuleTable(
        patterns=[
            OptionPattern(OptionType.PATH, 5, ["path", "file", "dir"]),
            OptionPattern(OptionType.NUMERIC, 10, ["max", "retry", "port", "timeout"]),
            OptionPattern(OptionType.BOOLEAN, 20, ["verbose", "quiet", "help"]),
            OptionPattern(OptionType.ENUM, 15, ["format", "color"]),
        ],
        numeric_constraints=[
            AliasRule("port", ["port"], NumericConstraint(1, 65535)),
            AliasRule("timeout", ["timeout"], NumericConstraint(0, 3600, unit="seconds")),
        ],
        enum_definitions=[
            AliasRule("color", ["color", "colour"], EnumDefinition(["auto", "always", "never"])),
        ],
    )

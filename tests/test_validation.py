from __future__ import annotations

import os

import pytest

from cliprobe.exceptions import BinaryValidationError
from cliprobe.validation import validate_binary


def test_absolute_executable_is_resolved(make_cli, tmp_path):
    binary = make_cli("tool", "exit 0\n")
    link = tmp_path / "link"
    link.symlink_to(binary)

    assert validate_binary(binary) == os.path.realpath(binary)
    assert validate_binary(str(link)) == os.path.realpath(binary)


def test_bare_name_is_looked_up_on_path(make_cli, tmp_path, monkeypatch):
    make_cli("onpath", "exit 0\n")
    monkeypatch.setenv("PATH", str(tmp_path))

    assert validate_binary("onpath") == os.path.realpath(tmp_path / "onpath")


@pytest.mark.parametrize("name", ["", "tool; rm -rf /", "$(id)", "a b", "../bin/sh", "/usr/../bin/sh"])
def test_unsafe_names_are_rejected(name):
    with pytest.raises(BinaryValidationError):
        validate_binary(name)


def test_missing_and_non_executable(tmp_path):
    with pytest.raises(BinaryValidationError, match="not found"):
        validate_binary(str(tmp_path / "missing"))

    plain = tmp_path / "plain"
    plain.write_text("data", encoding="utf-8")
    plain.chmod(0o644)
    if os.access(plain, os.X_OK):
        pytest.skip("running with privileges that ignore the execute bit")
    with pytest.raises(BinaryValidationError, match="not executable"):
        validate_binary(str(plain))


def test_directory_is_rejected(tmp_path):
    with pytest.raises(BinaryValidationError):
        validate_binary(str(tmp_path))

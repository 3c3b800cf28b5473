"""Integration tests: harstub config --show/--set/--add/--remove."""

from __future__ import annotations

import io
import json
from pathlib import Path
from unittest.mock import patch

import pytest

from harstub import config as config_module
from harstub.commands.config_cmd import run as config_run
from harstub.config import global_config_path, project_config_path


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config_module, "_global_config_dir", lambda: tmp_path / "home")


@pytest.fixture
def module_root(tmp_path: Path) -> Path:
    root = tmp_path / "mylib"
    root.mkdir()
    return root


def _args(path: Path, **overrides: object) -> object:
    values = {
        "path": path,
        "show": False,
        "set_key": None,
        "add_key": None,
        "remove_key": None,
        "global_": False,
    }
    values.update(overrides)
    return type("Args", (), values)()


def _run(args: object) -> str:
    buf = io.StringIO()
    with patch("harstub.commands.config_cmd.sys.stdout", buf):
        config_run(args)
    return buf.getvalue()


def test_config_show(module_root: Path) -> None:
    """--show prints the merged settings as JSON."""
    out = _run(_args(module_root, show=True))
    # Output is "# Config: ..." then JSON; parse from first {
    start = out.find("{")
    assert start >= 0, "Expected JSON in config output"
    data = json.loads(out[start:])
    assert data["sdk_prefixes"] == ["@kit", "@ohos", "@hms"]
    assert "builtin_patterns" in data["ignore"]
    assert "module (" in out


def test_config_set_module_local(module_root: Path) -> None:
    """--set writes the module config only."""
    out = _run(_args(module_root, set_key="logging.level=DEBUG"))
    assert 'Set logging.level = "DEBUG"' in out
    saved = json.loads(project_config_path(module_root).read_text(encoding="utf-8"))
    assert saved == {"logging": {"level": "DEBUG"}}
    assert not global_config_path().exists()


def test_config_set_global_parses_json_value(module_root: Path) -> None:
    """--global --set parses the value as JSON."""
    _run(_args(module_root, set_key="sdk_prefixes=[\"@kit\"]", global_=True))
    saved = json.loads(global_config_path().read_text(encoding="utf-8"))
    assert saved == {"sdk_prefixes": ["@kit"]}


def test_config_add_and_remove(module_root: Path) -> None:
    """--add and --remove edit a list in place."""
    _run(_args(module_root, add_key=["ignore.additional_patterns", "mock/"]))
    _run(_args(module_root, add_key=["ignore.additional_patterns", "*.test.ets"]))
    saved = json.loads(project_config_path(module_root).read_text(encoding="utf-8"))
    assert saved["ignore"]["additional_patterns"] == ["mock/", "*.test.ets"]

    _run(_args(module_root, remove_key=["ignore.additional_patterns", "mock/"]))
    saved = json.loads(project_config_path(module_root).read_text(encoding="utf-8"))
    assert saved["ignore"]["additional_patterns"] == ["*.test.ets"]

    merged = config_module.load_config(module_root)
    assert merged["ignore"]["additional_patterns"] == ["*.test.ets"]
    assert merged["ignore"]["use_gitignore"] is True


def test_config_requires_an_action(module_root: Path) -> None:
    """No action is an error."""
    with pytest.raises(SystemExit):
        _run(_args(module_root))


def test_config_set_requires_equals(module_root: Path) -> None:
    """--set without = is an error."""
    with pytest.raises(SystemExit):
        _run(_args(module_root, set_key="logging.level"))


def test_config_rejects_unknown_section(module_root: Path) -> None:
    """Unknown top-level keys are refused and nothing is saved."""
    with pytest.raises(SystemExit):
        _run(_args(module_root, set_key="default_model=x"))
    assert not project_config_path(module_root).exists()

"""Unit tests for config (default_config, load_config layering, project_config_path, resolve_path)."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from harstub import config as config_module
from harstub.config import (
    HARSTUB_DIR,
    default_config,
    global_config_path,
    load_config,
    project_config_path,
    resolve_path,
    save_config,
)


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Redirect the global config directory into tmp_path."""
    home_dir = tmp_path / "home"
    monkeypatch.setattr(config_module, "_global_config_dir", lambda: home_dir)
    return home_dir


def test_default_config() -> None:
    """Built-in defaults carry the SDK prefixes and ignore patterns."""
    cfg = default_config()
    assert cfg["sdk_prefixes"] == ["@kit", "@ohos", "@hms"]
    assert cfg["platform_sdk_prefix"] == "@kit."
    assert cfg["reserved_namespaces"] == ["enc", "mode", "pad"]
    assert "ignore" in cfg
    assert any(".harstub" in p for p in cfg["ignore"]["builtin_patterns"])


def test_default_config_is_fresh_each_call() -> None:
    """Mutating a returned config does not leak into the next one."""
    a = default_config()
    a["sdk_prefixes"].append("@vendor")
    assert default_config()["sdk_prefixes"] == ["@kit", "@ohos", "@hms"]


def test_resolve_path(tmp_path: Path) -> None:
    """resolve_path normalizes .. segments."""
    p = tmp_path / "sub" / ".." / "sub"
    assert resolve_path(p).resolve() == (tmp_path / "sub").resolve()


def test_project_config_path(tmp_path: Path) -> None:
    """Module config lives in <module>/.harstub/config.json."""
    expected = tmp_path / HARSTUB_DIR / "config.json"
    assert project_config_path(tmp_path) == expected


def test_load_config_defaults_without_files(home: Path) -> None:
    """No config files means plain defaults."""
    assert load_config(None) == default_config()


def test_load_config_global_override(home: Path) -> None:
    """Global values replace defaults key by key."""
    save_config(global_config_path(), {"stub_version": "2.0.0", "logging": {"level": "DEBUG"}})
    cfg = load_config(None)
    assert cfg["stub_version"] == "2.0.0"
    assert cfg["logging"]["level"] == "DEBUG"
    # Nested keys not overridden keep their defaults
    assert cfg["logging"]["file"] is None


def test_load_config_module_overrides_global(home: Path, tmp_path: Path) -> None:
    """Module values win over global ones."""
    module = tmp_path / "module"
    module.mkdir()
    save_config(global_config_path(), {"stub_version": "2.0.0", "sdk_prefixes": ["@kit"]})
    save_config(project_config_path(module), {"stub_version": "3.0.0"})
    cfg = load_config(module)
    assert cfg["stub_version"] == "3.0.0"
    assert cfg["sdk_prefixes"] == ["@kit"]


def test_load_config_ignores_invalid_json(home: Path) -> None:
    """A broken config file contributes nothing."""
    path = global_config_path()
    path.parent.mkdir(parents=True)
    path.write_text("{not json", encoding="utf-8")
    assert load_config(None) == default_config()


def test_save_config_creates_parent(tmp_path: Path) -> None:
    """save_config creates missing directories."""
    target = tmp_path / "a" / "b" / "config.json"
    save_config(target, {"x": 1})
    assert json.loads(target.read_text(encoding="utf-8")) == {"x": 1}

"""Settings: built-in defaults overlaid by ~/.harstub/config.json and <module>/.harstub/config.json."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

HARSTUB_DIR = ".harstub"
CONFIG_FILENAME = "config.json"

# Manifest file of HarmonyOS modules; generated stub packages carry one as well
MANIFEST_FILENAME = "oh-package.json5"
DECLARATION_FILENAME = "index.d.ts"

_DEFAULTS: dict[str, Any] = {
    # Module-path prefixes of platform SDKs; the toolchain provides these, so they are never stubbed
    "sdk_prefixes": ["@kit", "@ohos", "@hms"],
    # Prefix that switches top-level kind inference to the SDK naming rules
    "platform_sdk_prefix": "@kit.",
    "source_extensions": [".ets", ".ts"],
    "source_subpath": "src/main",
    # First segments after a base that never start a Class.method static call
    "reserved_namespaces": ["enc", "mode", "pad"],
    "stub_version": "1.0.0",
    # module path -> {symbol name: declaration text} appended to that stub's index.d.ts
    "extra_declarations": {},
    "logging": {
        "level": "INFO",
        "file": None,
    },
    "ignore": {
        "use_gitignore": True,
        "builtin_patterns": [".git/", ".harstub/", "node_modules/", "oh_modules/", "build/"],
        "additional_patterns": [],
    },
}


def _global_config_dir() -> Path:
    return Path.home() / HARSTUB_DIR


def global_config_path() -> Path:
    """~/.harstub/config.json"""
    return _global_config_dir() / CONFIG_FILENAME


def project_config_path(module_root: Path) -> Path:
    """<module>/.harstub/config.json"""
    return module_root / HARSTUB_DIR / CONFIG_FILENAME


def default_config() -> dict[str, Any]:
    """A fresh copy of the built-in settings."""
    return copy.deepcopy(_DEFAULTS)


def _read_layer(path: Path) -> dict[str, Any]:
    """Settings stored at path; a missing, unreadable or non-object file contributes nothing."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def _overlay(base: dict[str, Any], layer: dict[str, Any]) -> dict[str, Any]:
    """Apply layer onto base in place; nested objects merge key by key, everything else is replaced."""
    for key, value in layer.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _overlay(current, value)
        else:
            base[key] = value
    return base


def load_global_config() -> dict[str, Any]:
    return _overlay(default_config(), _read_layer(global_config_path()))


def load_config(module_root: Path | None = None) -> dict[str, Any]:
    """
    Effective settings for a module.

    Layers are applied in order: defaults, global file, then the module's own
    file when module_root is given.
    """
    merged = load_global_config()
    if module_root is not None:
        _overlay(merged, _read_layer(project_config_path(module_root.resolve())))
    return merged


def save_config(path: Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


def resolve_path(path: Path) -> Path:
    return Path(path).expanduser().resolve()

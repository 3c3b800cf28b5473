"""Config command: show merged settings or edit the module-local / global config file."""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from pathlib import Path
from typing import Any, Callable

from harstub.config import (
    default_config,
    global_config_path,
    load_config,
    project_config_path,
    save_config,
)


def _lookup(data: dict[str, Any], dotted: str) -> Any:
    """Value at a dotted key such as 'ignore.additional_patterns'; None when absent."""
    node: Any = data
    for part in dotted.split("."):
        if not isinstance(node, dict):
            return None
        node = node.get(part)
    return node


def _assign(data: dict[str, Any], dotted: str, value: Any) -> None:
    *parents, leaf = dotted.split(".")
    node = data
    for part in parents:
        child = node.get(part)
        if not isinstance(child, dict):
            child = node[part] = {}
        node = child
    node[leaf] = value


def _coerce(raw: str) -> Any:
    """JSON literal when it parses (numbers, booleans, lists, null), plain string otherwise."""
    raw = raw.strip()
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _read_raw(path: Path) -> dict[str, Any]:
    """The file's own settings, without defaults; {} when missing or unreadable."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def _fail(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _check_key(dotted: str) -> str:
    """Reject empty keys and keys whose top-level section harstub does not know."""
    dotted = dotted.strip()
    if not dotted:
        _fail("empty configuration key.")
    section = dotted.split(".", 1)[0]
    if section not in default_config():
        _fail(f"unknown configuration key '{section}' (see 'harstub config --show').")
    return dotted


def _update(target: Path, label: str, dotted: str, change: Callable[[Any], Any], message: str) -> None:
    data = _read_raw(target)
    _assign(data, dotted, change(_lookup(data, dotted)))
    save_config(target, data)
    print(f"{message} in {label} config.")


def _as_list(current: Any) -> list[Any]:
    return list(current) if isinstance(current, list) else []


def run(args: Namespace) -> None:
    """Run the config command."""
    path = Path(getattr(args, "path", Path("."))).resolve()
    show = getattr(args, "show", False)
    set_key = getattr(args, "set_key", None)
    add_key = getattr(args, "add_key", None)
    remove_key = getattr(args, "remove_key", None)

    if not (show or set_key or add_key or remove_key):
        _fail("specify --show, --set KEY=VALUE, --add KEY VALUE, or --remove KEY VALUE.")

    module_root = path if path.is_dir() else None
    if getattr(args, "global_", False) or module_root is None:
        target, label = global_config_path(), "global"
    else:
        target, label = project_config_path(module_root), f"module ({module_root.as_posix()})"

    if set_key:
        dotted, sep, raw = set_key.partition("=")
        if not sep:
            _fail("--set requires KEY=VALUE (e.g. stub_version=2.0.0).")
        dotted = _check_key(dotted)
        value = _coerce(raw)
        _update(target, label, dotted, lambda _: value, f"Set {dotted} = {json.dumps(value)}")

    if add_key:
        dotted, item = _check_key(add_key[0]), add_key[1].strip()
        _update(
            target,
            label,
            dotted,
            lambda current: _as_list(current) + [item],
            f"Added {json.dumps(item)} to {dotted}",
        )

    if remove_key:
        dotted, item = _check_key(remove_key[0]), remove_key[1].strip()
        _update(
            target,
            label,
            dotted,
            lambda current: [x for x in _as_list(current) if x != item],
            f"Removed {json.dumps(item)} from {dotted}",
        )

    if show:
        layers = ["defaults", f"global ({global_config_path().as_posix()})"]
        if module_root is not None:
            layers.append(f"module ({project_config_path(module_root).as_posix()})")
        print(f"# Config: {' + '.join(layers)}")
        print(json.dumps(load_config(module_root), indent=2))

"""Source exclusion for module scans, using gitignore-syntax patterns.

Patterns come from four places, in this order: the configured builtin list,
<module>/.harstubignore, <module>/.gitignore (when ignore.use_gitignore is on)
and the configured additional list.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pathspec import PathSpec

HARSTUBIGNORE = ".harstubignore"
GITIGNORE = ".gitignore"


def parse_ignore_file(path: Path) -> list[str]:
    """Pattern lines of an ignore file, without comments and blank lines; [] if it does not exist."""
    if not path.is_file():
        return []
    stripped = (line.strip() for line in path.read_text(encoding="utf-8").splitlines())
    return [line for line in stripped if line and not line.startswith("#")]


def load_patterns(module_root: Path, config: dict[str, Any]) -> list[tuple[str, str]]:
    """
    Every pattern that applies to a module, paired with where it came from.

    Sources are 'builtin', 'file' (.harstubignore), 'gitignore' and 'additional'.
    """
    root = Path(module_root).resolve()
    ignore_cfg = config.get("ignore") or {}
    sources: list[tuple[str, list[str]]] = [
        ("builtin", list(ignore_cfg.get("builtin_patterns") or [])),
        ("file", parse_ignore_file(root / HARSTUBIGNORE)),
    ]
    if ignore_cfg.get("use_gitignore", True):
        sources.append(("gitignore", parse_ignore_file(root / GITIGNORE)))
    sources.append(("additional", list(ignore_cfg.get("additional_patterns") or [])))
    return [(pattern, source) for source, patterns in sources for pattern in patterns]


def build_spec(patterns: list[str]) -> PathSpec:
    return PathSpec.from_lines("gitignore", patterns)


def module_spec(module_root: Path, config: dict[str, Any]) -> PathSpec:
    """Compiled spec for all patterns that apply to module_root."""
    return build_spec([pattern for pattern, _ in load_patterns(module_root, config)])


def is_ignored(path: Path | str, module_root: Path | str, spec: PathSpec) -> bool:
    """
    True if spec excludes path.

    Matching uses the posix path relative to module_root; anything outside the
    module is never excluded.
    """
    root = Path(module_root).resolve()
    try:
        rel = Path(path).resolve().relative_to(root).as_posix()
    except ValueError:
        return False
    # "build/" style patterns need the trailing slash to match the directory itself
    return spec.match_file(rel) or spec.match_file(rel + "/")

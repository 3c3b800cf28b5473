"""Point a module's oh-package.json5 at locally generated stub packages."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import json5

from harstub.analysis.models import DependencyInfo
from harstub.config import MANIFEST_FILENAME
from harstub.errors import ManifestError

logger = logging.getLogger(__name__)


def manifest_path(module_root: Path) -> Path:
    return Path(module_root) / MANIFEST_FILENAME


def load_manifest(path: Path) -> dict[str, Any]:
    """
    Read a manifest written in JSON5 (comments, unquoted keys, single quotes, trailing commas).

    Raises:
        ManifestError: If the file cannot be read or is not a JSON5 object.
    """
    try:
        data = json5.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ManifestError(f"Cannot read {path.as_posix()}: {e}") from e
    if not isinstance(data, dict):
        raise ManifestError(f"{path.as_posix()} does not contain an object")
    return data


def read_module_manifest(module_root: Path) -> Optional[dict[str, Any]]:
    """
    Load <module>/oh-package.json5, or None (with a warning) when the module has none.

    Raises:
        ManifestError: If the manifest exists but cannot be parsed.
    """
    path = manifest_path(module_root)
    if not path.is_file():
        logger.warning("%s not found at: %s", MANIFEST_FILENAME, path.as_posix())
        return None
    return load_manifest(path)


def add_local_dependencies(
    manifest: dict[str, Any], dependencies: Iterable[DependencyInfo]
) -> Dict[str, str]:
    """
    Add 'file:../<stub dir>' entries to manifest["dependencies"] in place.

    Existing entries are left untouched. Returns the entries that were added.
    """
    deps_obj = manifest.get("dependencies")
    if not isinstance(deps_obj, dict):
        deps_obj = {}
        manifest["dependencies"] = deps_obj

    added: Dict[str, str] = {}
    for dep in dependencies:
        if dep.module_path in deps_obj:
            logger.debug("Keeping existing dependency: %s -> %s", dep.module_path, deps_obj[dep.module_path])
            continue
        reference = dep.local_reference()
        deps_obj[dep.module_path] = reference
        added[dep.module_path] = reference
        logger.debug("Added dependency: %s -> %s", dep.module_path, reference)
    return added


def patch_module_manifest(
    module_root: Path,
    dependencies: Iterable[DependencyInfo],
    dry_run: bool = False,
    manifest: Optional[dict[str, Any]] = None,
) -> Dict[str, str]:
    """
    Update <module>/oh-package.json5 with local references to the stubs.

    manifest is the already-loaded content, if the caller read it up front. A
    missing manifest is logged and skipped. Returns the entries added. The file
    is rewritten as plain JSON, which every JSON5 reader accepts; comments in
    the original are not kept.
    """
    if manifest is None:
        manifest = read_module_manifest(module_root)
        if manifest is None:
            return {}

    added = add_local_dependencies(manifest, dependencies)
    if added and not dry_run:
        path = manifest_path(module_root)
        path.write_text(json.dumps(manifest, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        logger.info("Updated %s with %d local dependencies", MANIFEST_FILENAME, len(added))
    return added

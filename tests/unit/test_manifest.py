"""Unit tests for patching a module's oh-package.json5."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from harstub.analysis.models import DependencyInfo
from harstub.errors import ManifestError
from harstub.manifest import (
    add_local_dependencies,
    load_manifest,
    patch_module_manifest,
    read_module_manifest,
)


@pytest.fixture
def module_root(tmp_path: Path) -> Path:
    """Module directory with a plain-JSON manifest that already depends on dayjs."""
    root = tmp_path / "mylib"
    root.mkdir()
    (root / "oh-package.json5").write_text(
        json.dumps({"name": "mylib", "version": "1.0.0", "dependencies": {"dayjs": "^1.11.0"}}),
        encoding="utf-8",
    )
    return root


def _read(module_root: Path) -> dict:
    return json.loads((module_root / "oh-package.json5").read_text(encoding="utf-8"))


def test_add_local_dependencies_keeps_existing() -> None:
    """Declared versions are never replaced by local references."""
    manifest = {"dependencies": {"dayjs": "^1.11.0"}}
    added = add_local_dependencies(manifest, [DependencyInfo("dayjs"), DependencyInfo("@pura/harmony-utils")])
    assert added == {"@pura/harmony-utils": "file:../@pura/harmony-utils"}
    assert manifest["dependencies"]["dayjs"] == "^1.11.0"


def test_add_local_dependencies_creates_section() -> None:
    """A manifest without a dependencies object gets one."""
    manifest = {"name": "x"}
    add_local_dependencies(manifest, [DependencyInfo("crypto-js")])
    assert manifest["dependencies"] == {"crypto-js": "file:../crypto-js"}


def test_patch_module_manifest_writes(module_root: Path) -> None:
    """New entries land on disk next to the existing ones."""
    added = patch_module_manifest(module_root, [DependencyInfo("crypto-js"), DependencyInfo("dayjs")])
    assert added == {"crypto-js": "file:../crypto-js"}
    data = _read(module_root)
    assert data["dependencies"] == {"dayjs": "^1.11.0", "crypto-js": "file:../crypto-js"}
    assert data["name"] == "mylib"


def test_patch_module_manifest_reads_json5(tmp_path: Path) -> None:
    """Comments, unquoted keys, single quotes and trailing commas are accepted."""
    (tmp_path / "oh-package.json5").write_text(
        "{\n"
        "  // module manifest\n"
        "  name: 'm',\n"
        "  \"dependencies\": {},\n"
        "}\n",
        encoding="utf-8",
    )
    added = patch_module_manifest(tmp_path, [DependencyInfo("crypto-js")])
    assert added == {"crypto-js": "file:../crypto-js"}
    data = _read(tmp_path)
    assert data["name"] == "m"
    assert data["dependencies"] == {"crypto-js": "file:../crypto-js"}


def test_patch_module_manifest_uses_given_manifest(module_root: Path) -> None:
    """A manifest loaded by the caller is patched and written without re-reading the file."""
    manifest = {"name": "preloaded", "dependencies": {}}
    patch_module_manifest(module_root, [DependencyInfo("crypto-js")], manifest=manifest)
    assert _read(module_root) == {"name": "preloaded", "dependencies": {"crypto-js": "file:../crypto-js"}}


def test_patch_module_manifest_dry_run(module_root: Path) -> None:
    """Dry run reports the entries but leaves the file alone."""
    before = (module_root / "oh-package.json5").read_text(encoding="utf-8")
    added = patch_module_manifest(module_root, [DependencyInfo("crypto-js")], dry_run=True)
    assert added == {"crypto-js": "file:../crypto-js"}
    assert (module_root / "oh-package.json5").read_text(encoding="utf-8") == before


def test_patch_module_manifest_missing_file(tmp_path: Path) -> None:
    """No manifest means nothing is added and nothing is created."""
    assert patch_module_manifest(tmp_path, [DependencyInfo("crypto-js")]) == {}
    assert not (tmp_path / "oh-package.json5").exists()


def test_read_module_manifest_missing_file(tmp_path: Path) -> None:
    """A module without a manifest yields None."""
    assert read_module_manifest(tmp_path) is None


def test_load_manifest_invalid(tmp_path: Path) -> None:
    """Truncated text is a ManifestError, not a raw parser exception."""
    path = tmp_path / "oh-package.json5"
    path.write_text("{ name: ", encoding="utf-8")
    with pytest.raises(ManifestError):
        load_manifest(path)


def test_load_manifest_not_an_object(tmp_path: Path) -> None:
    """A top-level array is rejected."""
    path = tmp_path / "oh-package.json5"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(ManifestError):
        load_manifest(path)

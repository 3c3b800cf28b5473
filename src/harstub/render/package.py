"""Write stub packages (index.d.ts + oh-package.json5) into the project root."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from harstub.analysis.models import DependencyInfo
from harstub.config import DECLARATION_FILENAME, MANIFEST_FILENAME

from .dts import render_declarations

logger = logging.getLogger(__name__)


def stub_directory(project_root: Path, dep: DependencyInfo) -> Path:
    """<project>/@scope/name for scoped packages, <project>/name otherwise."""
    return Path(project_root).joinpath(*dep.stub_directory_parts())


def render_package_manifest(dep: DependencyInfo, version: str = "1.0.0") -> str:
    """oh-package.json5 content for a generated stub package."""
    data = {
        "name": dep.module_path,
        "version": version,
        "description": f"Generated type stubs for {dep.module_path}",
        "main": DECLARATION_FILENAME,
        "types": DECLARATION_FILENAME,
        "license": "UNLICENSED",
        "dependencies": {},
    }
    return json.dumps(data, indent=2) + "\n"


def write_stub_package(dep: DependencyInfo, project_root: Path, version: str = "1.0.0") -> Path:
    """Create the stub package directory for dep and write its files. Returns the directory."""
    target = stub_directory(project_root, dep)
    target.mkdir(parents=True, exist_ok=True)
    (target / DECLARATION_FILENAME).write_text(render_declarations(dep), encoding="utf-8")
    (target / MANIFEST_FILENAME).write_text(render_package_manifest(dep, version), encoding="utf-8")
    logger.info("  Created dependency: %s -> %s", dep.module_path, target.as_posix())
    return target

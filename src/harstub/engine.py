"""End-to-end processing of a HAR module: scan, filter, generate stubs, patch the manifest."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from harstub.analysis.models import DependencyInfo
from harstub.config import load_config
from harstub.manifest import patch_module_manifest, read_module_manifest
from harstub.render.package import stub_directory, write_stub_package
from harstub.scanner import scan_module

logger = logging.getLogger(__name__)


@dataclass
class EngineResult:
    """Outcome of processing one module."""

    module_path: Path
    project_root: Path
    dependencies: Dict[str, DependencyInfo] = field(default_factory=dict)
    generated: Dict[str, DependencyInfo] = field(default_factory=dict)
    skipped_sdk: List[str] = field(default_factory=list)
    manifest_entries: Dict[str, str] = field(default_factory=dict)
    stub_dirs: List[Path] = field(default_factory=list)
    dry_run: bool = False


def is_sdk_dependency(module_path: str, prefixes: List[str]) -> bool:
    return any(module_path.startswith(prefix) for prefix in prefixes)


def apply_extra_declarations(
    dependencies: Dict[str, DependencyInfo], extras: Dict[str, Dict[str, str]]
) -> None:
    """Attach configured declarations (module path -> {name: text}) to matching dependencies."""
    for module_path, declarations in (extras or {}).items():
        dep = dependencies.get(module_path)
        if dep is None:
            logger.debug("Extra declarations for unused dependency %s ignored", module_path)
            continue
        for name, text in declarations.items():
            dep.add_extra_declaration(name, text)


def process_module(
    module_root: Path, config: dict[str, Any] | None = None, dry_run: bool = False
) -> EngineResult:
    """
    Generate stub packages for every third-party dependency of a module.

    Stubs go into the project root (the module's parent directory) and the
    module's manifest gets local references to them. With dry_run nothing is
    written.
    """
    module_root = Path(module_root).resolve()
    if config is None:
        config = load_config(module_root if module_root.is_dir() else None)
    project_root = module_root.parent
    logger.info("Module path: %s", module_root.as_posix())
    logger.info("Project root: %s", project_root.as_posix())

    all_dependencies = scan_module(module_root, config)
    result = EngineResult(module_root, project_root, all_dependencies, dry_run=dry_run)
    if not all_dependencies:
        logger.info("No external dependencies found, nothing to do.")
        return result

    prefixes = list(config.get("sdk_prefixes") or [])
    for module_path, dep in all_dependencies.items():
        if is_sdk_dependency(module_path, prefixes):
            logger.info("Skipping SDK dependency: %s", module_path)
            result.skipped_sdk.append(module_path)
        else:
            result.generated[module_path] = dep

    if not result.generated:
        logger.info("No third-party dependencies found (only SDK dependencies were detected), nothing to do.")
        return result

    apply_extra_declarations(result.generated, config.get("extra_declarations") or {})

    # A manifest that fails to parse must leave the project untouched
    manifest = read_module_manifest(module_root)

    version = str(config.get("stub_version") or "1.0.0")
    for dep in result.generated.values():
        if dry_run:
            result.stub_dirs.append(stub_directory(project_root, dep))
        else:
            result.stub_dirs.append(write_stub_package(dep, project_root, version))

    if manifest is not None:
        result.manifest_entries = patch_module_manifest(
            module_root, result.generated.values(), dry_run=dry_run, manifest=manifest
        )
    logger.info("Generated %d dependencies in: %s", len(result.generated), project_root.as_posix())
    return result

"""Module scanning: find .ets/.ts sources, extract each file, aggregate dependencies."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List

from harstub.analysis import ArkTSExtractor, DependencyAggregator, DependencyInfo, ParseResult
from harstub.config import load_config
from harstub.errors import ModuleRootError
from harstub.utils.ignore import is_ignored, module_spec

logger = logging.getLogger(__name__)


def _has_source_extension(path: Path, extensions: tuple[str, ...]) -> bool:
    return path.is_file() and path.name.endswith(extensions)


def find_source_files(module_root: Path, config: dict[str, Any]) -> List[Path]:
    """
    Collect source files of a module in a stable order.

    Everything under <module>/<source_subpath> (recursively) comes first, then
    files directly in the module root (Index.ets and friends). Ignored paths are
    skipped.
    """
    root = Path(module_root).resolve()
    if not root.is_dir():
        raise ModuleRootError(f"Module path is not an existing directory: {root.as_posix()}")

    extensions = tuple(config.get("source_extensions") or (".ets", ".ts"))
    spec = module_spec(root, config)

    files: List[Path] = []
    source_dir = root / (config.get("source_subpath") or "src/main")
    if source_dir.is_dir():
        nested = [
            p
            for p in source_dir.rglob("*")
            if _has_source_extension(p, extensions) and not is_ignored(p, root, spec)
        ]
        files.extend(sorted(nested, key=lambda p: p.as_posix()))

    top = [
        p
        for p in root.iterdir()
        if _has_source_extension(p, extensions) and not is_ignored(p, root, spec)
    ]
    files.extend(sorted(top, key=lambda p: p.as_posix()))
    return files


def parse_files(files: List[Path], extractor: ArkTSExtractor) -> List[ParseResult]:
    """Extract every file, keeping file order."""
    return [extractor.parse_file(f) for f in files]


def scan_module(module_root: Path, config: dict[str, Any] | None = None) -> Dict[str, DependencyInfo]:
    """
    Scan a module and return its external dependencies keyed by module path.

    Raises:
        ModuleRootError: If module_root is not a directory.
    """
    root = Path(module_root).resolve()
    if config is None:
        config = load_config(root if root.is_dir() else None)
    logger.info("Scanning module: %s", root.as_posix())

    files = find_source_files(root, config)
    logger.info("Found %d source files", len(files))

    extractor = ArkTSExtractor(config.get("reserved_namespaces") or ())
    results = parse_files(files, extractor)

    aggregator = DependencyAggregator(config.get("platform_sdk_prefix") or "@kit.")
    dependencies = aggregator.aggregate(results)
    logger.info("Found %d external dependencies", len(dependencies))
    for dep in dependencies.values():
        logger.info(
            "  - %s: %d imports, %d types, %d methods",
            dep.module_path,
            len(dep.imports),
            len(dep.types),
            len(dep.methods),
        )
    return dependencies

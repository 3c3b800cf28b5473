"""Scan command: print the dependency model inferred for a module."""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from pathlib import Path

from harstub.analysis.models import DependencyInfo
from harstub.config import load_config
from harstub.scanner import scan_module


def _print_dependency(dep: DependencyInfo, out: object) -> None:
    """Human-readable tree: imports, namespace tree, then methods grouped by interface."""
    print(f"{dep.module_path}", file=out)
    print(f"  imports: {len(dep.imports)}", file=out)

    def walk(path: str, depth: int) -> None:
        for child in dep.children_of(path):
            suffix = f" -> {child.return_type}" if child.return_type else ""
            print(f"{'  ' * depth}{child.kind.value} {child.name}{suffix}", file=out)
            walk(child.qualified_name, depth + 1)

    for node in dep.top_level_types():
        print(f"  {node.kind.value} {node.name}", file=out)
        walk(node.qualified_name, 2)

    for interface_name in dep.interface_names():
        print(f"  methods of {interface_name}:", file=out)
        for method in dep.methods_for_interface(interface_name):
            print(f"    {method.signature()}", file=out)


def run(args: Namespace) -> None:
    """Run the scan command."""
    path = Path(getattr(args, "path", Path("."))).resolve()
    as_json = getattr(args, "json", False)

    config = load_config(path if path.is_dir() else None)
    dependencies = scan_module(path, config)

    if as_json:
        data = {name: dep.to_dict() for name, dep in dependencies.items()}
        json.dump(data, sys.stdout, indent=2)
        sys.stdout.write("\n")
        return

    if not dependencies:
        print("No external dependencies found.")
        return
    for dep in dependencies.values():
        _print_dependency(dep, sys.stdout)

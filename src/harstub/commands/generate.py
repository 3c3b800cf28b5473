"""Generate command: write stub packages for a module's third-party dependencies."""

from __future__ import annotations

import sys
from argparse import Namespace
from pathlib import Path

from harstub.config import load_config
from harstub.engine import process_module


def run(args: Namespace) -> None:
    """Run the generate command."""
    path = Path(getattr(args, "path", Path("."))).resolve()
    dry_run = getattr(args, "dry_run", False)

    config = load_config(path if path.is_dir() else None)
    result = process_module(path, config, dry_run=dry_run)

    for module_path in result.skipped_sdk:
        print(f"  skipped SDK dependency {module_path}", file=sys.stderr)

    if not result.generated:
        print("No third-party dependencies to generate.")
        return

    verb = "Would generate" if dry_run else "Generated"
    print(f"{verb} {len(result.generated)} stub package(s) in {result.project_root.as_posix()}")
    for stub_dir in result.stub_dirs:
        print(f"  {stub_dir.as_posix()}")
    if result.manifest_entries:
        verb = "Would add" if dry_run else "Added"
        print(f"{verb} to oh-package.json5:")
        for module_path, reference in result.manifest_entries.items():
            print(f"  {module_path}: {reference}")

"""Shared helpers for module scans."""

from harstub.utils.ignore import (
    build_spec,
    is_ignored,
    load_patterns,
    module_spec,
    parse_ignore_file,
)

__all__ = [
    "build_spec",
    "is_ignored",
    "load_patterns",
    "module_spec",
    "parse_ignore_file",
]

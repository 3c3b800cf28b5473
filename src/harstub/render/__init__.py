"""Rendering of stub packages: declaration text and package manifests."""

from .dts import DeclarationRenderer, render_declarations
from .package import render_package_manifest, stub_directory, write_stub_package

__all__ = [
    "DeclarationRenderer",
    "render_declarations",
    "render_package_manifest",
    "stub_directory",
    "write_stub_package",
]

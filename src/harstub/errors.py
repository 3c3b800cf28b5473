"""Exceptions raised by harstub. The CLI turns these into an error message and exit code 1."""

from __future__ import annotations


class HarstubError(Exception):
    """Base class for errors the user can act on."""


class ModuleRootError(HarstubError):
    """The module root does not exist or is not a directory."""


class ManifestError(HarstubError):
    """A package manifest could not be read or parsed."""

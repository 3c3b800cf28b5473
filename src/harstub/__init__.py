"""Stub declaration generator for HarmonyOS HAR modules with unavailable dependencies."""

__version__ = "0.1.0"

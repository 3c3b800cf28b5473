"""Naming-convention type inference.

Everything here is a pure function of names (and the module path for top-level
kinds). Nothing is library-specific: the rules look only at method-name and
type-name conventions, so a real type-aware resolver can replace this module
without touching aggregation.
"""

from __future__ import annotations

from .models import AccessContext, MethodParameter, TypeKind

UNKNOWN_TYPE = "unknown"

DEFAULT_PLATFORM_SDK_PREFIX = "@kit."

FACTORY_METHODS = frozenset({"create", "from"})
GENERATOR_METHODS = frozenset({"random", "generate"})
STRINGIFY_METHODS = frozenset({"stringify", "toString"})

# Owner-name suffixes that suggest a sized collection
COLLECTION_SUFFIXES = ("Array", "List")

SDK_CLASS_SUFFIXES = ("Manager", "Controller")
SDK_TYPE_ALIAS_NAMES = frozenset({"Permissions", "abilityAccessCtrl"})


def infer_return_type(owner: str, method_name: str) -> str:
    """Return type for ``owner.method_name(...)``."""
    if method_name in FACTORY_METHODS or method_name in GENERATOR_METHODS:
        return owner
    if method_name in STRINGIFY_METHODS:
        return "string"
    return UNKNOWN_TYPE


def infer_parameters(owner: str, method_name: str) -> list[MethodParameter]:
    """Parameter list for ``owner.method_name(...)``; always exactly one parameter."""
    if method_name in FACTORY_METHODS:
        if owner.endswith(COLLECTION_SUFFIXES):
            return [MethodParameter("size", "number")]
        return [MethodParameter("data", UNKNOWN_TYPE)]
    if method_name in GENERATOR_METHODS:
        return [MethodParameter("size", "number")]
    if method_name == "parse":
        return [MethodParameter("input", "string")]
    if method_name in STRINGIFY_METHODS:
        return [MethodParameter("encoder", UNKNOWN_TYPE)]
    return [MethodParameter("args", UNKNOWN_TYPE)]


def is_object_like(name: str) -> bool:
    """Uppercase-initial constants (Utf8, Base64, Config) may carry members of their own."""
    return bool(name) and name[0].isupper()


def infer_member_kind(context: AccessContext) -> TypeKind:
    """Kind of the last segment of a member-access chain."""
    if context == AccessContext.METHOD_CALL:
        return TypeKind.FUNCTION
    # Property reads are constants; object-like ones turn into namespaces once
    # children are attached.
    return TypeKind.CONST


def infer_top_level_kind(
    name: str,
    module_path: str,
    platform_sdk_prefix: str = DEFAULT_PLATFORM_SDK_PREFIX,
) -> TypeKind:
    """Kind of an imported symbol that has no observed member access."""
    if module_path.startswith(platform_sdk_prefix):
        if name.endswith(SDK_CLASS_SUFFIXES):
            return TypeKind.CLASS
        if name in SDK_TYPE_ALIAS_NAMES:
            return TypeKind.TYPE_ALIAS
        return TypeKind.INTERFACE
    if is_object_like(name):
        return TypeKind.CLASS
    return TypeKind.FUNCTION


def default_signature(name: str, kind: TypeKind) -> str:
    """Placeholder declaration text for a synthesized top-level node."""
    if kind == TypeKind.CLASS:
        return f"declare class {name} {{}}"
    if kind == TypeKind.INTERFACE:
        return f"interface {name} {{}}"
    if kind == TypeKind.FUNCTION:
        return f"declare function {name}(...args: any[]): any;"
    if kind == TypeKind.TYPE_ALIAS:
        return f"type {name} = any;"
    if kind == TypeKind.NAMESPACE:
        return f"declare namespace {name} {{}}"
    if kind == TypeKind.CONST:
        return f"declare const {name}: any;"
    if kind == TypeKind.ENUM:
        return f"declare enum {name} {{}}"
    return f"declare var {name}: any;"

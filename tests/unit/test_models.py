"""Unit tests for analysis data models."""

from __future__ import annotations

from harstub.analysis.models import (
    DependencyInfo,
    ImportInfo,
    ImportStyle,
    InterfaceMethod,
    ParseResult,
    TypeKind,
    TypeNode,
)


def test_import_identity_ignores_style() -> None:
    """Import equality ignores style but not the alias."""
    a = ImportInfo("vue", "Vue", style=ImportStyle.DEFAULT)
    b = ImportInfo("vue", "Vue", style=ImportStyle.NAMED)
    assert a == b
    assert ImportInfo("vue", "Vue", "V") != a


def test_import_root_name() -> None:
    """root_name is the alias for namespaces and the imported name otherwise."""
    assert ImportInfo("crypto-js", "*", "CryptoJS").root_name == "CryptoJS"
    assert ImportInfo("lib", "ToastUtil", "Toast").root_name == "ToastUtil"
    assert ImportInfo("lib", "ToastUtil", "Toast").local_name == "Toast"


def test_find_binding_prefers_alias() -> None:
    """An alias binding wins over an imported name."""
    result = ParseResult(
        "a.ets",
        imports=[
            ImportInfo("lib-a", "Toast"),
            ImportInfo("lib-b", "ToastUtil", "Toast"),
        ],
    )
    assert result.find_binding("Toast").module_path == "lib-b"
    assert result.find_binding("Missing") is None


def test_find_binding_ignores_wildcard_name() -> None:
    """'*' is never a binding."""
    result = ParseResult("a.ets", imports=[ImportInfo("crypto-js", "*", "CryptoJS")])
    assert result.find_binding("*") is None
    assert result.find_binding("CryptoJS") is not None


def test_method_signature() -> None:
    """Static methods are prefixed with static."""
    method = InterfaceMethod("random", True, "WordArray", "WordArray", "C.lib.WordArray.random")
    method.add_parameter("size", "number")
    assert method.signature() == "static random(size: number): WordArray"

    instance = InterfaceMethod("parse", False, "unknown", "Utf8", "C.enc.Utf8.parse")
    instance.add_parameter("input", "string")
    assert instance.signature() == "parse(input: string): unknown"


def test_type_node_identity_and_insertion() -> None:
    """Nodes are unique by name, kind and parent path."""
    dep = DependencyInfo("crypto-js")
    assert dep.add_type(TypeNode("enc", TypeKind.CONST, parent_path="CryptoJS"))
    assert not dep.add_type(TypeNode("enc", TypeKind.CONST, parent_path="CryptoJS"))
    assert dep.add_type(TypeNode("enc", TypeKind.FUNCTION, parent_path="CryptoJS"))
    assert dep.add_type(TypeNode("enc", TypeKind.CONST))
    assert len(dep.types) == 3
    assert [t.qualified_name for t in dep.children_of("CryptoJS")] == ["CryptoJS.enc", "CryptoJS.enc"]


def test_method_first_occurrence_wins() -> None:
    """A later duplicate method is rejected."""
    dep = DependencyInfo("crypto-js")
    first = InterfaceMethod("random", True, "WordArray", "WordArray", "A.lib.WordArray.random")
    second = InterfaceMethod("random", True, "unknown", "WordArray", "B.lib.WordArray.random")
    assert dep.add_method(first)
    assert not dep.add_method(second)
    assert dep.methods_for_interface("WordArray") == [first]
    assert dep.add_method(InterfaceMethod("random", False, "WordArray", "WordArray", "x"))
    assert dep.interface_names() == ["WordArray"]


def test_stub_directory_parts_and_reference() -> None:
    """Scoped packages keep their scope directory."""
    scoped = DependencyInfo("@pura/harmony-utils")
    assert scoped.stub_directory_parts() == ["@pura", "harmony-utils"]
    assert scoped.local_reference() == "file:../@pura/harmony-utils"
    assert scoped.package_alias() == "pura_harmony-utils"

    plain = DependencyInfo("dayjs")
    assert plain.stub_directory_parts() == ["dayjs"]
    assert plain.local_reference() == "file:../dayjs"


def test_dependency_to_dict() -> None:
    """to_dict serializes enums by value."""
    dep = DependencyInfo("dayjs")
    dep.add_import(ImportInfo("dayjs", "dayjs", style=ImportStyle.DEFAULT))
    dep.add_type(TypeNode("dayjs", TypeKind.FUNCTION, "declare function dayjs(...args: any[]): any;"))
    data = dep.to_dict()
    assert data["module_path"] == "dayjs"
    assert data["imports"][0]["style"] == "default"
    assert data["types"][0]["kind"] == "function"
    assert data["methods"] == []

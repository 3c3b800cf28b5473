"""Data models shared by the extractor and the aggregator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ImportStyle(Enum):
    """Syntactic shape of an import clause."""

    NAMED = "named"
    NAMESPACE = "namespace"
    DEFAULT = "default"


class TypeKind(Enum):
    """Kinds of declarations we can synthesize."""

    CLASS = "class"
    INTERFACE = "interface"
    TYPE_ALIAS = "type"
    FUNCTION = "function"
    ENUM = "enum"
    CONST = "const"
    NAMESPACE = "namespace"
    STRUCT = "struct"


class AccessContext(Enum):
    """How a member-access expression is used on its line."""

    METHOD_CALL = "method_call"
    STATIC_METHOD_CALL = "static_method_call"
    PROPERTY_ACCESS = "property_access"
    CONSTRUCTOR_CALL = "constructor_call"
    TYPE_REFERENCE = "type_reference"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ImportInfo:
    """One imported binding (a single entry of an import clause)."""

    module_path: str  # e.g. "@pura/harmony-utils", "@kit.AbilityKit"
    imported_name: str  # symbol, "*" for namespace imports, or the default name
    local_alias: Optional[str] = None
    is_type_import: bool = False
    style: ImportStyle = field(default=ImportStyle.NAMED, compare=False)

    @property
    def is_external(self) -> bool:
        """True unless the module path is relative ('./x', '../x')."""
        return not self.module_path.startswith(".")

    @property
    def is_namespace(self) -> bool:
        return self.imported_name == "*"

    @property
    def local_name(self) -> str:
        """Identifier this import binds in the importing file."""
        return self.local_alias or self.imported_name

    @property
    def root_name(self) -> str:
        """Name of the top-level node that represents this import in a dependency."""
        if self.is_namespace:
            return self.local_alias or self.imported_name
        return self.imported_name

    def to_dict(self) -> dict:
        return {
            "module_path": self.module_path,
            "imported_name": self.imported_name,
            "local_alias": self.local_alias,
            "is_type_import": self.is_type_import,
            "style": self.style.value,
        }


@dataclass
class TypeNode:
    """A declaration in a dependency's namespace tree.

    Nodes are stored flat; ``parent_path`` is the dotted path of the enclosing
    namespace (None for top-level nodes). Children are found by filtering on it.
    """

    name: str
    kind: TypeKind
    signature: Optional[str] = None
    type_parameters: Optional[str] = None
    parent_path: Optional[str] = None
    return_type: Optional[str] = None

    @property
    def key(self) -> tuple[str, TypeKind, Optional[str]]:
        return (self.name, self.kind, self.parent_path)

    @property
    def is_top_level(self) -> bool:
        return self.parent_path is None

    @property
    def qualified_name(self) -> str:
        if self.parent_path:
            return f"{self.parent_path}.{self.name}"
        return self.name

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "kind": self.kind.value,
            "signature": self.signature,
            "type_parameters": self.type_parameters,
            "parent_path": self.parent_path,
            "return_type": self.return_type,
        }


@dataclass(frozen=True)
class MemberAccess:
    """A dotted expression rooted at an imported identifier, e.g. CryptoJS.enc.Utf8.parse."""

    base_object: str  # "CryptoJS"
    full_path: str  # "CryptoJS.enc.Utf8.parse"
    member_name: str  # "parse"
    context: AccessContext = field(default=AccessContext.UNKNOWN, compare=False)
    class_name: Optional[str] = field(default=None, compare=False)  # static calls only

    @property
    def is_static_method_call(self) -> bool:
        return self.context == AccessContext.STATIC_METHOD_CALL and self.class_name is not None


@dataclass(frozen=True)
class MethodParameter:
    name: str
    type: str

    def __str__(self) -> str:
        return f"{self.name}: {self.type}"


@dataclass
class InterfaceMethod:
    """A method observed on an interface or class (instance or static)."""

    method_name: str
    is_static: bool
    return_type: str
    interface_name: str
    full_qualifier: str  # e.g. "CryptoJS.lib.WordArray.random"
    parameters: list[MethodParameter] = field(default_factory=list)

    @property
    def key(self) -> tuple[str, str, bool]:
        return (self.method_name, self.interface_name, self.is_static)

    def add_parameter(self, name: str, type_: str) -> None:
        self.parameters.append(MethodParameter(name, type_))

    def signature(self) -> str:
        """Render as ``[static] name(param: type, ...): returnType``."""
        params = ", ".join(str(p) for p in self.parameters)
        prefix = "static " if self.is_static else ""
        return f"{prefix}{self.method_name}({params}): {self.return_type}"

    def to_dict(self) -> dict:
        return {
            "method_name": self.method_name,
            "is_static": self.is_static,
            "return_type": self.return_type,
            "interface_name": self.interface_name,
            "full_qualifier": self.full_qualifier,
            "parameters": [{"name": p.name, "type": p.type} for p in self.parameters],
        }


@dataclass
class ParseResult:
    """Everything the extractor found in one source file."""

    file_path: str
    imports: list[ImportInfo] = field(default_factory=list)
    exports: list[TypeNode] = field(default_factory=list)
    member_accesses: list[MemberAccess] = field(default_factory=list)
    symbol_frequency: dict[str, int] = field(default_factory=dict)

    def add_reference(self, symbol: str) -> None:
        self.symbol_frequency[symbol] = self.symbol_frequency.get(symbol, 0) + 1

    def has_export(self, name: str) -> bool:
        return any(e.name == name for e in self.exports)

    def find_binding(self, identifier: str) -> Optional[ImportInfo]:
        """
        Return the import that binds ``identifier`` in this file, or None.

        Aliases win over imported names, so ``{ A as B }`` resolves ``B``; a bare
        imported name (non-wildcard) still matches when nothing aliases it.
        """
        for imp in self.imports:
            if imp.local_alias == identifier:
                return imp
        for imp in self.imports:
            if not imp.is_namespace and imp.imported_name == identifier:
                return imp
        return None


@dataclass
class DependencyInfo:
    """Aggregated model of one external module path."""

    module_path: str
    imports: list[ImportInfo] = field(default_factory=list)
    types: list[TypeNode] = field(default_factory=list)
    methods: list[InterfaceMethod] = field(default_factory=list)
    extra_declarations: dict[str, str] = field(default_factory=dict)

    # --- types ---

    def find_type(
        self, name: str, kind: TypeKind, parent_path: Optional[str] = None
    ) -> Optional[TypeNode]:
        for node in self.types:
            if node.key == (name, kind, parent_path):
                return node
        return None

    def add_type(self, node: TypeNode) -> bool:
        """Insert node unless one with the same (name, kind, parent_path) exists."""
        if self.find_type(node.name, node.kind, node.parent_path) is not None:
            return False
        self.types.append(node)
        return True

    def has_top_level(self, name: str) -> bool:
        return any(t.name == name and t.is_top_level for t in self.types)

    def top_level_types(self) -> list[TypeNode]:
        return [t for t in self.types if t.is_top_level]

    def children_of(self, path: str) -> list[TypeNode]:
        return [t for t in self.types if t.parent_path == path]

    # --- methods ---

    def add_method(self, method: InterfaceMethod) -> bool:
        """Insert method unless one with the same identity exists (first one wins)."""
        if any(m.key == method.key for m in self.methods):
            return False
        self.methods.append(method)
        return True

    def methods_for_interface(self, interface_name: str) -> list[InterfaceMethod]:
        return [m for m in self.methods if m.interface_name == interface_name]

    def interface_names(self) -> list[str]:
        names: list[str] = []
        for m in self.methods:
            if m.interface_name not in names:
                names.append(m.interface_name)
        return names

    # --- misc ---

    def add_import(self, imp: ImportInfo) -> None:
        self.imports.append(imp)

    def add_extra_declaration(self, name: str, declaration: str) -> None:
        self.extra_declarations[name] = declaration

    def stub_directory_parts(self) -> list[str]:
        """'@scope/name' -> ['@scope', 'name']; 'name' -> ['name']."""
        if self.module_path.startswith("@"):
            scope, sep, rest = self.module_path.partition("/")
            if sep and rest:
                return [scope, rest]
        return [self.module_path]

    def local_reference(self) -> str:
        """Manifest value pointing from a module to its stub in the project root."""
        return "file:../" + "/".join(self.stub_directory_parts())

    def package_alias(self) -> str:
        """'@pura/harmony-utils' -> 'pura_harmony-utils'."""
        return self.module_path.lstrip("@").replace("/", "_")

    def to_dict(self) -> dict:
        return {
            "module_path": self.module_path,
            "imports": [i.to_dict() for i in self.imports],
            "types": [t.to_dict() for t in self.types],
            "methods": [m.to_dict() for m in self.methods],
            "extra_declarations": dict(self.extra_declarations),
        }

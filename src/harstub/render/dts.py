"""Render a DependencyInfo as the text of a stub index.d.ts."""

from __future__ import annotations

from typing import List

from harstub.analysis import inference
from harstub.analysis.models import (
    DependencyInfo,
    ImportStyle,
    InterfaceMethod,
    TypeKind,
    TypeNode,
)

INDENT = "  "

# Kinds that TypeScript lets a namespace of the same name merge into
_MERGEABLE_KINDS = (TypeKind.CLASS, TypeKind.INTERFACE, TypeKind.FUNCTION, TypeKind.ENUM, TypeKind.TYPE_ALIAS)


def _type_params(node: TypeNode) -> str:
    return node.type_parameters or ""


def _method_lines(methods: List[InterfaceMethod], depth: int) -> List[str]:
    pad = INDENT * depth
    return [f"{pad}{m.signature()};" for m in methods]


def _function_params(dep: DependencyInfo, node: TypeNode) -> str:
    """Parameters of a namespace function, taken from its recorded method when there is one."""
    owner = (node.parent_path or "").rpartition(".")[2]
    for m in dep.methods_for_interface(owner):
        if m.method_name == node.name and not m.is_static:
            return ", ".join(str(p) for p in m.parameters)
    return ", ".join(str(p) for p in inference.infer_parameters(owner, node.name))


class DeclarationRenderer:
    """Turns the flat TypeNode collection of one dependency into nested declarations."""

    def __init__(self, dep: DependencyInfo) -> None:
        self.dep = dep

    def render(self) -> str:
        dep = self.dep
        lines: List[str] = [
            f"// Stub declarations for '{dep.module_path}' generated by harstub.",
            "// Shapes are inferred from usage; replace with the real package when available.",
            "",
        ]
        top_level = dep.top_level_types()
        top_names = {t.name for t in top_level if t.kind != TypeKind.NAMESPACE}
        emitted: set[str] = set()

        def emit(block: List[str]) -> None:
            text = "\n".join(block)
            if text in emitted:
                return
            emitted.add(text)
            lines.extend(block)

        # Members of consts shadowed by a top-level type; merged into that type after it
        shadowed: List[TypeNode] = []
        for node in top_level:
            if node.kind == TypeKind.NAMESPACE:
                # "import * as ns": ns is the module object itself, so its members
                # are the module's own exports.
                for child in self._children(node.qualified_name):
                    if child.name in top_names and child.kind == TypeKind.CONST:
                        if self._children(child.qualified_name):
                            shadowed.append(child)
                        continue
                    emit(self.render_node(child, 0, top=True))
                continue
            emit(self.render_node(node, 0, top=True))

        for node in shadowed:
            block = [f"export declare namespace {node.name} {{"]
            for child in self._children(node.qualified_name):
                block.extend(self.render_node(child, 1))
            block.append("}")
            emit(block)

        for name, declaration in dep.extra_declarations.items():
            emit([f"// extra: {name}", declaration.rstrip()])

        defaults = []
        for imp in dep.imports:
            if imp.style == ImportStyle.DEFAULT and imp.imported_name not in defaults:
                defaults.append(imp.imported_name)
        for name in defaults:
            emit([f"export default {name};"])

        return "\n".join(lines).rstrip() + "\n"

    def render_node(self, node: TypeNode, depth: int, top: bool = False) -> List[str]:
        pad = INDENT * depth
        prefix = "export declare " if top else "export "
        children = self._children(node.qualified_name)
        block: List[str] = []

        if node.kind in (TypeKind.CONST, TypeKind.NAMESPACE) and children:
            block.append(f"{pad}{prefix}namespace {node.name} {{")
            for child in children:
                block.extend(self.render_node(child, depth + 1))
            block.append(f"{pad}}}")
            return block

        block.extend(self._declaration(node, depth, prefix))
        if children and node.kind in _MERGEABLE_KINDS:
            block.append(f"{pad}{prefix}namespace {node.name} {{")
            for child in children:
                block.extend(self.render_node(child, depth + 1))
            block.append(f"{pad}}}")
        return block

    def _children(self, path: str) -> List[TypeNode]:
        """Children of path, minus plain constants shadowed by a function of the same name."""
        children = self.dep.children_of(path)
        functions = {c.name for c in children if c.kind == TypeKind.FUNCTION}
        return [
            c
            for c in children
            if not (
                c.kind == TypeKind.CONST
                and c.name in functions
                and not self.dep.children_of(c.qualified_name)
            )
        ]

    def _declaration(self, node: TypeNode, depth: int, prefix: str) -> List[str]:
        pad = INDENT * depth
        name = node.name
        methods = self.dep.methods_for_interface(name) if node.is_top_level else []
        kind = node.kind

        if kind == TypeKind.INTERFACE and any(m.is_static for m in methods):
            # Interfaces cannot carry static members
            kind = TypeKind.CLASS

        if kind in (TypeKind.CLASS, TypeKind.STRUCT):
            head = f"{pad}{prefix}class {name}{_type_params(node)} {{"
            if not methods:
                return [head[:-1] + "{}"]
            return [head, *_method_lines(methods, depth + 1), f"{pad}}}"]
        if kind == TypeKind.INTERFACE:
            keyword = prefix.replace("declare ", "")
            head = f"{pad}{keyword}interface {name}{_type_params(node)} {{"
            if not methods:
                return [head[:-1] + "{}"]
            return [head, *_method_lines(methods, depth + 1), f"{pad}}}"]
        if kind == TypeKind.FUNCTION:
            if node.parent_path is None:
                return [f"{pad}{prefix}function {name}(...args: any[]): any;"]
            ret = node.return_type or inference.UNKNOWN_TYPE
            return [f"{pad}{prefix}function {name}({_function_params(self.dep, node)}): {ret};"]
        if kind == TypeKind.TYPE_ALIAS:
            keyword = prefix.replace("declare ", "")
            return [f"{pad}{keyword}type {name}{_type_params(node)} = any;"]
        if kind == TypeKind.ENUM:
            return [f"{pad}{prefix}enum {name} {{}}"]
        if kind == TypeKind.NAMESPACE:
            return [f"{pad}{prefix}namespace {name} {{}}"]
        return [f"{pad}{prefix}const {name}: any;"]


def render_declarations(dep: DependencyInfo) -> str:
    """Return index.d.ts text for one dependency."""
    return DeclarationRenderer(dep).render()

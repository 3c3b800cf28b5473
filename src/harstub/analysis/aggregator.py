"""Cross-file aggregation: merge per-file parse results into one model per dependency."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from . import inference
from .models import (
    AccessContext,
    DependencyInfo,
    ImportInfo,
    InterfaceMethod,
    MemberAccess,
    ParseResult,
    TypeKind,
    TypeNode,
)

logger = logging.getLogger(__name__)


class DependencyAggregator:
    """
    Build DependencyInfo records from parse results.

    Results must be fed in a stable file order; every insertion is
    check-before-insert, so aggregating the same results twice yields the same
    node and method identities.
    """

    def __init__(self, platform_sdk_prefix: str = inference.DEFAULT_PLATFORM_SDK_PREFIX) -> None:
        self.platform_sdk_prefix = platform_sdk_prefix

    def aggregate(self, results: Iterable[ParseResult]) -> Dict[str, DependencyInfo]:
        """Return module path -> DependencyInfo, in first-seen order."""
        dependencies: Dict[str, DependencyInfo] = {}
        for result in results:
            for imp in result.imports:
                if not imp.is_external:
                    continue
                dep = dependencies.get(imp.module_path)
                if dep is None:
                    dep = DependencyInfo(imp.module_path)
                    dependencies[imp.module_path] = dep
                dep.add_import(imp)
                self.add_import_root(dep, imp)
            self.process_member_accesses(result, dependencies)
        return dependencies

    # --- A: import roots ---

    def add_import_root(self, dep: DependencyInfo, imp: ImportInfo) -> TypeNode:
        """Synthesize (or find) the top-level node that stands for an import."""
        if imp.is_namespace:
            name = imp.root_name
            kind = TypeKind.NAMESPACE
        else:
            name = imp.imported_name
            kind = inference.infer_top_level_kind(name, dep.module_path, self.platform_sdk_prefix)
        existing = dep.find_type(name, kind, None)
        if existing is not None:
            return existing
        node = TypeNode(name, kind, inference.default_signature(name, kind))
        dep.add_type(node)
        return node

    # --- B: resolution ---

    def process_member_accesses(
        self, result: ParseResult, dependencies: Dict[str, DependencyInfo]
    ) -> None:
        logger.debug(
            "Processing %d member accesses for file: %s",
            len(result.member_accesses),
            result.file_path,
        )
        for access in result.member_accesses:
            imp = result.find_binding(access.base_object)
            dep = dependencies.get(imp.module_path) if imp is not None else None
            if imp is None or dep is None:
                logger.debug("No dependency found for base object %s", access.base_object)
                continue

            parts = self.canonical_parts(access, imp)
            if len(parts) < 2:
                continue
            if access.is_static_method_call:
                self.add_static_method(dep, access, parts)
            else:
                self.build_namespace_structure(dep, access, parts)

    @staticmethod
    def canonical_parts(access: MemberAccess, imp: ImportInfo) -> List[str]:
        """Split the chain and rename its first segment to the import's root node."""
        parts = access.full_path.split(".")
        parts[0] = imp.root_name
        return parts

    # --- C: namespace tree ---

    def build_namespace_structure(
        self, dep: DependencyInfo, access: MemberAccess, parts: List[str]
    ) -> None:
        """
        Insert interior segments as const nodes and the last segment as the member.

        ["CryptoJS", "enc", "Utf8", "parse"] yields const enc (under CryptoJS),
        const Utf8 (under CryptoJS.enc), function parse (under CryptoJS.enc.Utf8)
        and an instance method parse on Utf8.
        """
        self.add_intermediate_nodes(dep, parts, len(parts) - 1)

        member_name = parts[-1]
        parent_path = ".".join(parts[:-1])
        owner = parts[-2]
        kind = inference.infer_member_kind(access.context)
        if dep.find_type(member_name, kind, parent_path) is None:
            node = TypeNode(member_name, kind, parent_path=parent_path)
            if access.context == AccessContext.METHOD_CALL:
                node.return_type = inference.infer_return_type(owner, member_name)
            dep.add_type(node)
            logger.debug("Added member %s to namespace %s", member_name, parent_path)

        # A direct call on the root (CryptoJS.MD5(...)) is a function, not an interface method
        if access.context == AccessContext.METHOD_CALL and len(parts) >= 3:
            method = self.make_method(owner, member_name, False, ".".join(parts))
            if dep.add_method(method):
                logger.debug(
                    "Added instance method %s.%s -> %s", owner, member_name, method.return_type
                )

    @staticmethod
    def add_intermediate_nodes(dep: DependencyInfo, parts: List[str], stop: int) -> None:
        """Insert parts[1:stop] as const nodes, each under the join of the preceding parts."""
        for i in range(1, stop):
            name = parts[i]
            parent_path = ".".join(parts[:i])
            if dep.find_type(name, TypeKind.CONST, parent_path) is None:
                dep.add_type(TypeNode(name, TypeKind.CONST, parent_path=parent_path))

    # --- D: static calls ---

    def add_static_method(
        self, dep: DependencyInfo, access: MemberAccess, parts: List[str]
    ) -> Optional[InterfaceMethod]:
        """
        Register ``Class.method`` as a static method of a top-level ``Class``.

        CryptoJS.lib.WordArray.random(...) adds const lib under CryptoJS, a
        static random on WordArray and, if needed, a top-level interface WordArray.
        """
        class_name = access.class_name or parts[-2]
        method_name = access.member_name
        self.add_intermediate_nodes(dep, parts, len(parts) - 2)

        method = self.make_method(class_name, method_name, True, ".".join(parts))
        added = dep.add_method(method)

        if not dep.has_top_level(class_name):
            dep.add_type(
                TypeNode(
                    class_name,
                    TypeKind.INTERFACE,
                    inference.default_signature(class_name, TypeKind.INTERFACE),
                )
            )
            logger.debug("Added interface type: %s", class_name)

        if added:
            logger.debug(
                "Added static method %s.%s -> %s (methods on %s: %d)",
                class_name,
                method_name,
                method.return_type,
                class_name,
                len(dep.methods_for_interface(class_name)),
            )
            return method
        return None

    @staticmethod
    def make_method(owner: str, method_name: str, is_static: bool, qualifier: str) -> InterfaceMethod:
        return InterfaceMethod(
            method_name=method_name,
            is_static=is_static,
            return_type=inference.infer_return_type(owner, method_name),
            interface_name=owner,
            full_qualifier=qualifier,
            parameters=inference.infer_parameters(owner, method_name),
        )


def aggregate(
    results: Iterable[ParseResult],
    platform_sdk_prefix: str = inference.DEFAULT_PLATFORM_SDK_PREFIX,
) -> Dict[str, DependencyInfo]:
    """Convenience wrapper around DependencyAggregator.aggregate."""
    return DependencyAggregator(platform_sdk_prefix).aggregate(results)

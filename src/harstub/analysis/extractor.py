"""Line-oriented ArkTS/TypeScript extractor.

Each line is matched on its own against a small set of regular expressions; no
statement that spans lines is recognized. Three things are pulled out of every
line: import clauses, top-level export declarations and dotted member-access
chains rooted at an imported identifier.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .models import (
    AccessContext,
    ImportInfo,
    ImportStyle,
    MemberAccess,
    ParseResult,
    TypeKind,
    TypeNode,
)

logger = logging.getLogger(__name__)

DEFAULT_RESERVED_NAMESPACES = ("enc", "mode", "pad")

IMPORT_PATTERN = re.compile(
    r"""^import\s+(?:(type)\s+)?(\{[^}]*\}|\*\s+as\s+[\w$]+|[\w$]+)\s+from\s+['"]([^'"]+)['"]"""
)
_ALIAS_SPLIT = re.compile(r"\s+as\s+")

_TYPE_PARAMS = r"(\s*<[^>]*>)?"
EXPORT_CLASS_PATTERN = re.compile(
    r"^export\s+(?:default\s+)?(?:declare\s+)?(?:abstract\s+)?class\s+(\w+)" + _TYPE_PARAMS
)
EXPORT_INTERFACE_PATTERN = re.compile(
    r"^export\s+(?:default\s+)?(?:declare\s+)?interface\s+(\w+)" + _TYPE_PARAMS
)
EXPORT_TYPE_PATTERN = re.compile(
    r"^export\s+(?:declare\s+)?type\s+(\w+)" + _TYPE_PARAMS + r"\s*="
)
EXPORT_FUNCTION_PATTERN = re.compile(
    r"^export\s+(?:default\s+)?(?:declare\s+)?(?:async\s+)?function\s*\*?\s*(\w+)"
    + _TYPE_PARAMS
    + r"\s*\("
)
EXPORT_ENUM_PATTERN = re.compile(r"^export\s+(?:default\s+)?(?:declare\s+)?(?:const\s+)?enum\s+(\w+)")
EXPORT_CONST_PATTERN = re.compile(r"^export\s+(?:default\s+)?(?:declare\s+)?const\s+(\w+)\s*[=:]")
# ArkTS components: "@Component export struct Foo" (decorator usually sits on the line above)
EXPORT_STRUCT_PATTERN = re.compile(r"^(?:@\w+(?:\([^)]*\))?\s*)*export\s+(?:default\s+)?struct\s+(\w+)")

# Chains must start at an identifier that is not itself a member of something else
_CHAIN_ROOT = r"(?<![\w$.])(?P<base>[A-Z][a-zA-Z0-9]*)"
_SEGMENT = r"[a-zA-Z0-9_]+"

METHOD_CALL_PATTERN = re.compile(
    rf"(?P<chain>{_CHAIN_ROOT}\.(?:{_SEGMENT}\.)*(?P<member>{_SEGMENT}))\s*\("
)
PROPERTY_ACCESS_PATTERN = re.compile(
    rf"(?P<chain>{_CHAIN_ROOT}\.(?:{_SEGMENT}\.)*(?P<member>{_SEGMENT}))(?![\w$])(?!\s*\()"
)


def build_static_method_pattern(reserved: Sequence[str]) -> re.Pattern[str]:
    """
    Pattern for ``Base.[ns.]*Class.method(``.

    Groups: base, rest (path after the base), cls (owning type), method. Chains whose
    first segment after the base is a reserved namespace name are not static calls.
    """
    exclusion = ""
    if reserved:
        exclusion = "(?!" + "|".join(re.escape(r) + r"\." for r in reserved) + ")"
    return re.compile(
        rf"{_CHAIN_ROOT}\.{exclusion}"
        rf"(?P<rest>(?:{_SEGMENT}\.)*(?P<cls>[A-Z][a-zA-Z0-9]*)\.(?P<method>{_SEGMENT}))\s*\("
    )


def normalize_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def _before_body(text: str) -> str:
    """Text before the first '{' that is not inside parentheses."""
    depth = 0
    for i, ch in enumerate(text):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(depth - 1, 0)
        elif ch == "{" and depth == 0:
            return text[:i]
    return text


def _before_initializer(text: str) -> str:
    """Text before a top-level '=' (ignoring '=>' and comparison operators)."""
    depth = 0
    for i, ch in enumerate(text):
        if ch in "([{<":
            depth += 1
        elif ch in ")]}>" and depth:
            depth -= 1
        elif ch == "=" and depth == 0:
            nxt = text[i + 1 : i + 2]
            prev = text[i - 1 : i]
            if nxt in ("=", ">") or prev in ("=", "!", "<", ">"):
                continue
            return text[:i]
    return text


def block_signature(line: str) -> str:
    """Declaration header with an empty body: 'export class Foo<T> extends Bar {}'."""
    return normalize_whitespace(_before_body(line)) + " {}"


def statement_signature(line: str) -> str:
    """Whitespace-normalized statement ending in exactly one ';'."""
    return normalize_whitespace(line).rstrip(";").rstrip() + ";"


def function_signature(line: str) -> str:
    return statement_signature(_before_body(line))


def const_signature(line: str) -> str:
    head = normalize_whitespace(_before_initializer(line)).rstrip(";").rstrip()
    if ":" not in head:
        head += ": unknown"
    return head + ";"


# First match wins; enum is checked before const so "export const enum" is an enum
_EXPORT_RULES = (
    (EXPORT_CLASS_PATTERN, TypeKind.CLASS, block_signature),
    (EXPORT_INTERFACE_PATTERN, TypeKind.INTERFACE, block_signature),
    (EXPORT_TYPE_PATTERN, TypeKind.TYPE_ALIAS, statement_signature),
    (EXPORT_FUNCTION_PATTERN, TypeKind.FUNCTION, function_signature),
    (EXPORT_ENUM_PATTERN, TypeKind.ENUM, block_signature),
    (EXPORT_CONST_PATTERN, TypeKind.CONST, const_signature),
    (EXPORT_STRUCT_PATTERN, TypeKind.STRUCT, block_signature),
)


class ArkTSExtractor:
    """Extract imports, exports and member-access chains from .ets/.ts sources."""

    def __init__(self, reserved_namespaces: Iterable[str] = DEFAULT_RESERVED_NAMESPACES) -> None:
        self.reserved_namespaces = tuple(reserved_namespaces)
        self._static_pattern = build_static_method_pattern(self.reserved_namespaces)

    def parse_file(self, file_path: Path | str) -> ParseResult:
        """
        Parse one source file.

        Unreadable or undecodable files are logged and produce an empty result so
        a whole-module scan keeps going.
        """
        path = Path(file_path)
        result = ParseResult(file_path=path.as_posix())
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Skipping unreadable file %s: %s", path, e)
            return result

        self._parse_into(text.splitlines(), result)
        logger.debug(
            "Parsed %d imports, %d exports, %d member accesses from %s",
            len(result.imports),
            len(result.exports),
            len(result.member_accesses),
            path,
        )
        return result

    def parse_lines(self, lines: Iterable[str], file_path: str = "<memory>") -> ParseResult:
        """Parse already-decoded lines (used for in-memory sources and tests)."""
        result = ParseResult(file_path=file_path)
        self._parse_into(lines, result)
        return result

    def parse_text(self, text: str, file_path: str = "<memory>") -> ParseResult:
        return self.parse_lines(text.splitlines(), file_path)

    def _parse_into(self, lines: Iterable[str], result: ParseResult) -> None:
        for raw in lines:
            line = raw.strip()
            if not line or line.startswith("//"):
                continue
            self.parse_import(line, result)
            self.parse_export(line, result)
            self.parse_member_access(line, result)

    # --- imports ---

    def parse_import(self, line: str, result: ParseResult) -> List[ImportInfo]:
        """Record every binding of an import statement on this line."""
        match = IMPORT_PATTERN.match(line)
        if not match:
            return []

        is_type_import = match.group(1) is not None
        clause = match.group(2)
        module_path = match.group(3)
        found: List[ImportInfo] = []

        if clause.startswith("{"):
            # import { A, B as C, type D } from 'module'
            for part in clause[1:-1].split(","):
                part = part.strip()
                if not part:
                    continue
                entry_is_type = is_type_import
                if part.startswith("type "):
                    entry_is_type = True
                    part = part[len("type ") :].strip()
                pieces = _ALIAS_SPLIT.split(part, maxsplit=1)
                imported_name = pieces[0].strip()
                local_alias = pieces[1].strip() if len(pieces) > 1 else None
                found.append(
                    ImportInfo(module_path, imported_name, local_alias, entry_is_type, ImportStyle.NAMED)
                )
        elif clause.startswith("*"):
            # import * as ns from 'module'
            namespace = _ALIAS_SPLIT.split(clause, maxsplit=1)[1].strip()
            found.append(ImportInfo(module_path, "*", namespace, is_type_import, ImportStyle.NAMESPACE))
        else:
            found.append(ImportInfo(module_path, clause, None, is_type_import, ImportStyle.DEFAULT))

        for imp in found:
            result.imports.append(imp)
            logger.debug("Found import: %s from %s", imp.local_name, module_path)
        return found

    # --- exports ---

    def parse_export(self, line: str, result: ParseResult) -> Optional[TypeNode]:
        """Record a top-level export declaration starting on this line, if any."""
        for pattern, kind, make_signature in _EXPORT_RULES:
            match = pattern.match(line)
            if not match:
                continue
            type_params = None
            if pattern.groups >= 2 and match.group(2):
                type_params = match.group(2).strip()
            node = TypeNode(match.group(1), kind, make_signature(line), type_params)
            result.exports.append(node)
            return node
        return None

    # --- member accesses ---

    def parse_member_access(self, line: str, result: ParseResult) -> List[MemberAccess]:
        """
        Record dotted chains on this line whose base is an imported identifier.

        Static calls (``Base.ns.Class.method(``) are matched first, then plain
        method calls, then property reads. A chain text already recorded at a
        higher priority is not recorded again, and a property read that is the
        parent of a recorded call is the call's receiver, not a separate access.
        """
        seen: set[str] = set()
        calls: List[str] = []
        found: List[MemberAccess] = []

        def record(access: MemberAccess) -> None:
            seen.add(access.full_path)
            found.append(access)
            result.member_accesses.append(access)
            result.add_reference(access.base_object)

        for m in self._static_pattern.finditer(line):
            base = m.group("base")
            full_path = f"{base}.{m.group('rest')}"
            if full_path in seen or not self._is_imported(base, result):
                continue
            record(
                MemberAccess(
                    base,
                    full_path,
                    m.group("method"),
                    AccessContext.STATIC_METHOD_CALL,
                    m.group("cls"),
                )
            )
            calls.append(full_path)
            logger.debug("Found static method call: %s on class %s", full_path, m.group("cls"))

        for m in METHOD_CALL_PATTERN.finditer(line):
            base = m.group("base")
            full_path = m.group("chain")
            if full_path in seen or not self._is_imported(base, result):
                continue
            record(MemberAccess(base, full_path, m.group("member"), AccessContext.METHOD_CALL))
            calls.append(full_path)
            logger.debug("Found method call: %s", full_path)

        for m in PROPERTY_ACCESS_PATTERN.finditer(line):
            base = m.group("base")
            full_path = m.group("chain")
            if full_path in seen or not self._is_imported(base, result):
                continue
            prefix = full_path + "."
            if any(call.startswith(prefix) for call in calls):
                continue
            record(MemberAccess(base, full_path, m.group("member"), AccessContext.PROPERTY_ACCESS))
            logger.debug("Found property access: %s", full_path)

        return found

    @staticmethod
    def _is_imported(identifier: str, result: ParseResult) -> bool:
        return result.find_binding(identifier) is not None

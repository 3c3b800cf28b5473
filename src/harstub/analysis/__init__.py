"""Static analysis of ArkTS/TypeScript sources: per-file extraction and dependency aggregation."""

from .aggregator import DependencyAggregator, aggregate
from .extractor import ArkTSExtractor
from .models import (
    AccessContext,
    DependencyInfo,
    ImportInfo,
    ImportStyle,
    InterfaceMethod,
    MemberAccess,
    MethodParameter,
    ParseResult,
    TypeKind,
    TypeNode,
)

__all__ = [
    "AccessContext",
    "ArkTSExtractor",
    "DependencyAggregator",
    "DependencyInfo",
    "ImportInfo",
    "ImportStyle",
    "InterfaceMethod",
    "MemberAccess",
    "MethodParameter",
    "ParseResult",
    "TypeKind",
    "TypeNode",
    "aggregate",
]

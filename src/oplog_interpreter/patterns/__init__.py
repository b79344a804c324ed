"""Consolidation patterns and the registry holding the active ones."""

from oplog_interpreter.patterns.base import ConsolidationPattern, SupportsPatternMatching
from oplog_interpreter.patterns.registry import (
    PatternRegistry,
    available_pattern_kinds,
    create_pattern,
    pattern_factory,
    register_pattern_factory,
)
from oplog_interpreter.patterns.swap import SwapPattern

__all__ = [
    "ConsolidationPattern",
    "PatternRegistry",
    "SupportsPatternMatching",
    "SwapPattern",
    "available_pattern_kinds",
    "create_pattern",
    "pattern_factory",
    "register_pattern_factory",
]

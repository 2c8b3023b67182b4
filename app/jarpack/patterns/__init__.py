"""Include/exclude pattern compilation and path selection."""

from jarpack.patterns.glob import CompiledPattern, PatternSyntaxError, compile_pattern
from jarpack.patterns.selector import (
    INCLUDES_ALL,
    Matcher,
    PathSelector,
    directory_matcher,
    simplify,
)

__all__ = [
    "INCLUDES_ALL",
    "CompiledPattern",
    "Matcher",
    "PathSelector",
    "PatternSyntaxError",
    "compile_pattern",
    "directory_matcher",
    "simplify",
]

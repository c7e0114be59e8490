# src/docpatch/core/path/__init__.py
"""Parsing de paths de patch (campos, seletores e operadores de lista)."""

from .parser import (  # noqa: F401
    DELIMITERS,
    MatchType,
    NAVIGATION_MATCH_TYPES,
    PathPart,
    classify_selector,
    detect_delimiter,
    format_path,
    parse_path,
)

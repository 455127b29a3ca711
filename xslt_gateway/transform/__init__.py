"""
Transformation Framework
========================

XSLT style sheets and the fetch-and-render Transformer.

Components:
- Transformer: Renders a remote XML document through a named style sheet
- StyleSheet: A compiled style sheet bound to its name
- StyleSheetLibrary: Resolves transformer names to style sheet files
- ApplyResult: Outcome of applying a style sheet
- read_stylesheet, compile_stylesheet: Parse and compile XSLT files
"""

from xslt_gateway.transform.xslt import (
    ApplyResult,
    StyleSheet,
    StyleSheetLibrary,
    compile_stylesheet,
    output_media_type,
    parse_document,
    read_stylesheet,
)

from xslt_gateway.transform.transformer import (
    Transformer,
)

__all__ = [
    "ApplyResult",
    "StyleSheet",
    "StyleSheetLibrary",
    "Transformer",
    "compile_stylesheet",
    "output_media_type",
    "parse_document",
    "read_stylesheet",
]

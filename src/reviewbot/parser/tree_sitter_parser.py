"""Tree-sitter based parsing for JavaScript and TypeScript sources."""

from __future__ import annotations

import logging

from reviewbot.exceptions import ParserError

logger = logging.getLogger("reviewbot.parser")

# Tree-sitter grammar module and the factory function exposing each language
_TS_LANGUAGES = {
    "javascript": ("tree_sitter_javascript", "language"),
    "typescript": ("tree_sitter_typescript", "language_typescript"),
    "tsx": ("tree_sitter_typescript", "language_tsx"),
}

_language_cache: dict = {}


def is_available(language: str | None = None) -> bool:
    """Check if tree-sitter and the required language grammar are available."""
    try:
        import tree_sitter  # noqa: F401
    except ImportError:
        return False

    if language is None:
        return True

    entry = _TS_LANGUAGES.get(language)
    if not entry:
        return False

    try:
        __import__(entry[0])
        return True
    except ImportError:
        return False


def _get_language(lang: str):
    """Get a tree-sitter Language object for the given language."""
    from tree_sitter import Language

    if lang in _language_cache:
        return _language_cache[lang]

    entry = _TS_LANGUAGES.get(lang)
    if not entry:
        raise ParserError(f"No tree-sitter grammar for language: {lang}")

    module_name, factory = entry
    module = __import__(module_name)
    language = Language(getattr(module, factory)())
    _language_cache[lang] = language
    return language


def parse_source(source: str, language: str = "typescript", strict: bool = False):
    """Parse source text into a tree-sitter Tree.

    tree-sitter recovers from syntax errors, so a tree is always produced.
    A document that is a bare object literal (``{ key: value }``) reads as a
    block statement at the top level; it is reparsed in parentheses so its
    properties come out as ``pair`` nodes.

    Raises:
        ParserError: if the grammar is unknown, or if ``strict`` is set and
            the tree still contains syntax errors.
    """
    from tree_sitter import Parser

    parser = Parser(_get_language(language))
    tree = parser.parse(source.encode("utf-8"))

    if tree.root_node.has_error and source.lstrip().startswith("{"):
        wrapped = parser.parse(f"({source}\n)".encode("utf-8"))
        if not wrapped.root_node.has_error:
            logger.debug("Parsed source as a bare object literal")
            tree = wrapped

    if tree.root_node.has_error:
        row, column = _first_error_point(tree.root_node)
        if strict:
            raise ParserError(f"Syntax error at line {row + 1}, column {column + 1}")
        logger.debug("Syntax error at line %d, continuing with recovered tree", row + 1)

    return tree


def _first_error_point(node) -> tuple[int, int]:
    """Find the start point of the first ERROR or missing node."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            return current.start_point[0], current.start_point[1]
        if current.has_error:
            stack.extend(reversed(current.children))
    return node.start_point[0], node.start_point[1]


def node_text(node) -> str:
    """Return the exact source text a node spans."""
    return node.text.decode("utf-8", errors="replace")

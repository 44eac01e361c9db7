"""Classify object literal properties into scripts, functions and pairs.

A single pre-order walk visits every ``pair`` node (a key/value property of an
object literal). A ``script: "<text>"`` property is recorded as a script; a
property whose value is a function expression is recorded as a function. When
a function expression follows a script that has not been claimed yet, the two
are reported together as a pair and the script leaves the scripts bucket.

Only the most recent unclaimed script can pair, and nothing but a function
claims it: unrelated nodes between the two do not break the association.
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path

from reviewbot.parser.models import FileReport, FunctionSnippet, ScriptPair, detect_language
from reviewbot.parser.tree_sitter_parser import node_text, parse_source

SCRIPT_KEY = "script"

# Node types of function expressions across grammar versions.
# Arrow functions and method shorthand are not function expressions.
FUNCTION_NODE_TYPES = frozenset({"function_expression", "function", "generator_function"})

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
}

_OCTAL = re.compile(r"[0-7]{1,3}")


class ScanState(str, Enum):
    """Whether a script is waiting for a function to pair with."""

    IDLE = "idle"
    AWAITING_FUNCTION = "awaiting_function"


class PairingTracker:
    """Two-state machine carrying the last unclaimed script through a walk."""

    def __init__(self) -> None:
        self.state = ScanState.IDLE
        self.last_script: str | None = None

    def see_script(self, text: str) -> None:
        self.last_script = text
        self.state = ScanState.AWAITING_FUNCTION

    def see_function(self) -> str | None:
        """Claim the pending script, if any, for the function just seen."""
        if self.state is ScanState.AWAITING_FUNCTION:
            self.state = ScanState.IDLE
            return self.last_script
        return None


def iter_preorder(root):
    """Yield ``root`` and all its descendants in pre-order."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def classify_tree(root, file_path: str = "", language: str = "typescript") -> FileReport:
    """Walk a syntax tree and bucket its object literal properties."""
    report = FileReport(file_path=file_path, language=language)
    tracker = PairingTracker()

    for node in iter_preorder(root):
        if node.type != "pair":
            continue

        key_node = node.child_by_field_name("key")
        value_node = node.child_by_field_name("value")
        if key_node is None or value_node is None:
            continue
        key = property_key(key_node)

        if key == SCRIPT_KEY and value_node.type == "string":
            script = string_value(value_node)
            report.scripts.append(script)
            tracker.see_script(script)

        if value_node.type in FUNCTION_NODE_TYPES:
            snippet = FunctionSnippet(name=key, source=node_text(value_node))
            script = tracker.see_function()
            if script is not None:
                # The script appended last is the one being claimed
                report.scripts.pop()
                report.pairs.append(ScriptPair(script=script, function=snippet))
            else:
                report.functions.append(snippet)

    return report


def classify_source(
    source: str,
    file_path: str = "",
    language: str | None = None,
    strict: bool = False,
) -> FileReport:
    """Parse and classify source text."""
    language = language or detect_language(file_path)
    tree = parse_source(source, language, strict=strict)
    return classify_tree(tree.root_node, file_path, language)


def classify_file(
    file_path: str | Path,
    encoding: str = "utf-8",
    strict: bool = False,
    display_path: str | None = None,
) -> FileReport:
    """Read a file from disk and classify it.

    Read and decode errors propagate to the caller.
    """
    path = Path(file_path)
    source = path.read_text(encoding=encoding)
    return classify_source(source, display_path or str(file_path), strict=strict)


def property_key(node) -> str:
    """Name of a property key: identifiers by name, quoted keys unquoted."""
    if node.type == "string":
        return string_value(node)
    return node_text(node)


def string_value(node) -> str:
    """Decode a string literal node to its runtime value."""
    if not any(child.is_named for child in node.children):
        # Empty literal, or a grammar that does not split strings into fragments
        return node_text(node)[1:-1]

    parts: list[str] = []
    for child in node.children:
        if child.type == "string_fragment":
            parts.append(node_text(child))
        elif child.type == "escape_sequence":
            parts.append(_unescape(node_text(child)))
    return "".join(parts)


def _unescape(sequence: str) -> str:
    body = sequence[1:]
    if not body:
        return sequence
    if _OCTAL.fullmatch(body):
        # Legacy octal escape, e.g. \101 or \0
        return chr(int(body, 8))
    if body in _ESCAPES:
        return _ESCAPES[body]
    if body[0] in "\r\n\u2028\u2029":
        # Line continuation
        return ""
    try:
        if body.startswith("u{"):
            return chr(int(body[2:-1], 16))
        if body[0] in "ux" and len(body) > 1:
            return chr(int(body[1:], 16))
    except ValueError:
        return sequence
    return body

"""Source parsing and property classification for review-bot."""

from reviewbot.parser.classifier import classify_file, classify_source, classify_tree
from reviewbot.parser.models import FileReport, FunctionSnippet, ScriptPair, detect_language

__all__ = [
    "FileReport",
    "FunctionSnippet",
    "ScriptPair",
    "classify_file",
    "classify_source",
    "classify_tree",
    "detect_language",
]

"""Data models for classified source files."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class FunctionSnippet(BaseModel):
    """A function-valued property: its key and the function's source text."""

    name: str
    source: str


class ScriptPair(BaseModel):
    """A `script` string and the function property that follows it."""

    script: str
    function: FunctionSnippet


class FileReport(BaseModel):
    """Classification buckets for a single file, in traversal order."""

    file_path: str
    language: str = "typescript"
    scripts: list[str] = Field(default_factory=list)
    functions: list[FunctionSnippet] = Field(default_factory=list)
    pairs: list[ScriptPair] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.scripts or self.functions or self.pairs)


# Language detection by file extension
EXTENSION_LANGUAGE_MAP: dict[str, str] = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "javascript",
}

# The TypeScript grammar also reads plain JavaScript and object literal documents
DEFAULT_LANGUAGE = "typescript"


def detect_language(file_path: str) -> str:
    """Detect the grammar to parse a file with from its extension."""
    ext = Path(file_path).suffix.lower()
    return EXTENSION_LANGUAGE_MAP.get(ext, DEFAULT_LANGUAGE)

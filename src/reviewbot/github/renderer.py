"""Markdown renderer for the review bot comment.

Generates one section per changed file with:
  - Scripts paired with their handler function
  - Standalone scripts
  - Standalone functions
"""

from __future__ import annotations

import re

from reviewbot.config import GITHUB_COMMENT_LIMIT
from reviewbot.parser.models import FileReport

OVERVIEW_HEADER = "# Overview"
NO_FILES_HEADER = "# No files changed ☑️"
TRUNCATION_NOTE = "\n\n> Report truncated: it exceeds GitHub's comment size limit.\n"

_BACKTICK_RUN = re.compile(r"`+")


def render_file_section(report: FileReport, fence_language: str = "typescript") -> str:
    """Render one file's classification buckets as a markdown section."""
    lines: list[str] = [f"## {report.file_path}:", "### Info:"]

    for pair in report.pairs:
        lines.append(f"**Script:** {_inline_code(pair.script)}")
        lines.append(f"**{pair.function.name}(function):**")
        lines.extend(_code_block(pair.function.source, fence_language))
        lines.append("")

    if report.scripts:
        lines.append("### Single Scripts:")
        for script in report.scripts:
            lines.append(f"- {_inline_code(script)}")
        lines.append("")

    if report.functions:
        lines.append("### Single Functions:")
        for function in report.functions:
            lines.append(f"**{function.name}:**")
            lines.extend(_code_block(function.source, fence_language))
            lines.append("")

    return "\n".join(lines) + "\n"


def render_comment(sections: list[str], marker: str) -> str:
    """Assemble the comment body from rendered file sections."""
    return f"{marker_line(marker)}{OVERVIEW_HEADER}\n" + "".join(sections)


def render_empty_comment(marker: str) -> str:
    """Comment body used when no changed file matches the path filter."""
    line = marker_line(marker)
    return f"{line}{NO_FILES_HEADER} {line}"


def marker_line(marker: str) -> str:
    return f"{marker} \n"


def truncate_comment(body: str, limit: int = GITHUB_COMMENT_LIMIT) -> str:
    """Clip a comment body to GitHub's size limit, keeping the marker intact."""
    if len(body) <= limit:
        return body
    keep = max(0, limit - len(TRUNCATION_NOTE))
    return body[:keep] + TRUNCATION_NOTE


def _inline_code(text: str) -> str:
    """Inline code span that survives backticks and line breaks in the text."""
    text = " ".join(text.splitlines())
    longest = max((len(run) for run in _BACKTICK_RUN.findall(text)), default=0)
    ticks = "`" * (longest + 1)
    if text.startswith("`") or text.endswith("`"):
        text = f" {text} "
    return f"{ticks}{text}{ticks}"


def _code_block(source: str, language: str) -> list[str]:
    """Fence source code, lengthening the fence past any backtick run inside."""
    longest = max((len(run) for run in _BACKTICK_RUN.findall(source)), default=0)
    fence = "`" * max(3, longest + 1)
    return [f"{fence}{language}", source, fence]

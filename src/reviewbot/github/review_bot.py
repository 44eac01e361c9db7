"""Review bot: the main entry point for the CI job.

This is what runs for every pull request. It:
1. Lists the existing comments on the PR
2. Keeps the changed files whose path matches the configured filter
3. Parses each one and classifies its scripts and functions
4. Renders one markdown section per file
5. Updates the bot's own comment, or creates it

Usage:
    # In a GitHub Action (PR context from the environment)
    reviewbot review

    # Locally, printing the comment instead of posting it
    reviewbot review --base main --dry-run
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, Field

from reviewbot.config import BotConfig
from reviewbot.exceptions import ConfigError
from reviewbot.github.client import GitHubClient, PullRequest, SyncResult, sync_comment
from reviewbot.github.renderer import (
    render_comment,
    render_empty_comment,
    render_file_section,
    truncate_comment,
)
from reviewbot.parser.classifier import classify_file
from reviewbot.parser.models import FileReport

logger = logging.getLogger("reviewbot.review")


class ReviewResult(BaseModel):
    """Outcome of one review run."""

    body: str
    files: list[FileReport] = Field(default_factory=list)
    sync: SyncResult | None = None  # None on dry runs


def filter_changed_files(
    modified: list[str], created: list[str], path_filter: str = "dev/"
) -> list[str]:
    """Modified then created paths containing ``path_filter``, without repeats."""
    seen = set()
    paths = []
    for path in list(modified) + list(created):
        if path_filter in path and path not in seen:
            seen.add(path)
            paths.append(path)
    return paths


def analyze_file(root: Path, path: str, config: BotConfig) -> FileReport:
    """Read and classify one changed file (path relative to ``root``)."""
    return classify_file(
        root / path,
        encoding=config.scan.encoding,
        strict=config.scan.strict_parse,
        display_path=path,
    )


def build_comment(
    root: Path, paths: list[str], config: BotConfig
) -> tuple[str, list[FileReport]]:
    """Render the comment body for the already filtered changed files."""
    marker = config.comment.marker
    if not paths:
        return render_empty_comment(marker), []

    reports: list[FileReport] = []
    sections: list[str] = []
    for path in paths:
        report = analyze_file(root, path, config)
        logger.debug(
            "%s: %d pair(s), %d script(s), %d function(s)",
            path, len(report.pairs), len(report.scripts), len(report.functions),
        )
        reports.append(report)
        sections.append(render_file_section(report, config.comment.fence_language))

    body = truncate_comment(render_comment(sections, marker), config.comment.max_length)
    return body, reports


def run_review(
    root: Path,
    pr: PullRequest | None,
    modified: list[str],
    created: list[str],
    client: GitHubClient | None = None,
    config: BotConfig | None = None,
    dry_run: bool = False,
) -> ReviewResult:
    """Run the full review pipeline and publish the comment.

    Exactly one comment is written per run. With ``dry_run`` nothing is read
    from or written to GitHub and ``pr`` may be None.
    """
    config = config or BotConfig()

    comments = []
    if not dry_run:
        if pr is None:
            raise ConfigError("A pull request is required unless dry_run is set")
        client = client or GitHubClient()
        comments = client.list_comments(pr)

    paths = filter_changed_files(modified, created, config.scan.path_filter)
    logger.info(
        "%d of %d changed file(s) match '%s'",
        len(paths), len(modified) + len(created), config.scan.path_filter,
    )

    body, reports = build_comment(root, paths, config)

    if dry_run:
        return ReviewResult(body=body, files=reports)

    sync = sync_comment(client, pr, body, comments, config.comment.search_token)
    return ReviewResult(body=body, files=reports, sync=sync)

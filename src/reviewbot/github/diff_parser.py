"""Changed-file discovery: which files a pull request modifies or creates.

Parses the output of `git diff --name-status` into FileChange entries. CI
systems that already know the changed files can skip this and pass the lists
straight to the review bot.
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path

from reviewbot.exceptions import DiffError

logger = logging.getLogger("reviewbot.diff")

_STATUS_NAMES = {
    "A": "added",
    "C": "added",
    "M": "modified",
    "T": "modified",
    "D": "deleted",
    "R": "renamed",
}


@dataclass
class FileChange:
    """A single changed file."""
    path: str
    status: str  # 'added', 'modified', 'deleted', 'renamed'
    old_path: str | None = None  # For renames and copies


def parse_name_status(text: str) -> list[FileChange]:
    """Parse `git diff --name-status` output into FileChange objects."""
    changes: list[FileChange] = []

    for line in text.splitlines():
        if not line.strip():
            continue
        parts = line.split("\t")
        code = parts[0][:1]
        status = _STATUS_NAMES.get(code)
        if status is None or len(parts) < 2:
            continue

        # Renames and copies carry a similarity score and two paths
        if code in ("R", "C") and len(parts) >= 3:
            changes.append(FileChange(path=parts[2], status=status, old_path=parts[1]))
        else:
            changes.append(FileChange(path=parts[1], status=status))

    return changes


def split_changes(changes: list[FileChange]) -> tuple[list[str], list[str]]:
    """Split changes into (modified, created) path lists.

    Renamed files count as modified under their new path; deleted files are
    dropped since there is nothing left to read.
    """
    modified = [c.path for c in changes if c.status in ("modified", "renamed")]
    created = [c.path for c in changes if c.status == "added"]
    return modified, created


def get_name_status(root: Path, base: str = "main") -> str:
    """Get `git diff --name-status` between the current branch and base."""
    try:
        result = subprocess.run(
            ["git", "diff", "--name-status", "-M", f"{base}...HEAD"],
            cwd=root,
            capture_output=True,
            text=True,
            timeout=30,
        )
        if result.returncode == 0:
            return result.stdout
        logger.debug("No merge base with %s, diffing against it directly", base)
        # Fallback: diff against base directly
        result = subprocess.run(
            ["git", "diff", "--name-status", "-M", base],
            cwd=root,
            capture_output=True,
            text=True,
            timeout=30,
        )
    except (subprocess.TimeoutExpired, FileNotFoundError) as e:
        raise DiffError(f"Could not run git diff: {e}") from e

    if result.returncode != 0:
        raise DiffError(f"git diff against '{base}' failed: {result.stderr.strip()}")
    return result.stdout


def get_changed_files(root: Path, base: str = "main") -> tuple[list[str], list[str]]:
    """Get the (modified, created) files between the current branch and base."""
    return split_changes(parse_name_status(get_name_status(root, base)))


def get_pr_changed_files(root: Path, base: str = "main") -> tuple[list[str], list[str]]:
    """Get the changed files for the current PR (GitHub Actions context)."""
    base_ref = os.environ.get("GITHUB_BASE_REF")
    if base_ref:
        return get_changed_files(root, base=f"origin/{base_ref}")
    return get_changed_files(root, base=base)

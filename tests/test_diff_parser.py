"""Tests for changed-file discovery."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from reviewbot.exceptions import DiffError
from reviewbot.github import diff_parser
from reviewbot.github.diff_parser import (
    FileChange,
    get_changed_files,
    get_pr_changed_files,
    parse_name_status,
    split_changes,
)

SAMPLE_NAME_STATUS = """\
M\tdev/jobs.ts
A\tdev/new.ts
D\tdev/old.ts
R087\tdev/before.ts\tdev/after.ts
M\tsrc/main.ts
"""


class TestNameStatusParser:
    def test_parse_statuses(self):
        changes = parse_name_status(SAMPLE_NAME_STATUS)
        assert [(c.status, c.path) for c in changes] == [
            ("modified", "dev/jobs.ts"),
            ("added", "dev/new.ts"),
            ("deleted", "dev/old.ts"),
            ("renamed", "dev/after.ts"),
            ("modified", "src/main.ts"),
        ]

    def test_rename_keeps_old_path(self):
        changes = parse_name_status(SAMPLE_NAME_STATUS)
        assert changes[3].old_path == "dev/before.ts"

    def test_parse_empty(self):
        assert parse_name_status("") == []

    def test_unknown_status_is_skipped(self):
        assert parse_name_status("X\tweird.ts\nU\tconflict.ts\n") == []


class TestSplitChanges:
    def test_split(self):
        modified, created = split_changes(parse_name_status(SAMPLE_NAME_STATUS))
        assert modified == ["dev/jobs.ts", "dev/after.ts", "src/main.ts"]
        assert created == ["dev/new.ts"]

    def test_deleted_only(self):
        assert split_changes([FileChange(path="a.ts", status="deleted")]) == ([], [])


class _FakeGit:
    def __init__(self, results):
        self.results = list(results)
        self.calls = []

    def __call__(self, args, **kwargs):
        self.calls.append(args)
        returncode, stdout = self.results.pop(0)
        return subprocess.CompletedProcess(args, returncode, stdout=stdout, stderr="fatal: bad revision")


class TestGitDiff:
    def test_three_dot_diff(self, monkeypatch, tmp_path: Path):
        git = _FakeGit([(0, SAMPLE_NAME_STATUS)])
        monkeypatch.setattr(diff_parser.subprocess, "run", git)

        modified, created = get_changed_files(tmp_path, "main")
        assert created == ["dev/new.ts"]
        assert git.calls[0][-1] == "main...HEAD"

    def test_falls_back_to_direct_diff(self, monkeypatch, tmp_path: Path):
        git = _FakeGit([(128, ""), (0, "A\tdev/x.ts\n")])
        monkeypatch.setattr(diff_parser.subprocess, "run", git)

        assert get_changed_files(tmp_path, "main") == ([], ["dev/x.ts"])
        assert git.calls[1][-1] == "main"

    def test_failure_raises(self, monkeypatch, tmp_path: Path):
        git = _FakeGit([(128, ""), (128, "")])
        monkeypatch.setattr(diff_parser.subprocess, "run", git)

        with pytest.raises(DiffError, match="main"):
            get_changed_files(tmp_path, "main")

    def test_missing_git_raises(self, monkeypatch, tmp_path: Path):
        def runner(args, **kwargs):
            raise FileNotFoundError("git")

        monkeypatch.setattr(diff_parser.subprocess, "run", runner)
        with pytest.raises(DiffError):
            get_changed_files(tmp_path)

    def test_pr_base_from_environment(self, monkeypatch, tmp_path: Path):
        git = _FakeGit([(0, "")])
        monkeypatch.setattr(diff_parser.subprocess, "run", git)
        monkeypatch.setenv("GITHUB_BASE_REF", "release")

        get_pr_changed_files(tmp_path)
        assert git.calls[0][-1] == "origin/release...HEAD"

"""GitHub issue comments through the `gh` CLI, and the comment synchronizer.

The bot owns exactly one comment per pull request. It is recognised by a
marker token embedded in its body: when that comment exists its body is
replaced, otherwise a new comment is created. Every run performs a single
write and never retries; any failed call raises GitHubError.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
from collections.abc import Callable, Iterable
from pathlib import Path

from pydantic import BaseModel

from reviewbot.exceptions import ConfigError, GitHubError

logger = logging.getLogger("reviewbot.github")

Runner = Callable[..., subprocess.CompletedProcess]


class PullRequest(BaseModel):
    """The pull request being reviewed."""

    owner: str
    repo: str
    number: int

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


class IssueComment(BaseModel):
    """An issue (pull request conversation) comment."""

    id: int
    body: str = ""


class SyncResult(BaseModel):
    """What the synchronizer did: 'created' or 'updated' a comment."""

    action: str
    comment_id: int


def pull_request_from_env(
    repository: str | None = None, number: int | None = None
) -> PullRequest:
    """Resolve the pull request from arguments or the GitHub Actions environment.

    Uses GITHUB_REPOSITORY ("owner/repo") and either PR_NUMBER or the
    pull_request.number of the event payload at GITHUB_EVENT_PATH.
    """
    repository = repository or os.environ.get("GITHUB_REPOSITORY", "")
    if "/" not in repository:
        raise ConfigError(
            "Repository unknown. Pass --repo owner/name or set GITHUB_REPOSITORY."
        )
    owner, repo = repository.split("/", 1)

    if number is None and os.environ.get("PR_NUMBER"):
        number = int(os.environ["PR_NUMBER"])

    if number is None:
        event_path = os.environ.get("GITHUB_EVENT_PATH")
        if event_path and Path(event_path).exists():
            with open(event_path) as f:
                event = json.load(f)
            number = event.get("pull_request", {}).get("number")

    if not number:
        raise ConfigError(
            "Pull request number unknown. Pass --pr or run on a pull_request event."
        )

    return PullRequest(owner=owner, repo=repo, number=int(number))


class GitHubClient:
    """Minimal issue-comment API over `gh api`."""

    def __init__(self, runner: Runner | None = None, timeout: int = 15) -> None:
        self._runner = runner or subprocess.run
        self.timeout = timeout

    def list_comments(self, pr: PullRequest) -> list[IssueComment]:
        """List every comment on the pull request, across all pages."""
        output = self._api([
            "--paginate",
            f"repos/{pr.full_name}/issues/{pr.number}/comments",
            "--jq", ".[] | {id, body} | @json",
        ])
        comments = []
        for line in output.splitlines():
            if not line.strip():
                continue
            data = json.loads(line)
            comments.append(IssueComment(id=data["id"], body=data.get("body") or ""))
        logger.debug("Found %d existing comment(s) on %s#%d", len(comments), pr.full_name, pr.number)
        return comments

    def create_comment(self, pr: PullRequest, body: str) -> IssueComment:
        output = self._api(
            ["--method", "POST", f"repos/{pr.full_name}/issues/{pr.number}/comments",
             "--input", "-"],
            payload={"body": body},
        )
        return _comment_from_json(output)

    def update_comment(self, pr: PullRequest, comment_id: int, body: str) -> IssueComment:
        output = self._api(
            ["--method", "PATCH", f"repos/{pr.full_name}/issues/comments/{comment_id}",
             "--input", "-"],
            payload={"body": body},
        )
        return _comment_from_json(output)

    def _api(self, args: list[str], payload: dict | None = None) -> str:
        """Run a `gh api` command and return its stdout."""
        stdin = json.dumps(payload) if payload is not None else None
        try:
            result = self._runner(
                ["gh", "api", *args],
                input=stdin,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise GitHubError(f"gh api timed out after {self.timeout}s") from e
        except FileNotFoundError as e:
            raise GitHubError("The GitHub CLI (gh) is not installed") from e

        if result.returncode != 0:
            message = (result.stderr or "").strip() or f"exit status {result.returncode}"
            endpoint = next((a for a in args if a.startswith("repos/")), "")
            raise GitHubError(f"gh api {endpoint}: {message}", returncode=result.returncode)
        return result.stdout


def _comment_from_json(output: str) -> IssueComment:
    data = json.loads(output)
    return IssueComment(id=data["id"], body=data.get("body") or "")


def find_marked_comment(
    comments: Iterable[IssueComment], token: str
) -> IssueComment | None:
    """Find the first comment whose body contains the marker token."""
    for comment in comments:
        if token in comment.body:
            return comment
    return None


def sync_comment(
    client: GitHubClient,
    pr: PullRequest,
    body: str,
    comments: Iterable[IssueComment],
    token: str,
) -> SyncResult:
    """Update the bot's existing comment in place, or create it."""
    existing = find_marked_comment(comments, token)
    if existing is not None:
        client.update_comment(pr, existing.id, body)
        logger.info("Updated review comment %d on %s#%d", existing.id, pr.full_name, pr.number)
        return SyncResult(action="updated", comment_id=existing.id)

    created = client.create_comment(pr, body)
    logger.info("Created review comment %d on %s#%d", created.id, pr.full_name, pr.number)
    return SyncResult(action="created", comment_id=created.id)

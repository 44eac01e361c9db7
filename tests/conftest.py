"""Shared test fixtures for review-bot."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path

import pytest


class FakeGh:
    """Stands in for `subprocess.run` when the client shells out to `gh api`.

    Serves the configured comments for list calls and echoes back created or
    updated comments, recording every call.
    """

    def __init__(self, comments: list[dict] | None = None) -> None:
        self.comments = comments or []
        self.calls: list[tuple[list[str], dict | None]] = []
        self.returncode = 0
        self.stderr = ""
        self.next_id = 9001

    def __call__(self, args, input=None, **kwargs):
        payload = json.loads(input) if input else None
        self.calls.append((list(args), payload))

        if self.returncode != 0:
            return subprocess.CompletedProcess(args, self.returncode, stdout="", stderr=self.stderr)

        if "--paginate" in args:
            stdout = "\n".join(
                json.dumps({"id": c["id"], "body": c.get("body")}) for c in self.comments
            )
        elif "POST" in args:
            stdout = json.dumps({"id": self.next_id, "body": payload["body"]})
        elif "PATCH" in args:
            endpoint = next(a for a in args if a.startswith("repos/"))
            stdout = json.dumps({"id": int(endpoint.rsplit("/", 1)[-1]), "body": payload["body"]})
        else:
            stdout = ""
        return subprocess.CompletedProcess(args, 0, stdout=stdout + "\n", stderr="")

    @property
    def methods(self) -> list[str]:
        """HTTP method of every call, GET for list calls."""
        methods = []
        for args, _ in self.calls:
            if "--method" in args:
                methods.append(args[args.index("--method") + 1])
            else:
                methods.append("GET")
        return methods

    @property
    def writes(self) -> list[tuple[list[str], dict | None]]:
        return [(args, payload) for args, payload in self.calls if "--method" in args]


@pytest.fixture
def fake_gh() -> FakeGh:
    return FakeGh()


@pytest.fixture
def sample_ts_source() -> str:
    """A job definition file with paired, standalone and nested entries."""
    return '''import { notify, rm } from "./util";

export const jobs = {
    build: {
        script: "npm run build",
        onError: function () {
            notify("build failed");
        },
    },
    docs: {
        script: "npm run docs",
        retries: 2,
    },
};

export const hooks = [
    { onStart: () => notify("start") },
    { name: "plain" },
];
'''


@pytest.fixture
def dev_repo(tmp_path: Path, sample_ts_source: str) -> Path:
    """A checkout with files inside and outside the dev/ directory."""
    dev_dir = tmp_path / "dev"
    dev_dir.mkdir()

    (dev_dir / "a.ts").write_text('{ script: "build", onError: function(){} }')
    (dev_dir / "jobs.ts").write_text(sample_ts_source)
    (dev_dir / "handlers.js").write_text('''module.exports = {
    cleanup: function () {
        return true;
    },
    script: "npm test",
};
''')

    src_dir = tmp_path / "src"
    src_dir.mkdir()
    (src_dir / "main.ts").write_text('export default { script: "ignored", run: function () {} };\n')

    return tmp_path

"""Command-line interface for review-bot."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from reviewbot import __version__
from reviewbot.config import load_config, save_config, set_config_value
from reviewbot.exceptions import ReviewBotError
from reviewbot.ui.console import Console

console = Console()


def _get_root(path: str | None) -> Path:
    """Resolve the repository checkout or error."""
    root = Path(path or ".").resolve()
    if not root.exists():
        console.error(f"Path does not exist: {path}")
        sys.exit(1)
    return root


def _load_config(root: Path):
    """Load the project config or report why it is unusable."""
    try:
        return load_config(root)
    except ReviewBotError as e:
        console.error(str(e))
        sys.exit(1)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="[reviewbot] %(levelname)s %(name)s: %(message)s",
    )


@click.group()
@click.version_option(version=__version__, prog_name="reviewbot")
def main():
    """review-bot - summarize scripts and handlers touched by a pull request."""
    pass


@main.command()
@click.option("--path", "-p", default=None, help="Path to the repository checkout.")
@click.option("--base", "-b", default=None, help="Base ref to diff against (default: config base_ref).")
@click.option("--repo", default=None, help="Repository as owner/name (default: GITHUB_REPOSITORY).")
@click.option("--pr", "pr_number", default=None, type=int, help="Pull request number.")
@click.option("--modified", "-m", multiple=True, help="Modified file (can specify multiple).")
@click.option("--created", "-c", multiple=True, help="Created file (can specify multiple).")
@click.option("--dry-run", is_flag=True, help="Print the comment instead of posting it.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def review(
    path: str | None, base: str | None, repo: str | None, pr_number: int | None,
    modified: tuple[str, ...], created: tuple[str, ...], dry_run: bool, verbose: bool,
):
    """Post or update the review comment on the current pull request.

    Changed files are taken from --modified/--created when given, otherwise
    from `git diff --name-status <base>...HEAD`.

    Examples:

        reviewbot review

        reviewbot review --dry-run --base main

        reviewbot review --repo acme/app --pr 42 -m dev/jobs.ts
    """
    _configure_logging(verbose)
    root = _get_root(path)
    config = _load_config(root)

    from reviewbot.github.client import pull_request_from_env
    from reviewbot.github.diff_parser import get_changed_files, get_pr_changed_files
    from reviewbot.github.review_bot import run_review

    try:
        if modified or created:
            changed_modified, changed_created = list(modified), list(created)
        elif base:
            changed_modified, changed_created = get_changed_files(root, base)
        else:
            changed_modified, changed_created = get_pr_changed_files(root, config.base_ref)

        pr = None if dry_run else pull_request_from_env(repo, pr_number)
        result = run_review(
            root, pr, changed_modified, changed_created, config=config, dry_run=dry_run,
        )
    except ReviewBotError as e:
        console.error(str(e))
        sys.exit(1)

    if dry_run:
        click.echo(result.body)
        return
    console.show_sync_result(result.sync)


@main.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--markdown", "as_markdown", is_flag=True, help="Print the rendered comment sections.")
@click.option("--strict", is_flag=True, help="Fail on syntax errors.")
def scan(files: tuple[str, ...], as_markdown: bool, strict: bool):
    """Classify local files and show their scripts and functions."""
    from reviewbot.github.renderer import render_file_section
    from reviewbot.parser.classifier import classify_file

    config = _load_config(Path.cwd())

    for file_path in files:
        try:
            report = classify_file(
                file_path,
                encoding=config.scan.encoding,
                strict=strict or config.scan.strict_parse,
            )
        except ReviewBotError as e:
            console.error(f"{file_path}: {e}")
            sys.exit(1)

        if as_markdown:
            click.echo(render_file_section(report, config.comment.fence_language))
        else:
            console.show_file_report(report)


@main.group()
def config():
    """View or modify review-bot configuration."""
    pass


@config.command("show")
@click.option("--path", "-p", default=None, help="Path to the repository checkout.")
def config_show(path: str | None):
    """Show current configuration."""
    root = _get_root(path)
    cfg = _load_config(root)
    click.echo(json.dumps(cfg.model_dump(), indent=2))


@config.command("set")
@click.argument("key")
@click.argument("value")
@click.option("--path", "-p", default=None, help="Path to the repository checkout.")
def config_set(key: str, value: str, path: str | None):
    """Set a configuration value (e.g., scan.path_filter src/)."""
    root = _get_root(path)
    cfg = _load_config(root)
    try:
        cfg = set_config_value(cfg, key, value)
    except (KeyError, ValueError) as e:
        console.error(str(e))
        sys.exit(1)
    save_config(root, cfg)
    console.success(f"Set {key} = {value}")


if __name__ == "__main__":
    main()

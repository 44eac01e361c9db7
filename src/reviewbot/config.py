"""Configuration management for review-bot."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from reviewbot.exceptions import ConfigError

REVIEWBOT_DIR = ".reviewbot"
CONFIG_FILE = "config.json"

# GitHub rejects issue comments longer than this
GITHUB_COMMENT_LIMIT = 65536


class CommentConfig(BaseModel):
    """How the pull request comment is marked and rendered."""

    marker_id: str = "review-bot"
    fence_language: str = "typescript"
    max_length: int = GITHUB_COMMENT_LIMIT

    @property
    def marker(self) -> str:
        return f"<!-- id: {self.marker_id} -->"

    @property
    def search_token(self) -> str:
        """Substring that identifies a comment owned by this bot."""
        return f"id: {self.marker_id}"


class ScanConfig(BaseModel):
    """Which changed files are scanned and how they are parsed."""

    path_filter: str = "dev/"
    strict_parse: bool = False
    encoding: str = "utf-8"


class BotConfig(BaseModel):
    """Full project configuration."""

    base_ref: str = "main"
    comment: CommentConfig = Field(default_factory=CommentConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)


def get_reviewbot_dir(root: Path) -> Path:
    """Get the .reviewbot directory for a project root."""
    return root / REVIEWBOT_DIR


def load_config(root: Path) -> BotConfig:
    """Load configuration from .reviewbot/config.json, or the defaults."""
    config_path = get_reviewbot_dir(root) / CONFIG_FILE
    if not config_path.exists():
        return BotConfig()
    try:
        data = json.loads(config_path.read_text())
        return BotConfig(**data)
    except (json.JSONDecodeError, TypeError, ValidationError) as e:
        raise ConfigError(f"Invalid config file {config_path}: {e}") from e


def save_config(root: Path, config: BotConfig) -> None:
    """Save configuration to .reviewbot/config.json."""
    rb_dir = get_reviewbot_dir(root)
    rb_dir.mkdir(parents=True, exist_ok=True)
    config_path = rb_dir / CONFIG_FILE
    config_path.write_text(json.dumps(config.model_dump(), indent=2))


def set_config_value(config: BotConfig, key: str, value: Any) -> BotConfig:
    """Set a nested config value using dot notation (e.g., 'scan.path_filter')."""
    parts = key.split(".")
    data = config.model_dump()
    target = data
    for part in parts[:-1]:
        if part not in target or not isinstance(target[part], dict):
            raise KeyError(f"Invalid config key: {key}")
        target = target[part]
    if parts[-1] not in target or isinstance(target[parts[-1]], dict):
        raise KeyError(f"Invalid config key: {key}")
    target[parts[-1]] = value
    return BotConfig(**data)

"""review-bot: annotate pull requests with the scripts and handlers they touch."""

__version__ = "0.1.0"

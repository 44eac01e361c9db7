"""Pull request review bot: summarize scripts and handlers in changed files.

Runs in CI and keeps a single comment on the PR up to date with:
  - Scripts paired with the function that handles them
  - Standalone scripts
  - Standalone functions
"""

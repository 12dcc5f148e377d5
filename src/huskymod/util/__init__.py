"""
Utility functions and helpers for huskymod.

This package provides reusable utilities:

- **logger.py**: Centralized logging configuration with colored console output,
  a shared per-session log file, and suppression of noisy Discord internals.
  Uses prompt_toolkit for console output that does not clobber active prompts.

- **discord_utils.py**: Stateless Discord helpers for permission lookups,
  role-hierarchy checks, member resolution and mentions.
"""

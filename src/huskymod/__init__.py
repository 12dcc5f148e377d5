"""huskymod: permission-gated moderation commands for py-cord bots."""

__version__ = "0.1.0"

"""Version information for devnote-search."""

__version__ = "1.0.0"

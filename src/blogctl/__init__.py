"""blogctl — build, lint, and author a Markdown technical blog."""

__version__ = "0.4.0"

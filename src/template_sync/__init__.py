"""Keep a local workspace in sync with remote content templates."""

__version__ = "0.3.0"

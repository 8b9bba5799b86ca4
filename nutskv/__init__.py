"""Storage building blocks for an embedded key/value store: entries, a file cache and errors."""

__version__ = "0.1.0"
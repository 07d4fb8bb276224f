"""Directory-scoped file listing and streaming service."""

__version__ = "0.1.0"

"""Lead generation backend: sources, prospects, campaigns and AI helpers."""

__version__ = "1.0.0"

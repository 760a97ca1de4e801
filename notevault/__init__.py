"""Inspect, query, search and rank a directory of Markdown notes."""

__version__ = "0.1.0"
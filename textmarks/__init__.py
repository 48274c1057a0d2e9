"""Span annotation toolkit: selection snapping, mark storage and rendering segments."""

__version__ = "0.3.0"

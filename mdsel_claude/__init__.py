"""Steer coding agents toward selector-based Markdown retrieval with mdsel."""

__version__ = "1.0.0"

"""Backport a merged change to several release branches."""

__version__ = "0.3.0"

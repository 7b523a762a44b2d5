"""Deprecation Scanner client — validate, scan and export repository deprecation reports."""

__version__ = "1.0.0"

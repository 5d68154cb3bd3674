"""Houndify CLI - Run text and voice queries from the command line."""

__version__ = "1.0.0"

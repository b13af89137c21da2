"""Utility helpers: logging and version information."""

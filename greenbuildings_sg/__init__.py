"""Offline data pipeline for the Singapore green building catalogue."""

__version__ = "1.0.0"

"""Scaffold Butano Game Boy Advance projects."""

__version__ = "0.3.0"

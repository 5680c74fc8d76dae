"""Spaced-repetition tracker for solved exercises."""

__version__ = "0.1.0"

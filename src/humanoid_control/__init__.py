"""Humanoid whole-body trajectory control."""

__version__ = "0.1.0"

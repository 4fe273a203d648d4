"""Deterministic crew competency and stability scoring."""

__version__ = "0.1.0"
